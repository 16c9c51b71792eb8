"""Example: use the service layer directly (no Flask).

Controllers stay thin; the attendance rules live in the services.
"""

import importlib

from config import get_settings_module

from src.hr_attendance.hr_attendance.common.logging import configure_logging
from src.hr_attendance.hr_attendance.container import build_container
from src.hr_attendance.hr_attendance.core.enums import Role
from src.hr_attendance.hr_attendance.core.policy import AttendancePolicy
from src.hr_attendance.hr_attendance.employees.model import Principal
from src.hr_attendance.hr_attendance.notifications.mailer import MailSettings, SmtpMailer


def main():
    settings = importlib.import_module(get_settings_module())
    logger = configure_logging("INFO")
    container = build_container(
        db_config=settings.DB_CONFIG,
        policy=AttendancePolicy.from_settings(settings),
        mailer=SmtpMailer(MailSettings.from_settings(settings)),
        logger=logger,
        jwt_secret=settings.JWT_SECRET,
        qr_secret=settings.QR_SECRET,
    )
    admin = Principal(actor_id=1, role=Role.ADMIN)
    for report in container.report_service.build_fleet_report(principal=admin):
        print(report.to_dict())


if __name__ == "__main__":
    main()
