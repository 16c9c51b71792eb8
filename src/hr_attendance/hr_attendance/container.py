from __future__ import annotations

import logging
from dataclasses import dataclass

from .attendance.factory import CaptureAdapterFactory
from .attendance.ledger import AttendanceLedger
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.qr_token import QrTokenCodec
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.policy import AttendancePolicy
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeService
from .notifications.mailer import Mailer
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.notifier import PolicyNotifier
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .reports.calculator import StandardPresenceCalculator
from .reports.service import PresenceReportService


@dataclass(frozen=True)
class Container:
    policy: AttendancePolicy
    logger: logging.Logger

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    notifications_repo: NotificationRepository

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    report_service: PresenceReportService
    notification_service: NotificationService
    notifier: PolicyNotifier


def wire(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    notifications_repo: NotificationRepository,
    mailer: Mailer,
    policy: AttendancePolicy,
    logger: logging.Logger,
    jwt_secret: str,
    qr_secret: str,
    jwt_expires_hours: int = 24,
    notifier_executor=None,
) -> Container:
    """Build every service on top of the given repositories."""
    notifier = PolicyNotifier(
        notifications_repo,
        employees_repo,
        mailer,
        executor=notifier_executor,
        logger=logger.getChild("notifier"),
    )
    codec = QrTokenCodec(qr_secret)
    ledger = AttendanceLedger(attendance_repo, policy=policy, logger=logger.getChild("ledger"))
    adapters = CaptureAdapterFactory(
        employees=employees_repo,
        codec=codec,
        notifier=notifier,
        policy=policy,
        logger=logger.getChild("capture"),
    )

    return Container(
        policy=policy,
        logger=logger,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        notifications_repo=notifications_repo,
        auth_service=AuthService(
            employees_repo,
            secret=jwt_secret,
            expires_hours=jwt_expires_hours,
            logger=logger.getChild("auth"),
        ),
        employee_service=EmployeeService(employees_repo, logger=logger.getChild("employees")),
        attendance_service=AttendanceService(
            ledger,
            employees_repo,
            adapters,
            notifier,
            codec,
            policy=policy,
            logger=logger.getChild("attendance"),
        ),
        report_service=PresenceReportService(
            attendance_repo,
            employees_repo,
            calculator=StandardPresenceCalculator(late_hour=policy.late_hour),
        ),
        notification_service=NotificationService(notifications_repo, logger=logger.getChild("notifications")),
        notifier=notifier,
    )


def build_container(
    *,
    db_config: dict,
    policy: AttendancePolicy,
    mailer: Mailer,
    logger: logging.Logger,
    jwt_secret: str,
    qr_secret: str,
    jwt_expires_hours: int = 24,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        mailer=mailer,
        policy=policy,
        logger=logger,
        jwt_secret=jwt_secret,
        qr_secret=qr_secret,
        jwt_expires_hours=jwt_expires_hours,
    )
