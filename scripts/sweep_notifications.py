"""Retention sweep for read notifications.

Meant for cron: deletes read notifications older than the retention window.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_attendance.hr_attendance.common.datetime_utils import now_local
from src.hr_attendance.hr_attendance.common.logging import configure_logging
from src.hr_attendance.hr_attendance.database.connection import DBConfig, DatabaseConnection
from src.hr_attendance.hr_attendance.notifications.mysql_notification_repository import MySQLNotificationRepository
from src.hr_attendance.hr_attendance.notifications.service import NotificationService


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_DIR", "") or None)

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))
    service = NotificationService(MySQLNotificationRepository(conn), logger=logger.getChild("notifications"))
    deleted = service.sweep(now=now_local())
    print(f"OK: Deleted {deleted} old notifications")


if __name__ == "__main__":
    main()
