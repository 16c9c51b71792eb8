from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = "notification_id, employee_id, message, type, is_read, created_at"


def _to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        employee_id=int(r["employee_id"]),
        message=r["message"],
        type=NotificationType(r["type"]),
        read=bool(r["is_read"]),
        created_at=r["created_at"],
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, employee_id: int, message: str, type: NotificationType, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(employee_id, message, type, is_read, created_at)
                VALUES(%s,%s,%s,0,%s)
                """,
                (int(employee_id), message, type.value, created_at),
            )
            return int(cur.lastrowid)

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=%s", (int(notification_id),))
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM notifications
                WHERE employee_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE notification_id=%s", (int(notification_id),))
            return cur.rowcount > 0

    def mark_all_read(self, employee_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE employee_id=%s AND is_read=0",
                (int(employee_id),),
            )
            return int(cur.rowcount)

    def delete_read_before(self, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notifications WHERE is_read=1 AND created_at < %s", (cutoff,))
            return int(cur.rowcount)
