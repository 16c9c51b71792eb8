from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import CaptureMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import coordinates_from_row, db_cursor, fetchall, fetchone
from ..geo.geofence import Coordinates
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, entry_time, entry_lng, entry_lat, method,
    exit_time, exit_lng, exit_lat
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        entry_time=r["entry_time"],
        entry_location=coordinates_from_row(r, "entry"),
        method=CaptureMethod(r["method"]),
        exit_time=r.get("exit_time"),
        exit_location=coordinates_from_row(r, "exit"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_entry(
        self,
        *,
        employee_id: int,
        entry_time: datetime,
        entry_location: Coordinates,
        method: CaptureMethod,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, entry_time, entry_lng, entry_lat, method)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), entry_time, entry_location.lng, entry_location.lat, method.value),
            )
            return int(cur.lastrowid)

    def find_latest_open(
        self, *, employee_id: int, since: datetime, until: Optional[datetime] = None
    ) -> Optional[AttendanceRecord]:
        sql = f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE employee_id=%s AND exit_time IS NULL AND entry_time >= %s
        """
        params: list = [int(employee_id), since]
        if until is not None:
            sql += " AND entry_time < %s"
            params.append(until)
        sql += " ORDER BY entry_time DESC LIMIT 1"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def close_entry(self, *, attendance_id: int, exit_time: datetime, exit_location: Coordinates) -> bool:
        # Conditional update: a concurrent exit for the same record matches zero rows.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET exit_time=%s, exit_lng=%s, exit_lat=%s
                WHERE attendance_id=%s AND exit_time IS NULL
                """,
                (exit_time, exit_location.lng, exit_location.lat, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s
                ORDER BY entry_time DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_between(self, *, employee_id: int, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND entry_time >= %s AND entry_time < %s
                ORDER BY entry_time ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]
