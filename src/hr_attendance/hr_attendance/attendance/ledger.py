from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import start_of_day
from ..common.logging import kv
from ..core.enums import CaptureMethod, OpenSessionPolicy, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.policy import AttendancePolicy
from ..geo.geofence import Coordinates
from .model import AttendanceRecord
from .repository import AttendanceRepository


class AttendanceLedger:
    """Entry/exit sessions per employee.

    Callers run authorization, admissibility and geofence checks first; the
    ledger only owns the session rules (open-session lookup, exit ordering,
    single winner on concurrent exits).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        policy: AttendancePolicy,
        logger: Optional[logging.Logger] = None,
    ):
        self._attendance = attendance
        self._policy = policy
        self._log = logger or logging.getLogger(__name__)

    def session_window_start(self, *, actor_role: Role, now: datetime) -> datetime:
        if actor_role == Role.ADMIN:
            return now - self._policy.admin_correction_window
        return start_of_day(now)

    def create_entry(
        self,
        *,
        employee_id: int,
        timestamp: datetime,
        location: Coordinates,
        method: CaptureMethod,
    ) -> AttendanceRecord:
        day_start = start_of_day(timestamp)
        open_record = self._attendance.find_latest_open(
            employee_id=employee_id,
            since=day_start,
            until=day_start + timedelta(days=1),
        )
        if open_record:
            if self._policy.open_session_policy == OpenSessionPolicy.REJECT:
                raise ValidationError("An attendance session is already open for today")
            self._log.warning(
                "entry created while a session is open %s",
                kv(employee_id=employee_id, open_attendance_id=open_record.attendance_id),
            )

        attendance_id = self._attendance.create_entry(
            employee_id=employee_id,
            entry_time=timestamp,
            entry_location=location,
            method=method,
        )
        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            entry_time=timestamp,
            entry_location=location,
            method=method,
        )

    def close_entry(
        self,
        *,
        employee_id: int,
        exit_time: datetime,
        exit_location: Coordinates,
        actor_role: Role,
        now: datetime,
    ) -> AttendanceRecord:
        since = self.session_window_start(actor_role=actor_role, now=now)
        record = self._attendance.find_latest_open(employee_id=employee_id, since=since)
        if not record:
            raise NotFoundError("No open attendance session found")

        if exit_time <= record.entry_time:
            raise ValidationError(
                "Exit time must be after entry time",
                errors=[{"field": "exitTime", "message": "must be after entry time"}],
            )

        closed = self._attendance.close_entry(
            attendance_id=record.attendance_id,
            exit_time=exit_time,
            exit_location=exit_location,
        )
        if not closed:
            raise ConflictError("Attendance session was already closed")

        return AttendanceRecord(
            attendance_id=record.attendance_id,
            employee_id=record.employee_id,
            entry_time=record.entry_time,
            entry_location=record.entry_location,
            method=record.method,
            exit_time=exit_time,
            exit_location=exit_location,
        )

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_employee(employee_id, limit)
