from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CaptureMethod
from ..geo.geofence import Coordinates
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_entry(
        self,
        *,
        employee_id: int,
        entry_time: datetime,
        entry_location: Coordinates,
        method: CaptureMethod,
    ) -> int:
        raise NotImplementedError

    def find_latest_open(
        self, *, employee_id: int, since: datetime, until: Optional[datetime] = None
    ) -> Optional[AttendanceRecord]:
        """Most recent record without exit whose entry is in ``[since, until)``.

        No upper bound when ``until`` is None.
        """

        raise NotImplementedError

    def close_entry(self, *, attendance_id: int, exit_time: datetime, exit_location: Coordinates) -> bool:
        """Set the exit only if it is still unset.

        Returns False when another request closed the record first.
        """

        raise NotImplementedError

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_between(self, *, employee_id: int, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        """Records whose entry falls in ``[start, end)``."""

        raise NotImplementedError
