from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CaptureMethod
from ..geo.geofence import Coordinates


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one entry/exit session of an employee."""

    attendance_id: int
    employee_id: int
    entry_time: datetime
    entry_location: Coordinates
    method: CaptureMethod
    exit_time: Optional[datetime] = None
    exit_location: Optional[Coordinates] = None

    @property
    def is_open(self) -> bool:
        return self.exit_time is None

    @property
    def working_hours(self) -> Optional[float]:
        """Derived from the two timestamps; undefined while the session is open."""
        if self.exit_time is None:
            return None
        return round((self.exit_time - self.entry_time).total_seconds() / 3600, 2)

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employeeId": self.employee_id,
            "entryTime": self.entry_time.isoformat(),
            "location": {"type": "Point", "coordinates": self.entry_location.to_geojson()},
            "method": self.method.value,
            "exitTime": self.exit_time.isoformat() if self.exit_time else None,
            "exitLocation": (
                {"type": "Point", "coordinates": self.exit_location.to_geojson()} if self.exit_location else None
            ),
            "workingHours": self.working_hours,
        }
