from __future__ import annotations

from abc import ABC, abstractmethod

from ..attendance.model import AttendanceRecord
from ..core.constants import LATE_ARRIVAL_HOUR


class PresenceCalculator(ABC):
    """Calculator interface (Strategy Pattern for presence reports)."""

    @abstractmethod
    def worked_hours(self, record: AttendanceRecord) -> float:
        raise NotImplementedError

    @abstractmethod
    def is_late(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError


class StandardPresenceCalculator(PresenceCalculator):
    """Standard rule: closed sessions count (exit - entry), open sessions count 0."""

    def __init__(self, late_hour: int = LATE_ARRIVAL_HOUR):
        self._late_hour = int(late_hour)

    def worked_hours(self, record: AttendanceRecord) -> float:
        if record.exit_time is None:
            return 0.0
        return max((record.exit_time - record.entry_time).total_seconds() / 3600, 0.0)

    def is_late(self, record: AttendanceRecord) -> bool:
        return record.entry_time.hour >= self._late_hour
