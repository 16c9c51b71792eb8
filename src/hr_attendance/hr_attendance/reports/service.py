from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import ReportPeriod
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.model import Employee, Principal
from ..employees.repository import EmployeeRepository
from .calculator import PresenceCalculator, StandardPresenceCalculator
from .period import ReportWindow, resolve_window


@dataclass(frozen=True)
class PresenceReport:
    employee_id: int
    employee_name: str
    start: datetime
    end: datetime
    total_days: int
    total_hours: float
    late_days: int

    def to_dict(self) -> dict:
        return {
            "employee": {"id": self.employee_id, "name": self.employee_name},
            "period": {"start": self.start.isoformat(), "end": self.end.isoformat()},
            "totalDays": self.total_days,
            "totalHours": self.total_hours,
            "lateDays": self.late_days,
        }


class PresenceReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PresenceCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._calculator = calculator or StandardPresenceCalculator()
        self._clock = clock

    def summarize(self, employee: Employee, window: ReportWindow, records: Sequence[AttendanceRecord]) -> PresenceReport:
        total_days = 0
        late_days = 0
        total_hours = 0.0
        for r in records:
            total_days += 1
            if self._calculator.is_late(r):
                late_days += 1
            total_hours += self._calculator.worked_hours(r)

        return PresenceReport(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            start=window.start,
            end=window.end,
            total_days=total_days,
            total_hours=round(total_hours, 2),
            late_days=late_days,
        )

    def _report_for(
        self,
        employee: Employee,
        *,
        period: Optional[ReportPeriod],
        start_date: Optional[date],
        end_date: Optional[date],
        now: datetime,
    ) -> PresenceReport:
        window = resolve_window(
            period=period,
            start_date=start_date,
            end_date=end_date,
            hire_date=employee.hire_date,
            now=now,
        )
        records = self._attendance.list_between(employee_id=employee.employee_id, start=window.start, end=window.end)
        return self.summarize(employee, window, records)

    def build_report(
        self,
        *,
        principal: Principal,
        employee_id: int,
        period: Optional[ReportPeriod] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> PresenceReport:
        if not principal.can_act_for(employee_id):
            raise AuthorizationError("You can only view your own report")
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return self._report_for(
            employee,
            period=period,
            start_date=start_date,
            end_date=end_date,
            now=now or self._clock(),
        )

    def build_fleet_report(
        self,
        *,
        principal: Principal,
        period: Optional[ReportPeriod] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> list[PresenceReport]:
        if not principal.is_admin:
            raise AuthorizationError("Only admins can view fleet reports")
        now = now or self._clock()
        return [
            self._report_for(e, period=period, start_date=start_date, end_date=end_date, now=now)
            for e in self._employees.list_all()
        ]
