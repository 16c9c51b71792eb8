from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.logging import kv
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import CaptureMethod, NotificationType
from ..core.exceptions import AuthorizationError, GeofenceRejection, NotFoundError, TemporalRejection
from ..core.policy import AttendancePolicy
from ..employees.model import Employee, Principal
from ..employees.repository import EmployeeRepository
from ..geo.geofence import Coordinates
from ..notifications.notifier import PolicyNotifier
from .admissibility import check_admissible
from .capture.base import CaptureRequest
from .factory import CaptureAdapterFactory
from .ledger import AttendanceLedger
from .model import AttendanceRecord
from .qr_token import QrTokenCodec


class AttendanceService:
    """Use cases: record entries and exits, list history, issue QR tokens.

    Every event goes through the same gates in the same order: the capture
    adapter resolves and authorizes the employee, then the timestamp and the
    location are checked, then the ledger is written.
    """

    def __init__(
        self,
        ledger: AttendanceLedger,
        employees: EmployeeRepository,
        adapters: CaptureAdapterFactory,
        notifier: PolicyNotifier,
        codec: QrTokenCodec,
        *,
        policy: AttendancePolicy,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._ledger = ledger
        self._employees = employees
        self._adapters = adapters
        self._notifier = notifier
        self._codec = codec
        self._policy = policy
        self._log = logger or logging.getLogger(__name__)
        self._clock = clock

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _gate(self, *, employee_id: int, timestamp: datetime, location: Coordinates, principal: Principal, now: datetime) -> None:
        decision = check_admissible(timestamp, now, principal.role, self._policy)
        if not decision.accepted:
            self._log.info(
                "attendance rejected %s",
                kv(employee_id=employee_id, reason=decision.reason, claimed=timestamp.isoformat()),
            )
            raise TemporalRejection(decision.message, reason=decision.reason)

        if not self._policy.geofence.contains(location):
            self._log.info(
                "attendance rejected %s",
                kv(employee_id=employee_id, reason="outside_geofence", lng=location.lng, lat=location.lat),
            )
            self._notifier.notify(
                employee_id,
                NotificationType.LOCATION_ISSUE,
                f"Attendance attempt at {timestamp:%Y-%m-%d %H:%M} was outside the allowed area.",
            )
            raise GeofenceRejection("Location is outside the allowed area", reason="outside_geofence")

    def record_entry(
        self,
        *,
        principal: Principal,
        method: CaptureMethod,
        request: CaptureRequest,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or self._clock()

        adapter = self._adapters.for_method(method)
        capture = adapter.resolve(request, actor=principal, now=now)
        self._get_employee(capture.employee_id)

        self._gate(
            employee_id=capture.employee_id,
            timestamp=capture.timestamp,
            location=capture.location,
            principal=principal,
            now=now,
        )

        record = self._ledger.create_entry(
            employee_id=capture.employee_id,
            timestamp=capture.timestamp,
            location=capture.location,
            method=capture.method,
        )
        self._log.info(
            "entry recorded %s",
            kv(attendance_id=record.attendance_id, employee_id=record.employee_id, method=record.method.value),
        )

        if record.entry_time.hour >= self._policy.late_hour:
            self._notifier.notify(
                record.employee_id,
                NotificationType.LATE_ARRIVAL,
                f"Late arrival recorded at {record.entry_time:%Y-%m-%d %H:%M}.",
            )
        return record

    def record_exit(
        self,
        *,
        principal: Principal,
        employee_id: int,
        exit_time: datetime,
        location: Coordinates,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        if not principal.can_act_for(employee_id):
            raise AuthorizationError("You can only record attendance for yourself")
        self._get_employee(employee_id)

        self._gate(employee_id=employee_id, timestamp=exit_time, location=location, principal=principal, now=now)

        record = self._ledger.close_entry(
            employee_id=int(employee_id),
            exit_time=exit_time,
            exit_location=location,
            actor_role=principal.role,
            now=now,
        )
        self._log.info(
            "exit recorded %s",
            kv(attendance_id=record.attendance_id, employee_id=record.employee_id, hours=record.working_hours),
        )
        return record

    def list_for_employee(
        self,
        *,
        principal: Principal,
        employee_id: int,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        if not principal.can_act_for(employee_id):
            raise AuthorizationError("You can only view your own attendance")
        self._get_employee(employee_id)
        return self._ledger.list_for_employee(int(employee_id), max(int(limit), 1))

    def issue_qr_token(self, *, principal: Principal, employee_id: int, now: Optional[datetime] = None) -> tuple[str, datetime]:
        if not principal.is_admin:
            raise AuthorizationError("Only admins can issue QR codes")
        now = now or self._clock()
        self._get_employee(employee_id)

        expires_at = now + self._policy.qr_token_validity
        token = self._codec.issue(int(employee_id), now=now, validity=self._policy.qr_token_validity)
        self._employees.update_qr_token(int(employee_id), token)
        self._log.info("qr issued %s", kv(employee_id=employee_id, expires_at=expires_at.isoformat()))
        return token, expires_at
