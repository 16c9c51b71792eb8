from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ...core.enums import CaptureMethod
from ...core.exceptions import AuthorizationError, ValidationError
from ...employees.model import Principal
from ...geo.geofence import Coordinates


@dataclass(frozen=True)
class CaptureRequest:
    """Raw capture input after request validation."""

    timestamp: datetime
    location: Coordinates
    employee_id: Optional[int] = None
    qr_data: Optional[str] = None
    face_descriptor: Optional[Sequence[float]] = None


@dataclass(frozen=True)
class ResolvedCapture:
    employee_id: int
    timestamp: datetime
    location: Coordinates
    method: CaptureMethod


class CaptureAdapter(ABC):
    """Strategy Pattern: how a capture method resolves who checked in."""

    method: CaptureMethod

    @abstractmethod
    def resolve(self, request: CaptureRequest, *, actor: Principal, now: datetime) -> ResolvedCapture:
        raise NotImplementedError

    @staticmethod
    def authorize(actor: Principal, employee_id: int) -> None:
        if not actor.can_act_for(employee_id):
            raise AuthorizationError("You can only record attendance for yourself")

    @staticmethod
    def require_employee_id(request: CaptureRequest) -> int:
        if request.employee_id is None:
            raise ValidationError(
                "Validation errors",
                errors=[{"field": "employeeId", "message": "employeeId is required"}],
            )
        return int(request.employee_id)

    def resolved(self, request: CaptureRequest, employee_id: int) -> ResolvedCapture:
        return ResolvedCapture(
            employee_id=employee_id,
            timestamp=request.timestamp,
            location=request.location,
            method=self.method,
        )
