from __future__ import annotations

from datetime import datetime

from ...core.enums import CaptureMethod
from ...employees.model import Principal
from .base import CaptureAdapter, CaptureRequest, ResolvedCapture


class ManualCaptureAdapter(CaptureAdapter):
    """Identity and timestamp come straight from the caller."""

    method = CaptureMethod.MANUAL

    def resolve(self, request: CaptureRequest, *, actor: Principal, now: datetime) -> ResolvedCapture:
        employee_id = self.require_employee_id(request)
        self.authorize(actor, employee_id)
        return self.resolved(request, employee_id)
