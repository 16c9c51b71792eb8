from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ...common.logging import kv
from ...core.enums import CaptureMethod
from ...core.exceptions import CredentialRejection, NotFoundError
from ...core.policy import AttendancePolicy
from ...employees.model import Principal
from ...employees.repository import EmployeeRepository
from ...face.matcher import descriptor_distance, is_match
from .base import CaptureAdapter, CaptureRequest, ResolvedCapture


class FacialCaptureAdapter(CaptureAdapter):
    """Claimed identity confirmed against the stored face descriptor."""

    method = CaptureMethod.FACIAL

    def __init__(
        self,
        employees: EmployeeRepository,
        *,
        policy: AttendancePolicy,
        logger: Optional[logging.Logger] = None,
    ):
        self._employees = employees
        self._policy = policy
        self._log = logger or logging.getLogger(__name__)

    def resolve(self, request: CaptureRequest, *, actor: Principal, now: datetime) -> ResolvedCapture:
        employee_id = self.require_employee_id(request)
        self.authorize(actor, employee_id)

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.face_descriptor:
            raise CredentialRejection("No face template registered", reason="no_face_template")

        distance = descriptor_distance(request.face_descriptor, employee.face_descriptor)
        if not is_match(distance, self._policy.face_match_threshold):
            self._log.info("face rejected %s", kv(employee_id=employee_id, distance=f"{distance:.4f}"))
            raise CredentialRejection("Face not recognized", reason="face_not_recognized")

        return self.resolved(request, employee_id)
