from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import jwt
from werkzeug.security import check_password_hash

from ..common.logging import kv
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_JWT_EXPIRES_HOURS, FACE_DESCRIPTOR_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Employee, Principal
from .repository import EmployeeRepository

JWT_ALGORITHM = "HS256"


class AuthService:
    """Use case: authenticate an employee and verify the session token."""

    def __init__(
        self,
        employees: EmployeeRepository,
        *,
        secret: str,
        expires_hours: int = DEFAULT_JWT_EXPIRES_HOURS,
        logger: Optional[logging.Logger] = None,
    ):
        self._employees = employees
        self._secret = secret
        self._expires = timedelta(hours=int(expires_hours))
        self._log = logger or logging.getLogger(__name__)

    def authenticate(self, email: str, password: str) -> tuple[str, Employee]:
        email = require_non_empty(email, "email").lower()
        employee = self._employees.get_by_email(email)
        if not employee:
            self._log.warning("login rejected %s", kv(email=email, reason="unknown_email"))
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            self._log.warning("login rejected %s", kv(employee_id=employee.employee_id, reason="bad_password"))
            raise AuthenticationError("Invalid email or password")

        self._log.info("login ok %s", kv(employee_id=employee.employee_id, role=employee.role.value))
        return self.issue_token(employee), employee

    def issue_token(self, employee: Employee) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "id": employee.employee_id,
            "role": employee.role.value,
            "iat": now,
            "exp": now + self._expires,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify_token(self, token: Optional[str]) -> Principal:
        if not token:
            raise AuthenticationError("No token provided")
        try:
            decoded = jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        try:
            return Principal(actor_id=int(decoded["id"]), role=Role(decoded["role"]))
        except (KeyError, TypeError, ValueError):
            self._log.warning("invalid token payload %s", kv(payload=decoded))
            raise AuthenticationError("Invalid token payload")


class EmployeeService:
    """Use case: read employees and enroll facial credentials."""

    def __init__(self, employees: EmployeeRepository, *, logger: Optional[logging.Logger] = None):
        self._employees = employees
        self._log = logger or logging.getLogger(__name__)

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def enroll_face(self, *, principal: Principal, employee_id: int, descriptor: Sequence[float]) -> Employee:
        if not principal.can_act_for(employee_id):
            raise AuthorizationError("You can only update your own face template")
        if len(descriptor) != FACE_DESCRIPTOR_LENGTH:
            raise ValidationError(f"Face template must contain {FACE_DESCRIPTOR_LENGTH} numbers")

        self.get(employee_id)
        self._employees.update_face_descriptor(int(employee_id), [float(v) for v in descriptor])
        self._log.info("face template updated %s", kv(employee_id=employee_id, actor_id=principal.actor_id))
        return self.get(employee_id)
