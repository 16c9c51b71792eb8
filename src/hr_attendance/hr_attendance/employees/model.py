from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: plain data object, no DB access code here.
    """

    employee_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    hire_date: date
    position: Optional[str] = None
    face_descriptor: Optional[Sequence[float]] = None
    qr_token: Optional[str] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "position": self.position,
            "hireDate": self.hire_date.isoformat(),
            "hasFaceTemplate": self.face_descriptor is not None,
        }


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as resolved from the auth token."""

    actor_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def can_act_for(self, employee_id: int) -> bool:
        return self.is_admin or self.actor_id == int(employee_id)
