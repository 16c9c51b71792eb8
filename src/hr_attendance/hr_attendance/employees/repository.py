from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Employee directory interface.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def update_face_descriptor(self, employee_id: int, descriptor: Sequence[float]) -> bool:
        raise NotImplementedError

    def update_qr_token(self, employee_id: int, token: str) -> bool:
        raise NotImplementedError
