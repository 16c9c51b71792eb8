from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_vector, fetchall, fetchone, load_vector
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, name, email, password_hash, role, hire_date, position, face_descriptor, qr_token"


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        hire_date=row["hire_date"],
        position=row.get("position"),
        face_descriptor=load_vector(row.get("face_descriptor")),
        qr_token=row.get("qr_token"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email.strip().lower(),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY employee_id ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def update_face_descriptor(self, employee_id: int, descriptor: Sequence[float]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET face_descriptor=%s WHERE employee_id=%s",
                (dump_vector(descriptor), int(employee_id)),
            )
            return cur.rowcount > 0

    def update_qr_token(self, employee_id: int, token: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET qr_token=%s WHERE employee_id=%s",
                (token, int(employee_id)),
            )
            return cur.rowcount > 0
