from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hr_attendance.hr_attendance.attendance.model import AttendanceRecord
from src.hr_attendance.hr_attendance.container import wire
from src.hr_attendance.hr_attendance.core.enums import CaptureMethod, NotificationType, Role
from src.hr_attendance.hr_attendance.core.policy import AttendancePolicy
from src.hr_attendance.hr_attendance.employees.model import Employee
from src.hr_attendance.hr_attendance.geo.geofence import Coordinates, GeofencePolicy
from src.hr_attendance.hr_attendance.notifications.model import Notification

OFFICE = Coordinates(lng=10.0, lat=36.8)
STORED_FACE = [0.1] * 128


class InMemoryEmployees:
    def __init__(self, employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def get_by_email(self, email: str) -> Optional[Employee]:
        for e in self._by_id.values():
            if e.email == email.strip().lower():
                return e
        return None

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda e: e.employee_id)

    def update_face_descriptor(self, employee_id: int, descriptor) -> bool:
        e = self._by_id.get(int(employee_id))
        if not e:
            return False
        self._by_id[e.employee_id] = replace(e, face_descriptor=list(descriptor))
        return True

    def update_qr_token(self, employee_id: int, token: str) -> bool:
        e = self._by_id.get(int(employee_id))
        if not e:
            return False
        self._by_id[e.employee_id] = replace(e, qr_token=token)
        return True


class InMemoryAttendance:
    def __init__(self):
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._rows.get(int(attendance_id))

    def create_entry(self, *, employee_id: int, entry_time: datetime, entry_location: Coordinates, method: CaptureMethod) -> int:
        with self._lock:
            self._id += 1
            self._rows[self._id] = AttendanceRecord(
                attendance_id=self._id,
                employee_id=employee_id,
                entry_time=entry_time,
                entry_location=entry_location,
                method=method,
            )
            return self._id

    def find_latest_open(
        self, *, employee_id: int, since: datetime, until: Optional[datetime] = None
    ) -> Optional[AttendanceRecord]:
        items = [
            r
            for r in self._rows.values()
            if r.employee_id == employee_id
            and r.exit_time is None
            and r.entry_time >= since
            and (until is None or r.entry_time < until)
        ]
        items.sort(key=lambda r: r.entry_time, reverse=True)
        return items[0] if items else None

    def close_entry(self, *, attendance_id: int, exit_time: datetime, exit_location: Coordinates) -> bool:
        with self._lock:
            r = self._rows.get(attendance_id)
            if not r or r.exit_time is not None:
                return False
            self._rows[attendance_id] = replace(r, exit_time=exit_time, exit_location=exit_location)
            return True

    def list_for_employee(self, employee_id: int, limit: int):
        items = [r for r in self._rows.values() if r.employee_id == employee_id]
        items.sort(key=lambda r: r.entry_time, reverse=True)
        return items[:limit]

    def list_between(self, *, employee_id: int, start: datetime, end: datetime):
        items = [r for r in self._rows.values() if r.employee_id == employee_id and start <= r.entry_time < end]
        items.sort(key=lambda r: r.entry_time)
        return items


class InMemoryNotifications:
    def __init__(self):
        self._rows: dict[int, Notification] = {}
        self._id = 0

    def create(self, *, employee_id: int, message: str, type: NotificationType, created_at: datetime) -> int:
        self._id += 1
        self._rows[self._id] = Notification(
            notification_id=self._id,
            employee_id=employee_id,
            message=message,
            type=type,
            read=False,
            created_at=created_at,
        )
        return self._id

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        return self._rows.get(int(notification_id))

    def list_for_employee(self, employee_id: int, limit: int):
        items = [n for n in self._rows.values() if n.employee_id == employee_id]
        items.sort(key=lambda n: n.created_at, reverse=True)
        return items[:limit]

    def mark_read(self, notification_id: int) -> bool:
        n = self._rows.get(int(notification_id))
        if not n:
            return False
        self._rows[n.notification_id] = replace(n, read=True)
        return True

    def mark_all_read(self, employee_id: int) -> int:
        count = 0
        for n in list(self._rows.values()):
            if n.employee_id == employee_id and not n.read:
                self._rows[n.notification_id] = replace(n, read=True)
                count += 1
        return count

    def delete_read_before(self, cutoff: datetime) -> int:
        doomed = [k for k, n in self._rows.items() if n.read and n.created_at < cutoff]
        for k in doomed:
            del self._rows[k]
        return len(doomed)

    def types_for(self, employee_id: int) -> list[NotificationType]:
        return [n.type for n in self._rows.values() if n.employee_id == employee_id]


class RecordingMailer:
    def __init__(self, *, fail: bool = False):
        self.sent: list[tuple[str, str, str]] = []
        self._fail = fail

    def send(self, to: str, subject: str, body: str) -> bool:
        if self._fail:
            raise ConnectionError("smtp down")
        self.sent.append((to, subject, body))
        return True


class InlineExecutor(Executor):
    """Runs submitted work immediately so tests can assert on side effects."""

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


def make_employee(employee_id: int, role: Role, *, descriptor=None, hire_date=date(2026, 1, 5)) -> Employee:
    return Employee(
        employee_id=employee_id,
        name=f"Employee {employee_id}",
        email=f"e{employee_id}@example.com",
        password_hash="x",
        role=role,
        hire_date=hire_date,
        position="Developer",
        face_descriptor=descriptor,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 5, 0)


@pytest.fixture
def policy() -> AttendancePolicy:
    return AttendancePolicy(geofence=GeofencePolicy(center=OFFICE, radius_meters=100.0))


@pytest.fixture
def office() -> Coordinates:
    return OFFICE


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            make_employee(1, Role.ADMIN),
            make_employee(2, Role.EMPLOYEE, descriptor=STORED_FACE),
            make_employee(3, Role.STAGIAIRE, hire_date=date(2026, 2, 16)),
        ]
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def notifications_repo() -> InMemoryNotifications:
    return InMemoryNotifications()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def container(employees_repo, attendance_repo, notifications_repo, mailer, policy):
    return wire(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        notifications_repo=notifications_repo,
        mailer=mailer,
        policy=policy,
        logger=logging.getLogger("hr_attendance.tests"),
        jwt_secret="test-jwt-secret",
        qr_secret="test-qr-secret",
        notifier_executor=InlineExecutor(),
    )
