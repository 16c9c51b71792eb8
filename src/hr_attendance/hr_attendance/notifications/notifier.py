from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.logging import kv
from ..core.enums import NotificationType
from ..employees.repository import EmployeeRepository
from .mailer import Mailer
from .repository import NotificationRepository

_SUBJECTS = {
    NotificationType.LATE_ARRIVAL: "Late arrival recorded",
    NotificationType.LOCATION_ISSUE: "Attendance location issue",
    NotificationType.EXPIRED_QR: "Expired QR code",
    NotificationType.LEAVE_REQUEST: "Leave request submitted",
    NotificationType.LEAVE_APPROVED: "Leave request approved",
    NotificationType.LEAVE_REJECTED: "Leave request rejected",
}


class PolicyNotifier:
    """Side-channel alerts for attendance policy events.

    ``notify`` never raises: the notification row is written inline and the
    email is handed to an executor, so a slow or failing mail provider cannot
    change the outcome of the attendance request that triggered it.
    """

    def __init__(
        self,
        notifications: NotificationRepository,
        employees: EmployeeRepository,
        mailer: Mailer,
        *,
        executor: Optional[Executor] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._notifications = notifications
        self._employees = employees
        self._mailer = mailer
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="notifier")
        self._log = logger or logging.getLogger(__name__)
        self._clock = clock

    def notify(self, employee_id: int, type: NotificationType, message: str) -> None:
        try:
            self._notifications.create(
                employee_id=int(employee_id),
                message=message,
                type=type,
                created_at=self._clock(),
            )
        except Exception:
            self._log.exception("notification not saved %s", kv(employee_id=employee_id, type=type.value))

        try:
            employee = self._employees.get_by_id(int(employee_id))
        except Exception:
            self._log.exception("notification recipient lookup failed %s", kv(employee_id=employee_id))
            return
        if not employee:
            self._log.warning("notification recipient missing %s", kv(employee_id=employee_id))
            return

        try:
            self._executor.submit(self._deliver, employee.email, _SUBJECTS.get(type, "Notification"), message)
        except RuntimeError:
            self._log.exception("mail dispatch not scheduled %s", kv(employee_id=employee_id))

    def _deliver(self, to: str, subject: str, body: str) -> None:
        try:
            sent = self._mailer.send(to, subject, body)
        except Exception:
            self._log.exception("mail delivery failed %s", kv(to=to, subject=subject))
            return
        if not sent:
            self._log.info("mail not sent %s", kv(to=to, subject=subject))

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
