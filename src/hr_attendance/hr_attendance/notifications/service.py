from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.logging import kv
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT, MAX_NOTIFICATION_LIMIT, NOTIFICATION_RETENTION_DAYS
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.model import Principal
from .model import Notification
from .repository import NotificationRepository


class NotificationService:
    """Use cases around an employee's notification inbox."""

    def __init__(self, notifications: NotificationRepository, *, logger: Optional[logging.Logger] = None):
        self._notifications = notifications
        self._log = logger or logging.getLogger(__name__)

    @staticmethod
    def clamp_limit(limit: Optional[int]) -> int:
        try:
            value = int(limit) if limit is not None else DEFAULT_NOTIFICATION_LIMIT
        except (TypeError, ValueError):
            value = DEFAULT_NOTIFICATION_LIMIT
        return min(max(value, 1), MAX_NOTIFICATION_LIMIT)

    def list_for_employee(self, *, principal: Principal, employee_id: int, limit: Optional[int] = None) -> Sequence[Notification]:
        if not principal.can_act_for(employee_id):
            raise AuthorizationError("You can only read your own notifications")
        return self._notifications.list_for_employee(int(employee_id), self.clamp_limit(limit))

    def mark_read(self, *, principal: Principal, notification_id: int) -> Notification:
        notification = self._notifications.get_by_id(int(notification_id))
        if not notification:
            raise NotFoundError("Notification not found")
        if not principal.can_act_for(notification.employee_id):
            raise AuthorizationError("You can only update your own notifications")

        self._notifications.mark_read(notification.notification_id)
        return self._notifications.get_by_id(notification.notification_id)

    def mark_all_read(self, *, principal: Principal, employee_id: int) -> int:
        if not principal.can_act_for(employee_id):
            raise AuthorizationError("You can only update your own notifications")
        return self._notifications.mark_all_read(int(employee_id))

    def sweep(self, *, now: datetime) -> int:
        """Delete read notifications past the retention window."""
        cutoff = now - timedelta(days=NOTIFICATION_RETENTION_DAYS)
        deleted = self._notifications.delete_read_before(cutoff)
        self._log.info("notification sweep %s", kv(cutoff=cutoff.isoformat(), deleted=deleted))
        return deleted
