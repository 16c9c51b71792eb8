from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, employee_id: int, message: str, type: NotificationType, created_at: datetime) -> int:
        raise NotImplementedError

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_read(self, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self, employee_id: int) -> int:
        raise NotImplementedError

    def delete_read_before(self, cutoff: datetime) -> int:
        """Retention sweep: drop read notifications created before ``cutoff``."""

        raise NotImplementedError
