from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    notification_id: int
    employee_id: int
    message: str
    type: NotificationType
    read: bool
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "userId": self.employee_id,
            "message": self.message,
            "type": self.type.value,
            "read": self.read,
            "timestamp": self.created_at.isoformat(),
        }
