"""Temporal admissibility of a claimed attendance timestamp.

One rule set shared by every capture method and by exit:

* more than the tolerance in the future: rejected for everyone;
* admins may backdate up to the correction window;
* everyone else must stay on today's date and within the tolerance of now.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..core.policy import AttendancePolicy

FUTURE_TIMESTAMP = "future_timestamp"
EXCEEDS_CORRECTION_WINDOW = "exceeds_correction_window"
PAST_DATE_REQUIRES_ADMIN = "past_date_requires_elevated_role"
STALE_TIMESTAMP_REQUIRES_ADMIN = "stale_timestamp_requires_elevated_role"

_MESSAGES = {
    FUTURE_TIMESTAMP: "Timestamp is too far in the future",
    EXCEEDS_CORRECTION_WINDOW: "Timestamp exceeds the correction window",
    PAST_DATE_REQUIRES_ADMIN: "Only admins can record attendance for a past date",
    STALE_TIMESTAMP_REQUIRES_ADMIN: "Only admins can record attendance this far in the past",
}


@dataclass(frozen=True)
class Admissibility:
    accepted: bool
    reason: Optional[str] = None

    @property
    def message(self) -> str:
        return _MESSAGES.get(self.reason or "", "Accepted")


ACCEPT = Admissibility(accepted=True)


def _reject(reason: str) -> Admissibility:
    return Admissibility(accepted=False, reason=reason)


def check_admissible(claimed: datetime, now: datetime, actor_role: Role, policy: AttendancePolicy) -> Admissibility:
    if claimed > now + policy.admissibility_tolerance:
        return _reject(FUTURE_TIMESTAMP)

    if actor_role == Role.ADMIN:
        if claimed < now - policy.admin_correction_window:
            return _reject(EXCEEDS_CORRECTION_WINDOW)
        return ACCEPT

    if claimed.date() < now.date():
        return _reject(PAST_DATE_REQUIRES_ADMIN)
    if claimed < now - policy.admissibility_tolerance:
        return _reject(STALE_TIMESTAMP_REQUIRES_ADMIN)
    return ACCEPT
