from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the auth token and used for authorization."""

    EMPLOYEE = "employee"
    STAGIAIRE = "stagiaire"
    ADMIN = "admin"


class CaptureMethod(str, Enum):
    """How an attendance entry was captured."""

    MANUAL = "manual"
    QR = "qr"
    FACIAL = "facial"


class NotificationType(str, Enum):
    LATE_ARRIVAL = "late_arrival"
    LOCATION_ISSUE = "location_issue"
    EXPIRED_QR = "expired_qr"
    LEAVE_REQUEST = "leave_request"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"


class ReportPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class OpenSessionPolicy(str, Enum):
    """What to do when an entry is captured while a session is still open."""

    ALLOW = "allow"
    REJECT = "reject"


class DistanceMethod(str, Enum):
    PLANAR = "planar"
    HAVERSINE = "haversine"
