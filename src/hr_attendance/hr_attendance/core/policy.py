from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from ..geo.geofence import Coordinates, GeofencePolicy
from . import constants
from .enums import DistanceMethod, OpenSessionPolicy


@dataclass(frozen=True)
class AttendancePolicy:
    """Process-wide attendance configuration.

    Built once from the settings module at start-up and injected into every
    component that needs it. Never mutated afterwards.
    """

    geofence: GeofencePolicy
    face_match_threshold: float = constants.DEFAULT_FACE_MATCH_THRESHOLD
    admissibility_tolerance: timedelta = field(
        default_factory=lambda: timedelta(minutes=constants.ADMISSIBILITY_TOLERANCE_MINUTES)
    )
    admin_correction_window: timedelta = field(
        default_factory=lambda: timedelta(days=constants.ADMIN_CORRECTION_DAYS)
    )
    qr_fallback_validity: timedelta = field(
        default_factory=lambda: timedelta(minutes=constants.QR_FALLBACK_VALIDITY_MINUTES)
    )
    qr_token_validity: timedelta = field(
        default_factory=lambda: timedelta(hours=constants.QR_TOKEN_VALIDITY_HOURS)
    )
    late_hour: int = constants.LATE_ARRIVAL_HOUR
    open_session_policy: OpenSessionPolicy = OpenSessionPolicy.ALLOW

    @classmethod
    def from_settings(cls, settings) -> "AttendancePolicy":
        geofence = GeofencePolicy(
            center=Coordinates(
                lng=float(getattr(settings, "GEOFENCE_CENTER_LNG", 0.0)),
                lat=float(getattr(settings, "GEOFENCE_CENTER_LAT", 0.0)),
            ),
            radius_meters=float(
                getattr(settings, "GEOFENCE_RADIUS_METERS", constants.DEFAULT_GEOFENCE_RADIUS_METERS)
            ),
            distance_method=DistanceMethod(getattr(settings, "GEOFENCE_DISTANCE", DistanceMethod.PLANAR.value)),
        )
        return cls(
            geofence=geofence,
            face_match_threshold=float(
                getattr(settings, "FACE_MATCH_THRESHOLD", constants.DEFAULT_FACE_MATCH_THRESHOLD)
            ),
            open_session_policy=OpenSessionPolicy(
                getattr(settings, "OPEN_SESSION_POLICY", OpenSessionPolicy.ALLOW.value)
            ),
        )
