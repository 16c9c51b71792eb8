"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

METERS_PER_DEGREE = 111_000
DEFAULT_GEOFENCE_RADIUS_METERS = 100.0

FACE_DESCRIPTOR_LENGTH = 128
DEFAULT_FACE_MATCH_THRESHOLD = 0.6

ADMISSIBILITY_TOLERANCE_MINUTES = 15
ADMIN_CORRECTION_DAYS = 7
LATE_ARRIVAL_HOUR = 9

QR_FALLBACK_VALIDITY_MINUTES = 5
QR_TOKEN_VALIDITY_HOURS = 12

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_NOTIFICATION_LIMIT = 20
MAX_NOTIFICATION_LIMIT = 50
NOTIFICATION_RETENTION_DAYS = 30

DEFAULT_MAIL_TIMEOUT_SECONDS = 5.0
DEFAULT_JWT_EXPIRES_HOURS = 24
AUTH_COOKIE_NAME = "token"
