"""Settings shared by every environment.

Environment modules (development/testing/production) import these and
override what differs. Values come from the process environment, which
``create_app`` fills from ``.env`` via python-dotenv.
"""
import os

SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")

DB_CONFIG = {
    "host": os.environ.get("DB_HOST", "localhost"),
    "port": int(os.environ.get("DB_PORT", "3306")),
    "user": os.environ.get("DB_USER", "root"),
    "password": os.environ.get("DB_PASSWORD", ""),
    "database": os.environ.get("DB_NAME", "hr_attendance"),
}

# Auth cookie (JWT) and QR credential signing keys
JWT_SECRET = os.environ.get("JWT_SECRET", SECRET_KEY)
JWT_EXPIRES_HOURS = int(os.environ.get("JWT_EXPIRES_HOURS", "24"))
QR_SECRET = os.environ.get("QR_SECRET", JWT_SECRET)

# Office geofence; coordinates in GeoJSON order
GEOFENCE_CENTER_LNG = float(os.environ.get("GEOFENCE_CENTER_LNG", "0"))
GEOFENCE_CENTER_LAT = float(os.environ.get("GEOFENCE_CENTER_LAT", "0"))
GEOFENCE_RADIUS_METERS = float(os.environ.get("GEOFENCE_RADIUS_METERS", "100"))
GEOFENCE_DISTANCE = os.environ.get("GEOFENCE_DISTANCE", "planar")

FACE_MATCH_THRESHOLD = float(os.environ.get("FACE_MATCH_THRESHOLD", "0.6"))

# "allow" keeps creating entries while a session is open; "reject" refuses them
OPEN_SESSION_POLICY = os.environ.get("OPEN_SESSION_POLICY", "allow")

MAIL_HOST = os.environ.get("MAIL_HOST", "")
MAIL_PORT = int(os.environ.get("MAIL_PORT", "587"))
MAIL_USER = os.environ.get("MAIL_USER", "")
MAIL_PASSWORD = os.environ.get("MAIL_PASSWORD", "")
MAIL_SENDER = os.environ.get("MAIL_SENDER", "")
MAIL_USE_TLS = bool(int(os.environ.get("MAIL_USE_TLS", "1")))
MAIL_TIMEOUT_SECONDS = float(os.environ.get("MAIL_TIMEOUT_SECONDS", "5"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_DIR = os.environ.get("LOG_DIR", "")

DEBUG = False

AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.environ.get("AUTO_SEED_DB", "0")))
