from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
QR_SECRET = "test-qr-secret"

GEOFENCE_CENTER_LNG = 10.0
GEOFENCE_CENTER_LAT = 36.8
GEOFENCE_RADIUS_METERS = 100.0
GEOFENCE_DISTANCE = "planar"

MAIL_HOST = ""
LOG_LEVEL = "WARNING"
LOG_DIR = ""

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
