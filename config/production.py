import os

from .config import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
QR_SECRET = os.getenv("QR_SECRET", JWT_SECRET)

LOG_DIR = os.getenv("LOG_DIR", "logs")

DEBUG = False
