import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

# "memory" keeps everything in-process; "mysql" uses DB_CONFIG
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

ABSENCE_INTERVAL_MINUTES = Config.ABSENCE_INTERVAL_MINUTES
ABSENCE_TIMEZONE = Config.ABSENCE_TIMEZONE
STUDENT_ROLE = Config.STUDENT_ROLE
STUDENT_DELAY_SECONDS = Config.STUDENT_DELAY_SECONDS
SLOT_DELAY_SECONDS = Config.SLOT_DELAY_SECONDS
NOTIFICATION_CACHE_MAX_ENTRIES = Config.NOTIFICATION_CACHE_MAX_ENTRIES

LOG_JSON = Config.LOG_JSON
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
