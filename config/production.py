import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

ABSENCE_INTERVAL_MINUTES = Config.ABSENCE_INTERVAL_MINUTES
ABSENCE_TIMEZONE = Config.ABSENCE_TIMEZONE
STUDENT_ROLE = Config.STUDENT_ROLE
STUDENT_DELAY_SECONDS = Config.STUDENT_DELAY_SECONDS
SLOT_DELAY_SECONDS = Config.SLOT_DELAY_SECONDS
NOTIFICATION_CACHE_MAX_ENTRIES = Config.NOTIFICATION_CACHE_MAX_ENTRIES

LOG_JSON = bool(int(os.getenv("LOG_JSON", "1")))
LOG_LEVEL = Config.LOG_LEVEL

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
