import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "absence-reconciler-dev"

    # MySQL document store
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "absence_db")

    # Reconciliation job
    ABSENCE_INTERVAL_MINUTES = float(os.environ.get("ABSENCE_INTERVAL_MINUTES", "5"))
    ABSENCE_TIMEZONE = os.environ.get("ABSENCE_TIMEZONE", "")
    STUDENT_ROLE = os.environ.get("STUDENT_ROLE", "student")
    STUDENT_DELAY_SECONDS = float(os.environ.get("STUDENT_DELAY_SECONDS", "0.05"))
    SLOT_DELAY_SECONDS = float(os.environ.get("SLOT_DELAY_SECONDS", "0.1"))
    NOTIFICATION_CACHE_MAX_ENTRIES = int(os.environ.get("NOTIFICATION_CACHE_MAX_ENTRIES", "10000"))

    LOG_JSON = bool(int(os.environ.get("LOG_JSON", "0")))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
