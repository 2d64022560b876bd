SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "absence_db_test",
}

STORE_BACKEND = "memory"

ABSENCE_INTERVAL_MINUTES = 5
ABSENCE_TIMEZONE = ""
STUDENT_ROLE = "student"
STUDENT_DELAY_SECONDS = 0
SLOT_DELAY_SECONDS = 0
NOTIFICATION_CACHE_MAX_ENTRIES = 100

LOG_JSON = False
LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
