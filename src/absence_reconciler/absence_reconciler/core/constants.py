"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

USERS_COLLECTION = "users"
SCHEDULES_COLLECTION = "schedules"
SESSIONS_COLLECTION = "sessions"
CLASSES_COLLECTION = "classes"

DEFAULT_STUDENT_ROLE = "student"
DEFAULT_INTERVAL_MINUTES = 5
DEFAULT_STUDENT_DELAY_SECONDS = 0.05
DEFAULT_SLOT_DELAY_SECONDS = 0.1
DEFAULT_CACHE_MAX_ENTRIES = 10_000

UNKNOWN_CLASS_LABEL = "unknown class"
ABSENCE_MESSAGE = "Automatic absence recorded for the {subject} class"
PRESENCE_MESSAGE = "Presence recorded for the {subject} class"
