from __future__ import annotations

from enum import Enum


class AttendanceType(str, Enum):
    """Kind of check-in event stored in an attendance list."""

    ABSENCE = "absence"
    PRESENCE = "presence"


class NotificationType(str, Enum):
    ABSENCE = "Absence"
    PRESENCE = "Presence"


class JustificationStatus(str, Enum):
    """Lifecycle of a justification attached to an absence.

    Values are the literals stored in existing student and session documents.
    """

    PENDING = "En attente"
    SUBMITTED = "En cours"
    APPROVED = "Approuvée"
    REJECTED = "Rejetée"


class StudentOutcome(str, Enum):
    """Result of evaluating one student against one finished session."""

    ABSENCE_RECORDED = "absence_recorded"
    ALREADY_RECORDED = "already_recorded"
    PRESENT = "present"
    USER_NOT_FOUND = "user_not_found"
    FAILED = "failed"


class StoreBackend(str, Enum):
    MEMORY = "memory"
    MYSQL = "mysql"
