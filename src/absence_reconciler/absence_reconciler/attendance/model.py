from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceType, JustificationStatus, NotificationType


@dataclass(frozen=True)
class Justification:
    """Dispute a student attaches to an absence."""

    content: str = ""
    documents: tuple[str, ...] = ()
    submitted_at: Optional[datetime] = None
    status: JustificationStatus = JustificationStatus.PENDING


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one check-in event (absence or presence) of a student."""

    subject_id: str
    subject_label: str
    matricule: str
    full_name: str
    timestamp: datetime
    type: AttendanceType
    start: str
    end: str
    date: date
    teacher: str = ""
    room: str = ""
    year: str = ""
    semester: str = ""
    justification: Optional[Justification] = None


@dataclass(frozen=True)
class Notification:
    id: str
    course_title: str
    subject_id: str
    timestamp: datetime
    date: date
    message: str
    type: NotificationType
    read: bool = False


@dataclass(frozen=True)
class EntryRef:
    """Locates one absence entry in a student's or a session's list."""

    matricule: str
    subject_id: str
    date: date
    start: str
    end: str
    type: AttendanceType = field(default=AttendanceType.ABSENCE)
