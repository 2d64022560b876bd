from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Session:
    """Dated occurrence of a slot; ``id`` is the deterministic session key."""

    id: str
    year: str
    class_id: str
    class_label: str
    semester: str
    date: date
    weekday: int
    start: str
    end: str
    room: str
    subject_id: str
    subject_label: str
    teacher: str
    created_at: datetime


@dataclass(frozen=True)
class SessionResult:
    session: Session
    created: bool
