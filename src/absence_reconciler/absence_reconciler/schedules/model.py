from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Slot:
    """One recurring weekly teaching period."""

    subject_id: str
    subject_label: str
    start: str
    end: str
    weekday: Optional[int] = None
    room: str = ""
    teacher: str = ""
    unavailable: bool = False


@dataclass(frozen=True)
class ClassSchedule:
    """A class timetable document (one per class and semester)."""

    class_id: str
    year: str
    semester: str
    title: str = ""
    slots: tuple[Slot, ...] = ()
