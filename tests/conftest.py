from __future__ import annotations

from datetime import datetime

import pytest

from src.absence_reconciler.absence_reconciler.container import ReconcilerOptions, build_container
from src.absence_reconciler.absence_reconciler.database.memory_store import InMemoryDocumentStore

YEAR = "2026-2027"
SESSION_ID = "2026-2027__C1__20261019__M1__09:00-11:00"


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _student(matricule: str, first_name: str, last_name: str, class_id: str = "C1") -> dict:
    return {
        "matricule": matricule,
        "first_name": first_name,
        "last_name": last_name,
        "class_id": class_id,
        "role": "student",
        "absences": 0,
        "attendance": [],
        "notifications": [],
    }


def _seed() -> dict:
    return {
        "classes": {"C1": {"label": "L1 Informatique"}},
        "schedules": {
            "C1-S1": {
                "class_id": "C1",
                "title": "L1 Informatique S1",
                "year": YEAR,
                "semester": "S1",
                "slots": [
                    {
                        "subject_id": "M1",
                        "subject_label": "Algorithms",
                        "weekday": 1,
                        "start": "09:00",
                        "end": "11:00",
                        "room": "A101",
                        "teacher": "Dr. Diallo",
                        "unavailable": False,
                    }
                ],
            }
        },
        "users": {
            "u-a": _student("MAT-A", "Awa", "Sarr"),
            "u-b": _student("MAT-B", "Moussa", "Ba"),
            "u-t": {"matricule": "T-1", "first_name": "Fatou", "last_name": "Diallo", "class_id": "", "role": "teacher"},
        },
    }


@pytest.fixture
def fixed_now() -> datetime:
    # Monday, five minutes after the 09:00-11:00 slot ended
    return datetime(2026, 10, 19, 11, 5, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def seed() -> dict:
    return _seed()


@pytest.fixture
def store(seed) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(seed)


@pytest.fixture
def options() -> ReconcilerOptions:
    return ReconcilerOptions(student_delay=0, slot_delay=0)


@pytest.fixture
def container(store, options, clock):
    return build_container(store=store, options=options, clock=clock)


@pytest.fixture
def give_presence(store):
    def _give(user_id: str, *, subject_id: str = "M1", subject_label: str = "Algorithms", day: str = "2026-10-19"):
        user = store.dump("users")[user_id]
        user.setdefault("attendance", []).append(
            {
                "subject_id": subject_id,
                "subject_label": subject_label,
                "matricule": user["matricule"],
                "full_name": f"{user['first_name']} {user['last_name']}",
                "timestamp": f"{day}T09:10:00",
                "type": "presence",
                "start": "09:00",
                "end": "11:00",
                "date": day,
                "teacher": "Dr. Diallo",
                "room": "A101",
            }
        )
        store.seed("users", user_id, user)

    return _give


@pytest.fixture
def session_id() -> str:
    return SESSION_ID
