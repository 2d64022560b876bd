from __future__ import annotations

import asyncio
from datetime import datetime

from src.absence_reconciler.absence_reconciler.database.memory_store import InMemoryDocumentStore
from src.absence_reconciler.absence_reconciler.schedules.model import ClassSchedule, Slot
from src.absence_reconciler.absence_reconciler.sessions.document_session_repository import DocumentSessionRepository
from src.absence_reconciler.absence_reconciler.sessions.service import SessionService

SLOT = Slot(
    subject_id="M1",
    subject_label="Algorithms",
    start="09:00",
    end="11:00",
    weekday=1,
    room="A101",
    teacher="Dr. Diallo",
)
SCHEDULE = ClassSchedule(class_id="C1", year="2026-2027", semester="S1", slots=(SLOT,))


class RacingSessions(DocumentSessionRepository):
    """Another writer creates the session between our read and our create."""

    async def get(self, session_id):
        data = await super().get(session_id)
        if data is None:
            await self._store.create("sessions", session_id, {"created_by": "other-pass"})
        return data


def test_establish_twice_creates_one_session(fixed_now, session_id):
    store = InMemoryDocumentStore()
    service = SessionService(DocumentSessionRepository(store))

    async def scenario():
        first = await service.establish(SCHEDULE, SLOT, class_label="l1", now=fixed_now)
        second = await service.establish(SCHEDULE, SLOT, class_label="l1", now=fixed_now)
        return first, second

    first, second = asyncio.run(scenario())

    assert first.created is True
    assert second.created is False
    assert first.session.id == second.session.id == session_id
    assert list(store.dump("sessions")) == [session_id]


def test_session_document_carries_slot_metadata(fixed_now, session_id):
    store = InMemoryDocumentStore()
    asyncio.run(SessionService(DocumentSessionRepository(store)).establish(SCHEDULE, SLOT, class_label="l1", now=fixed_now))

    doc = store.dump("sessions")[session_id]

    assert doc["year"] == "2026-2027"
    assert doc["class_label"] == "l1"
    assert doc["date"] == "2026-10-19"
    assert doc["weekday"] == 1
    assert (doc["start"], doc["end"], doc["room"], doc["teacher"]) == ("09:00", "11:00", "A101", "Dr. Diallo")
    assert doc["attendance"] == {}


def test_lost_creation_race_is_not_an_error(fixed_now, session_id):
    store = InMemoryDocumentStore()
    service = SessionService(RacingSessions(store))

    result = asyncio.run(service.establish(SCHEDULE, SLOT, class_label="l1", now=fixed_now))

    assert result.created is False
    assert store.dump("sessions")[session_id] == {"created_by": "other-pass"}


def test_unavailable_slot_is_never_due(fixed_now):
    cancelled = Slot(subject_id="M1", subject_label="Algorithms", start="09:00", end="11:00", weekday=1, unavailable=True)

    assert not SessionService.is_due(cancelled, fixed_now)


def test_slot_becomes_due_once_end_has_passed():
    assert not SessionService.is_due(SLOT, datetime(2026, 10, 19, 10, 30))
    assert not SessionService.is_due(SLOT, datetime(2026, 10, 19, 11, 0))
    assert SessionService.is_due(SLOT, datetime(2026, 10, 19, 11, 1))


def test_slot_on_other_weekday_is_not_due():
    tuesday_evening = datetime(2026, 10, 20, 18, 0)

    assert not SessionService.is_due(SLOT, tuesday_evening)
