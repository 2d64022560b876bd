from __future__ import annotations

import asyncio
from datetime import date

import pytest

from src.absence_reconciler.absence_reconciler.attendance.model import EntryRef
from src.absence_reconciler.absence_reconciler.core.enums import AttendanceType, JustificationStatus, StudentOutcome
from src.absence_reconciler.absence_reconciler.core.exceptions import NotFoundError, ValidationError

REF_B = EntryRef(matricule="MAT-B", subject_id="M1", date=date(2026, 10, 19), start="09:00", end="11:00")


def check_in(container, matricule="MAT-A", **overrides):
    fields = dict(subject_id="M1", subject_label="Algorithms", start="09:00", end="11:00", teacher="Dr. Diallo", room="A101")
    fields.update(overrides)
    return asyncio.run(container.attendance_service.record_presence(matricule, **fields))


def test_presence_prevents_the_automatic_absence(container, store):
    check_in(container)

    report = asyncio.run(container.scheduler.run_once())

    assert report.count(StudentOutcome.PRESENT) == 1
    a = store.dump("users")["u-a"]
    assert a["absences"] == 0
    assert [e["type"] for e in a["attendance"]] == ["presence"]


def test_presence_is_counted_once_per_day(container, store):
    first = check_in(container)
    second = check_in(container)

    assert first.counted is True
    assert second.counted is False
    a = store.dump("users")["u-a"]
    assert a["presences"] == 1
    assert len(a["attendance"]) == 1
    assert [n["type"] for n in a["notifications"]] == ["Presence"]


def test_presence_is_mirrored_into_an_existing_session(container, store, session_id):
    asyncio.run(container.scheduler.run_once())

    check_in(container, year="2026-2027", semester="S1")

    entries = store.dump("sessions")[session_id]["attendance"]["MAT-A"]
    assert sorted(e["type"] for e in entries) == ["absence", "presence"]


def test_presence_needs_a_known_student(container):
    with pytest.raises(NotFoundError):
        check_in(container, matricule="MAT-Z")


@pytest.mark.parametrize("overrides", [{"start": "9h"}, {"end": ""}, {"subject_id": " "}])
def test_presence_rejects_bad_input(container, overrides):
    with pytest.raises(ValidationError):
        check_in(container, **overrides)


def test_list_entries_returns_domain_objects(container):
    asyncio.run(container.scheduler.run_once())

    [entry] = asyncio.run(container.attendance_service.list_entries("MAT-B"))

    assert entry.type is AttendanceType.ABSENCE
    assert entry.date == date(2026, 10, 19)
    assert entry.justification.status is JustificationStatus.PENDING

    with pytest.raises(NotFoundError):
        asyncio.run(container.attendance_service.list_entries("MAT-Z"))


def test_justification_is_submitted_then_approved(container, store, session_id):
    service = container.attendance_service
    asyncio.run(container.scheduler.run_once())

    submitted = asyncio.run(service.submit_justification(session_id, REF_B, content="Sick", documents=["note.pdf"]))
    approved = asyncio.run(service.review_justification(session_id, REF_B, approve=True))

    assert submitted.status is JustificationStatus.SUBMITTED
    assert approved.status is JustificationStatus.APPROVED
    assert approved.documents == ("note.pdf",)
    [user_entry] = store.dump("users")["u-b"]["attendance"]
    assert user_entry["justification"]["status"] == "Approuvée"
    [session_entry] = store.dump("sessions")[session_id]["attendance"]["MAT-B"]
    assert session_entry["justification"]["status"] == "Approuvée"

    with pytest.raises(ValidationError):
        asyncio.run(service.review_justification(session_id, REF_B, approve=False))
    with pytest.raises(ValidationError):
        asyncio.run(service.submit_justification(session_id, REF_B, content="Again"))


def test_rejected_justification_can_be_resubmitted(container, session_id):
    service = container.attendance_service
    asyncio.run(container.scheduler.run_once())

    asyncio.run(service.submit_justification(session_id, REF_B, content="Bus strike"))
    rejected = asyncio.run(service.review_justification(session_id, REF_B, approve=False))
    resubmitted = asyncio.run(service.submit_justification(session_id, REF_B, content="Bus strike", documents=["proof.png"]))

    assert rejected.status is JustificationStatus.REJECTED
    assert resubmitted.status is JustificationStatus.SUBMITTED


def test_justification_needs_content_or_documents(container, session_id):
    asyncio.run(container.scheduler.run_once())

    with pytest.raises(ValidationError):
        asyncio.run(container.attendance_service.submit_justification(session_id, REF_B, content="  ", documents=[""]))


def test_pending_justification_cannot_be_reviewed(container, session_id):
    asyncio.run(container.scheduler.run_once())

    with pytest.raises(ValidationError):
        asyncio.run(container.attendance_service.review_justification(session_id, REF_B, approve=True))


def test_justification_for_unknown_absence(container, session_id):
    asyncio.run(container.scheduler.run_once())
    service = container.attendance_service

    with pytest.raises(NotFoundError):
        asyncio.run(service.submit_justification("missing-session", REF_B, content="Sick"))
    with pytest.raises(NotFoundError):
        asyncio.run(service.submit_justification(session_id, EntryRef("MAT-B", "M9", date(2026, 10, 19), "09:00", "11:00"), content="Sick"))
