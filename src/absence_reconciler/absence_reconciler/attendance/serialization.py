"""Document shapes of attendance entries and notifications, plus the
matching rules that keep repeated writes from duplicating them."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional

from ..common.datetime_utils import iso_day, parse_iso_date
from ..core.enums import AttendanceType, JustificationStatus, NotificationType
from .model import AttendanceEntry, EntryRef, Justification, Notification

# Two entries with equal values for all of these are the same logical entry.
ENTRY_KEY_FIELDS = (
    "subject_id",
    "subject_label",
    "teacher",
    "start",
    "end",
    "date",
    "type",
    "room",
    "matricule",
)


def justification_to_document(j: Justification) -> dict[str, Any]:
    return {
        "content": j.content,
        "documents": list(j.documents),
        "submitted_at": j.submitted_at.isoformat() if j.submitted_at else "",
        "status": j.status.value,
    }


def justification_from_document(data: Optional[dict]) -> Optional[Justification]:
    if not isinstance(data, dict):
        return None
    documents = data.get("documents") or []
    submitted_at = data.get("submitted_at") or None
    return Justification(
        content=str(data.get("content") or ""),
        documents=tuple(documents) if isinstance(documents, list) else (str(documents),),
        submitted_at=datetime.fromisoformat(submitted_at) if submitted_at else None,
        status=JustificationStatus(data.get("status") or JustificationStatus.PENDING.value),
    )


def entry_to_document(entry: AttendanceEntry) -> dict[str, Any]:
    doc = {
        "subject_id": entry.subject_id,
        "subject_label": entry.subject_label,
        "matricule": entry.matricule,
        "full_name": entry.full_name,
        "timestamp": entry.timestamp.isoformat(),
        "type": entry.type.value,
        "start": entry.start,
        "end": entry.end,
        "date": iso_day(entry.date),
        "teacher": entry.teacher,
        "room": entry.room,
        "year": entry.year,
        "semester": entry.semester,
    }
    if entry.justification is not None:
        doc["justification"] = justification_to_document(entry.justification)
    return doc


def entry_from_document(data: dict) -> AttendanceEntry:
    return AttendanceEntry(
        subject_id=str(data.get("subject_id") or ""),
        subject_label=str(data.get("subject_label") or ""),
        matricule=str(data.get("matricule") or ""),
        full_name=str(data.get("full_name") or ""),
        timestamp=datetime.fromisoformat(data["timestamp"]),
        type=AttendanceType(data["type"]),
        start=str(data.get("start") or ""),
        end=str(data.get("end") or ""),
        date=parse_iso_date(data["date"]),
        teacher=str(data.get("teacher") or ""),
        room=str(data.get("room") or ""),
        year=str(data.get("year") or ""),
        semester=str(data.get("semester") or ""),
        justification=justification_from_document(data.get("justification")),
    )


def notification_to_document(n: Notification) -> dict[str, Any]:
    return {
        "id": n.id,
        "course_title": n.course_title,
        "subject_id": n.subject_id,
        "timestamp": n.timestamp.isoformat(),
        "date": iso_day(n.date),
        "message": n.message,
        "type": n.type.value,
        "read": n.read,
    }


def same_entry(a: dict, b: dict) -> bool:
    return all(a.get(f) == b.get(f) for f in ENTRY_KEY_FIELDS)


def replace_by_key(entries: Iterable[Any], new_entry: dict) -> list[dict]:
    """Drop every entry matching ``new_entry``'s key, then append it.

    A justification the student already submitted on the replaced entry is
    carried over so a re-run never resets it to pending.
    """

    kept: list[dict] = []
    carried: Optional[dict] = None
    for e in entries:
        if not isinstance(e, dict):
            continue
        if same_entry(e, new_entry):
            j = e.get("justification")
            if isinstance(j, dict) and j.get("status") not in (None, JustificationStatus.PENDING.value):
                carried = j
            continue
        kept.append(e)

    if carried is not None:
        new_entry = {**new_entry, "justification": carried}
    kept.append(new_entry)
    return kept


def has_presence(entries: Iterable[Any], *, subject_id: str, subject_label: str, day: str) -> bool:
    return any(
        isinstance(e, dict)
        and e.get("subject_id") == subject_id
        and e.get("subject_label") == subject_label
        and e.get("date") == day
        and e.get("type") == AttendanceType.PRESENCE.value
        for e in entries
    )


def _notification_day(n: dict) -> Optional[str]:
    if n.get("date"):
        return str(n["date"])
    timestamp = n.get("timestamp")
    if isinstance(timestamp, str) and len(timestamp) >= 10:
        return timestamp[:10]
    return None


def already_notified(notifications: Iterable[Any], *, subject_id: str, kind: NotificationType, day: str) -> bool:
    return any(
        isinstance(n, dict)
        and n.get("subject_id") == subject_id
        and n.get("type") == kind.value
        and _notification_day(n) == day
        for n in notifications
    )


def matches_ref(entry: Any, ref: EntryRef) -> bool:
    return (
        isinstance(entry, dict)
        and entry.get("type") == ref.type.value
        and entry.get("matricule") == ref.matricule
        and entry.get("subject_id") == ref.subject_id
        and entry.get("date") == iso_day(ref.date)
        and entry.get("start") == ref.start
        and entry.get("end") == ref.end
    )
