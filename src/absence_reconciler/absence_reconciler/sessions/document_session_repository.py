from __future__ import annotations

from typing import Optional

from ..attendance.model import AttendanceEntry, EntryRef, Justification
from ..attendance.serialization import (
    entry_to_document,
    justification_to_document,
    matches_ref,
    replace_by_key,
)
from ..common.datetime_utils import iso_day
from ..core.constants import SESSIONS_COLLECTION
from ..database.store import Data, DocumentStore
from .model import Session
from .repository import SessionRepository


def _to_document(session: Session) -> Data:
    return {
        "year": session.year,
        "class_id": session.class_id,
        "class_label": session.class_label,
        "semester": session.semester,
        "date": iso_day(session.date),
        "weekday": session.weekday,
        "start": session.start,
        "end": session.end,
        "room": session.room,
        "subject_id": session.subject_id,
        "subject_label": session.subject_label,
        "teacher": session.teacher,
        "created_at": session.created_at.isoformat(),
        # matricule -> list of attendance entries
        "attendance": {},
    }


def _entries_of(data: Data, matricule: str) -> list:
    attendance = data.get("attendance")
    if not isinstance(attendance, dict):
        return []
    entries = attendance.get(matricule)
    return list(entries) if isinstance(entries, list) else []


class DocumentSessionRepository(SessionRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    async def get(self, session_id: str) -> Optional[dict]:
        return await self._store.get(SESSIONS_COLLECTION, session_id)

    async def create_if_absent(self, session: Session) -> bool:
        return await self._store.create(SESSIONS_COLLECTION, session.id, _to_document(session))

    async def upsert_entry(self, session_id: str, entry: AttendanceEntry) -> bool:
        entry_doc = entry_to_document(entry)

        def mutate(current: Optional[Data]) -> Optional[Data]:
            if current is None:
                return None
            attendance = current.get("attendance") if isinstance(current.get("attendance"), dict) else {}
            attendance[entry.matricule] = replace_by_key(_entries_of(current, entry.matricule), entry_doc)
            current["attendance"] = attendance
            return current

        return await self._store.transact(SESSIONS_COLLECTION, session_id, mutate) is not None

    async def find_entry(self, session_id: str, ref: EntryRef) -> Optional[dict]:
        data = await self._store.get(SESSIONS_COLLECTION, session_id)
        if not data:
            return None
        return next((e for e in _entries_of(data, ref.matricule) if matches_ref(e, ref)), None)

    async def set_justification(self, session_id: str, ref: EntryRef, justification: Justification) -> bool:
        j_doc = justification_to_document(justification)

        def mutate(current: Optional[Data]) -> Optional[Data]:
            if current is None:
                return None
            entries = _entries_of(current, ref.matricule)
            found = False
            for e in entries:
                if matches_ref(e, ref):
                    e["justification"] = j_doc
                    found = True
            if not found:
                return None
            current["attendance"][ref.matricule] = entries
            return current

        return await self._store.transact(SESSIONS_COLLECTION, session_id, mutate) is not None
