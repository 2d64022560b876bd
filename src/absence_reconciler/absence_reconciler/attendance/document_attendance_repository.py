from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import iso_day
from ..common.logging import get_logger
from ..core.constants import USERS_COLLECTION
from ..core.enums import AttendanceType
from ..database.store import Data, DocumentStore
from .model import AttendanceEntry, EntryRef, Justification, Notification
from .repository import AttendanceRepository, EntryWrite
from .serialization import (
    already_notified,
    entry_from_document,
    entry_to_document,
    has_presence,
    justification_to_document,
    matches_ref,
    notification_to_document,
    replace_by_key,
)

log = get_logger(__name__)

ATTENDANCE_FIELD = "attendance"
NOTIFICATIONS_FIELD = "notifications"
COUNTER_FIELDS = {
    AttendanceType.ABSENCE: "absences",
    AttendanceType.PRESENCE: "presences",
}


def _list_field(data: Data, name: str) -> list:
    value = data.get(name)
    return list(value) if isinstance(value, list) else []


class DocumentAttendanceRepository(AttendanceRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    async def _guarded_write(
        self,
        user_id: str,
        entry: AttendanceEntry,
        notification: Optional[Notification],
        *,
        skip_if_present: bool,
    ) -> Optional[EntryWrite]:
        entry_doc = entry_to_document(entry)
        counter = COUNTER_FIELDS[entry.type]
        outcome = EntryWrite()
        missing = False

        def mutate(current: Optional[Data]) -> Optional[Data]:
            nonlocal outcome, missing
            outcome, missing = EntryWrite(), current is None
            if current is None:
                return None

            entries = _list_field(current, ATTENDANCE_FIELD)
            if skip_if_present and has_presence(
                entries,
                subject_id=entry.subject_id,
                subject_label=entry.subject_label,
                day=iso_day(entry.date),
            ):
                outcome.present = True
                return None

            current[ATTENDANCE_FIELD] = replace_by_key(entries, entry_doc)
            outcome.written = True

            if notification is not None:
                notifications = _list_field(current, NOTIFICATIONS_FIELD)
                if not already_notified(
                    notifications,
                    subject_id=notification.subject_id,
                    kind=notification.type,
                    day=iso_day(notification.date),
                ):
                    notifications.append(notification_to_document(notification))
                    current[NOTIFICATIONS_FIELD] = notifications
                    current[counter] = int(current.get(counter) or 0) + 1
                    outcome.counted = True
            return current

        await self._store.transact(USERS_COLLECTION, user_id, mutate)
        if missing:
            return None
        return outcome

    async def record_absence(
        self,
        *,
        user_id: str,
        entry: AttendanceEntry,
        notification: Optional[Notification],
    ) -> Optional[EntryWrite]:
        return await self._guarded_write(user_id, entry, notification, skip_if_present=True)

    async def record_presence(
        self,
        *,
        user_id: str,
        entry: AttendanceEntry,
        notification: Notification,
    ) -> Optional[EntryWrite]:
        return await self._guarded_write(user_id, entry, notification, skip_if_present=False)

    async def list_entries(self, user_id: str) -> Sequence[AttendanceEntry]:
        data = await self._store.get(USERS_COLLECTION, user_id)
        if not data:
            return []
        entries = []
        for raw in _list_field(data, ATTENDANCE_FIELD):
            try:
                entries.append(entry_from_document(raw))
            except (KeyError, TypeError, ValueError):
                log.warning("malformed_attendance_entry", user_id=user_id)
        return entries

    async def set_justification(self, *, user_id: str, ref: EntryRef, justification: Justification) -> bool:
        j_doc = justification_to_document(justification)

        def mutate(current: Optional[Data]) -> Optional[Data]:
            if current is None:
                return None
            entries = _list_field(current, ATTENDANCE_FIELD)
            found = False
            for e in entries:
                if matches_ref(e, ref):
                    e["justification"] = j_doc
                    found = True
            if not found:
                return None
            current[ATTENDANCE_FIELD] = entries
            return current

        return await self._store.transact(USERS_COLLECTION, user_id, mutate) is not None
