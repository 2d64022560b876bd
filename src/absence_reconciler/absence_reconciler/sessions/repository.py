from __future__ import annotations

from typing import Optional, Protocol

from ..attendance.model import AttendanceEntry, EntryRef, Justification
from .model import Session


class SessionRepository(Protocol):
    async def get(self, session_id: str) -> Optional[dict]:
        raise NotImplementedError

    async def create_if_absent(self, session: Session) -> bool:
        """Returns True only for the writer that actually created it."""

        raise NotImplementedError

    async def upsert_entry(self, session_id: str, entry: AttendanceEntry) -> bool:
        """Replace-by-key write into the session's per-matricule list.

        Returns False when the session document does not exist.
        """

        raise NotImplementedError

    async def find_entry(self, session_id: str, ref: EntryRef) -> Optional[dict]:
        raise NotImplementedError

    async def set_justification(self, session_id: str, ref: EntryRef, justification: Justification) -> bool:
        raise NotImplementedError
