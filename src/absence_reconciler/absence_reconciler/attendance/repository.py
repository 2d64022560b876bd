from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, EntryRef, Justification, Notification


@dataclass
class EntryWrite:
    """What one guarded write did to a student's record."""

    written: bool = False
    counted: bool = False
    present: bool = False


class AttendanceRepository(Protocol):
    async def record_absence(
        self,
        *,
        user_id: str,
        entry: AttendanceEntry,
        notification: Optional[Notification],
    ) -> Optional[EntryWrite]:
        """Atomically write an absence unless a presence exists.

        With a notification, also appends it and bumps the absence counter
        unless the same subject was already notified that day. Passing None
        skips the counter and notification entirely. Returns None when the
        user document is missing.
        """

        raise NotImplementedError

    async def record_presence(
        self,
        *,
        user_id: str,
        entry: AttendanceEntry,
        notification: Notification,
    ) -> Optional[EntryWrite]:
        raise NotImplementedError

    async def list_entries(self, user_id: str) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    async def set_justification(self, *, user_id: str, ref: EntryRef, justification: Justification) -> bool:
        raise NotImplementedError
