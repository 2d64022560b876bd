from __future__ import annotations

from collections import OrderedDict
from datetime import date

from ..common.datetime_utils import day_before
from ..common.keys import notification_key
from ..core.constants import DEFAULT_CACHE_MAX_ENTRIES


class NotificationCache:
    """Per-day memory of (matricule, subject) pairs already notified.

    Only a shortcut in front of the notification scan done inside the store
    transaction; an empty cache (fresh process) changes nothing but speed.
    """

    def __init__(self, *, max_entries: int = DEFAULT_CACHE_MAX_ENTRIES):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = int(max_entries)
        self._entries: OrderedDict[str, date] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def was_sent(self, matricule: str, subject_id: str, day: date) -> bool:
        return notification_key(matricule, subject_id, day) in self._entries

    def mark_sent(self, matricule: str, subject_id: str, day: date) -> None:
        key = notification_key(matricule, subject_id, day)
        self._entries[key] = day
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def prune(self, today: date) -> int:
        """Forget entries older than yesterday; returns how many were dropped."""

        cutoff = day_before(today)
        stale = [key for key, day in self._entries.items() if day < cutoff]
        for key in stale:
            del self._entries[key]
        return len(stale)
