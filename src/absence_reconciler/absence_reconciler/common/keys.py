"""Composite keys used for deduplication across records."""

from __future__ import annotations

import time
import uuid
from datetime import date

from .datetime_utils import compact_day, iso_day


def session_key(year: str, class_id: str, day: date, subject_id: str, start: str, end: str) -> str:
    """Deterministic identifier of one dated occurrence of a slot."""
    return f"{year}__{class_id}__{compact_day(day)}__{subject_id}__{start}-{end}"


def notification_key(matricule: str, subject_id: str, day: date) -> str:
    return f"{matricule}_{subject_id}_{iso_day(day)}"


def unique_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"
