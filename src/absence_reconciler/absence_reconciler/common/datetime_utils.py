from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError
from .validators import require_hhmm

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def make_clock(timezone: Optional[str] = None) -> Clock:
    """Return a clock for the academic calendar's timezone.

    An empty name falls back to the host's local wall clock.
    """

    if not timezone:
        return now_local
    try:
        zone = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {timezone!r}")
    return lambda: datetime.now(zone)


def business_weekday(day: date) -> int:
    return day.isoweekday()


def minutes_of(hhmm: str) -> int:
    hours, minutes = require_hhmm(hhmm, "time").split(":")
    return int(hours) * 60 + int(minutes)


def minutes_since_midnight(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def is_time_expired(end: str, now: datetime) -> bool:
    """True once the wall clock has strictly passed ``end``."""
    return minutes_since_midnight(now) > minutes_of(end)


def is_course_day(weekday: Optional[int], today: date) -> bool:
    # A slot without a weekday applies every day.
    if weekday is None:
        return True
    return business_weekday(today) == weekday


def iso_day(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def compact_day(day: date) -> str:
    return day.strftime("%Y%m%d")


def day_before(day: date) -> date:
    return day - timedelta(days=1)
