from __future__ import annotations

from datetime import date, datetime

import pytest

from src.absence_reconciler.absence_reconciler.common.datetime_utils import (
    business_weekday,
    is_course_day,
    is_time_expired,
    make_clock,
    minutes_of,
    now_local,
)
from src.absence_reconciler.absence_reconciler.common.keys import notification_key, session_key
from src.absence_reconciler.absence_reconciler.core.exceptions import ValidationError


@pytest.mark.parametrize("day, expected", [(date(2026, 10, 19), 1), (date(2026, 10, 21), 3), (date(2026, 10, 25), 7)])
def test_weekday_is_monday_first(day, expected):
    assert business_weekday(day) == expected


def test_time_expires_only_after_end_minute():
    assert not is_time_expired("11:00", datetime(2026, 10, 19, 10, 59))
    assert not is_time_expired("11:00", datetime(2026, 10, 19, 11, 0, 59))
    assert is_time_expired("11:00", datetime(2026, 10, 19, 11, 1))


def test_malformed_time_raises_validation_error():
    with pytest.raises(ValidationError):
        minutes_of("25:00")
    with pytest.raises(ValidationError):
        minutes_of("9h")


def test_course_day_matches_iso_weekday():
    monday = date(2026, 10, 19)
    assert is_course_day(1, monday)
    assert not is_course_day(2, monday)
    assert is_course_day(7, date(2026, 10, 25))


def test_slot_without_weekday_applies_every_day():
    assert is_course_day(None, date(2026, 10, 21))


def test_empty_timezone_uses_local_clock():
    assert make_clock("") is now_local


def test_unknown_timezone_is_rejected():
    with pytest.raises(ValidationError):
        make_clock("Nowhere/Atlantis")


def test_session_key_is_deterministic():
    day = date(2026, 10, 19)
    key = session_key("2026-2027", "C1", day, "M1", "09:00", "11:00")

    assert key == "2026-2027__C1__20261019__M1__09:00-11:00"
    assert key == session_key("2026-2027", "C1", day, "M1", "09:00", "11:00")
    assert key != session_key("2026-2027", "C1", day, "M1", "14:00", "16:00")


def test_notification_key_uses_iso_day():
    assert notification_key("MAT-A", "M1", date(2026, 10, 19)) == "MAT-A_M1_2026-10-19"
