from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} must not be empty")
    return str(value).strip()


def require_hhmm(value: str, field_name: str) -> str:
    v = (value or "").strip()
    if not _HHMM.match(v):
        raise ValidationError(f"{field_name} must be HH:MM, got {value!r}")
    return v
