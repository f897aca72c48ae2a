"""Date helpers for diary keys (ISO 8601, YYYY-MM-DD)."""

from __future__ import annotations

import re
from datetime import date

from dietassist.errors import InvalidDateError

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today() -> str:
    """Return the current local date as YYYY-MM-DD."""
    return date.today().isoformat()


def is_valid_date(value: str) -> bool:
    """Return True if value is a real calendar date in YYYY-MM-DD form."""
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_date(value: str) -> str:
    """Return value unchanged, or raise InvalidDateError."""
    if not is_valid_date(value):
        raise InvalidDateError(value)
    return value
