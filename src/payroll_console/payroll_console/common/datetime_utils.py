from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..core.exceptions import MissingRequiredField


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_required_date(value: Any, field_name: str) -> date:
    if not isinstance(value, str):
        raise MissingRequiredField(field_name, "must be a date (YYYY-MM-DD)")
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise MissingRequiredField(field_name, "must be a date (YYYY-MM-DD)")


def inclusive_days(start: date, end: date) -> int:
    """Whole days from start to end, counting both ends."""
    return (end - start).days + 1


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()
