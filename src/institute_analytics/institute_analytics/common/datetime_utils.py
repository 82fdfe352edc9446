from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def as_day(value: date | datetime) -> date:
    """Drop the time component of a datetime; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def month_key(value: date | datetime) -> str:
    """Calendar month bucket key (YYYY-MM)."""
    return f"{value.year:04d}-{value.month:02d}"


def today_local() -> date:
    """Current local date.

    Note: Only the HTTP layer calls this; services take `today` explicitly.
    """
    return date.today()
