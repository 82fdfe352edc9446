from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_date(value: date | str | None, field_name: str) -> date:
    """Accept a date or an ISO YYYY-MM-DD string."""

    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value).strip())
    except ValueError as e:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD, got {value!r}") from e


def optional_date(value: date | str | None, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    return require_date(value, field_name)


def require_range(start: Optional[date], end: Optional[date]) -> None:
    if start and end and start > end:
        raise ValidationError("start date must not be after end date")


def require_positive_id(value, field_name: str) -> int:
    try:
        ident = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} is invalid") from e
    if ident <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return ident


def require_status(value: AttendanceStatus | str | None) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(str(value or "").strip().lower())
    except ValueError as e:
        raise ValidationError(f"Unknown attendance status: {value!r}") from e
