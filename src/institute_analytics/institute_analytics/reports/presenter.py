from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date
from enum import Enum
from typing import Any

from ..core.constants import AMOUNT_DECIMALS, REPORT_DECIMALS

# Report-level and summary objects use camelCase keys; row objects keep snake_case.
_CAMEL_CASE_TYPES = {
    "FinancialReport",
    "PaymentStats",
    "AttendanceReport",
    "OverallAttendanceStats",
    "AcademicReport",
    "AssessmentStats",
    "AttendanceSnapshot",
    "OverduePaymentsReport",
}

# Percentage-valued fields; every other float field is a money amount.
_PERCENT_FIELDS = {
    "rate",
    "percentage",
    "average_attendance",
    "attendance_rate",
    "attendance_percentage",
    "average_attendance_rate",
    "window_attendance_rate",
    "average_score",
    "highest_score",
    "lowest_score",
}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def present(value: Any, *, decimals: int = REPORT_DECIMALS, amount_decimals: int = AMOUNT_DECIMALS) -> Any:
    """Convert report dataclasses into JSON-ready data.

    Percentages are rounded to `decimals`, amounts to `amount_decimals`.
    This is the only place report values are rounded.
    """

    if is_dataclass(value) and not isinstance(value, type):
        camel = type(value).__name__ in _CAMEL_CASE_TYPES
        out = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if isinstance(item, float):
                item = round(item, decimals if f.name in _PERCENT_FIELDS else amount_decimals)
            else:
                item = present(item, decimals=decimals, amount_decimals=amount_decimals)
            out[_camel(f.name) if camel else f.name] = item
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        return round(value, decimals)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [present(v, decimals=decimals, amount_decimals=amount_decimals) for v in value]
    if isinstance(value, dict):
        return {k: present(v, decimals=decimals, amount_decimals=amount_decimals) for k, v in value.items()}
    return value
