from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceKey:
    """Natural key: at most one attendance row per (class, student, day)."""

    class_id: int
    student_id: int
    date: date


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: an attendance fact as written by the marking service."""

    class_id: int
    student_id: int
    date: date
    status: AttendanceStatus
    marked_by: Optional[int] = None
    notes: Optional[str] = None
    attendance_id: Optional[int] = None

    @property
    def key(self) -> AttendanceKey:
        return AttendanceKey(class_id=self.class_id, student_id=self.student_id, date=self.date)


@dataclass(frozen=True)
class AttendanceMark:
    """One line of a bulk marking request."""

    student_id: int
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceFact:
    """Read-model for reports (attendance joined with student and class)."""

    attendance_id: int
    class_id: int
    class_name: Optional[str]
    student_id: int
    student_name: Optional[str]
    student_code: Optional[str]
    date: date
    status: AttendanceStatus
    notes: Optional[str] = None
