from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceFact, AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert_many(self, records: Sequence[AttendanceRecord]) -> int:
        """Insert or update by natural key (class_id, student_id, date).

        An existing row keeps its id; status, notes and marked_by are replaced.
        All records are written in one transaction. Returns len(records).
        """

        raise NotImplementedError

    def list_for_class_and_date(self, *, class_id: int, on_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: int, limit: int) -> Sequence[AttendanceFact]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        class_id: Optional[int] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceFact]:
        """Joined facts within [start, end], optionally for one class and/or student."""

        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError
