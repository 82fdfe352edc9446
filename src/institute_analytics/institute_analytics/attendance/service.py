from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence, Union

from ..common.validators import require_date, require_non_empty, require_positive_id, require_status
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, ScanOutcome
from ..core.exceptions import PersistenceError, ValidationError
from ..enrollments.model import EnrolledStudent
from ..enrollments.repository import EnrollmentRepository
from ..identity.resolver import IdentityResolver
from .model import AttendanceFact, AttendanceMark, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

MarkInput = Union[AttendanceMark, Mapping[str, Any]]


@dataclass(frozen=True)
class MarkResult:
    written_count: int


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan; `status` names the stage that decided it."""

    status: ScanOutcome
    message: str
    student_name: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == ScanOutcome.SUCCESS


def _to_mark(item: MarkInput) -> AttendanceMark:
    if isinstance(item, AttendanceMark):
        return AttendanceMark(
            student_id=require_positive_id(item.student_id, "student_id"),
            status=require_status(item.status),
            notes=item.notes or None,
        )
    if not isinstance(item, Mapping):
        raise ValidationError("Attendance record must be an object")
    return AttendanceMark(
        student_id=require_positive_id(item.get("student_id"), "student_id"),
        status=require_status(item.get("status")),
        notes=(item.get("notes") or None),
    )


class AttendanceMarkingService:
    """Writes attendance facts; every write is an upsert on the natural key.

    Concurrent writers to the same (class, student, day) rely on the store's
    upsert: last write wins, no locking here.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        resolver: IdentityResolver,
        enrollments: EnrollmentRepository,
    ):
        self._attendance = attendance
        self._resolver = resolver
        self._enrollments = enrollments

    def mark_attendance(
        self,
        *,
        class_id: int,
        on_date: date | str,
        records: Sequence[MarkInput],
        actor: Optional[int] = None,
    ) -> MarkResult:
        """Bulk/manual marking.

        No enrollment check: callers build `records` from the class sheet.
        Raises PersistenceError if the store write fails (nothing is retried).
        """

        class_id = require_positive_id(class_id, "class_id")
        day = require_date(on_date, "date")
        marks = [_to_mark(item) for item in records or []]

        rows = [
            AttendanceRecord(
                class_id=class_id,
                student_id=m.student_id,
                date=day,
                status=m.status,
                marked_by=actor,
                notes=m.notes,
            )
            for m in marks
        ]
        if rows:
            self._attendance.upsert_many(rows)

        logger.info("Marked attendance class_id=%s date=%s count=%d", class_id, day, len(rows))
        return MarkResult(written_count=len(rows))

    def mark_by_identity(
        self,
        *,
        class_id: int,
        on_date: date | str,
        token: str,
        actor: Optional[int] = None,
    ) -> ScanResult:
        """Scan-station check-in: resolve -> verify enrollment -> mark present."""

        class_id = require_positive_id(class_id, "class_id")
        day = require_date(on_date, "date")
        token = require_non_empty(token, "Barcode")

        student = self._resolver.resolve(token)
        if not student:
            logger.info("Scan rejected (not_found) class_id=%s token=%r", class_id, token)
            return ScanResult(status=ScanOutcome.NOT_FOUND, message="Student not found")

        if not self._resolver.verify_enrollment(student_id=student.student_id, class_id=class_id):
            logger.info("Scan rejected (not_enrolled) class_id=%s student_id=%s", class_id, student.student_id)
            return ScanResult(
                status=ScanOutcome.NOT_ENROLLED,
                message=f"{student.full_name} is not enrolled in this class",
                student_name=student.full_name,
            )

        record = AttendanceRecord(
            class_id=class_id,
            student_id=student.student_id,
            date=day,
            status=AttendanceStatus.PRESENT,
            marked_by=actor,
        )
        try:
            self._attendance.upsert_many([record])
        except PersistenceError:
            logger.exception("Scan write failed class_id=%s student_id=%s", class_id, student.student_id)
            return ScanResult(
                status=ScanOutcome.WRITE_FAILED,
                message="Failed to mark attendance",
                student_name=student.full_name,
            )

        return ScanResult(
            status=ScanOutcome.SUCCESS,
            message=f"{student.full_name} marked present",
            student_name=student.full_name,
        )

    def get_class_sheet(self, *, class_id: int, on_date: date | str) -> list[EnrolledStudent]:
        """Actively enrolled students with their status for the day (None if unmarked)."""

        class_id = require_positive_id(class_id, "class_id")
        day = require_date(on_date, "date")

        marked = {r.student_id: r for r in self._attendance.list_for_class_and_date(class_id=class_id, on_date=day)}
        sheet: list[EnrolledStudent] = []
        for s in self._enrollments.list_active_for_class(class_id):
            r = marked.get(s.student_id)
            sheet.append(
                EnrolledStudent(
                    student_id=s.student_id,
                    student_code=s.student_code,
                    full_name=s.full_name,
                    attendance_status=r.status if r else None,
                    attendance_notes=r.notes if r else None,
                )
            )
        return sheet

    def get_student_history(self, student_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceFact]:
        student_id = require_positive_id(student_id, "student_id")
        if int(limit) <= 0:
            raise ValidationError("limit must be positive")
        return self._attendance.list_for_student(student_id, int(limit))

    def delete_attendance(self, attendance_id: int) -> bool:
        deleted = self._attendance.delete_by_id(require_positive_id(attendance_id, "attendance_id"))
        if deleted:
            logger.info("Deleted attendance_id=%s", attendance_id)
        return deleted
