from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from ..assessments.repository import GradeRepository
from ..attendance.repository import AttendanceRepository
from ..common.validators import optional_date, require_date, require_positive_id, require_range
from ..core.constants import ATTENDANCE_WINDOW_DAYS, TOP_CLASSES_LIMIT
from ..core.exceptions import ValidationError
from ..enrollments.repository import EnrollmentRepository
from ..payments.repository import PaymentRepository
from .academic import build_academic_report
from .attendance import (
    build_attendance_report,
    build_attendance_snapshot,
    class_attendance_history,
    student_attendance_summary,
    top_classes,
)
from .financial import build_financial_report, overdue_payments
from .grading.base import GradeScale
from .grading.standard_scale import StandardGradeScale
from .model import (
    AcademicReport,
    AttendanceReport,
    AttendanceSnapshot,
    ClassDailyAttendance,
    FinancialReport,
    OverduePaymentsReport,
    StudentClassAttendance,
    TopClass,
)

logger = logging.getLogger(__name__)


class ReportService:
    """Reads a snapshot of records for the requested range and hands it to
    the pure builders. Each report reads independently; no transaction spans
    two reports.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        payments: PaymentRepository,
        grades: GradeRepository,
        enrollments: EnrollmentRepository,
        *,
        grade_scale: Optional[GradeScale] = None,
    ):
        self._attendance = attendance
        self._payments = payments
        self._grades = grades
        self._enrollments = enrollments
        self._grade_scale = grade_scale or StandardGradeScale()

    @staticmethod
    def _range(start, end) -> tuple[Optional[date], Optional[date]]:
        start_d = optional_date(start, "start")
        end_d = optional_date(end, "end")
        require_range(start_d, end_d)
        return start_d, end_d

    def build_financial_report(self, *, start: date | str | None = None, end: date | str | None = None) -> FinancialReport:
        start, end = self._range(start, end)
        payments = self._payments.list_range(start=start, end=end)
        enrollments = self._enrollments.list_active()
        logger.debug("Financial report start=%s end=%s payments=%d", start, end, len(payments))
        return build_financial_report(payments, enrollments, start=start, end=end)

    def build_attendance_report(self, *, start: date | str | None = None, end: date | str | None = None) -> AttendanceReport:
        start, end = self._range(start, end)
        records = self._attendance.list_range(start=start, end=end)
        logger.debug("Attendance report start=%s end=%s records=%d", start, end, len(records))
        return build_attendance_report(records, start=start, end=end)

    def build_academic_report(self, *, start: date | str | None = None, end: date | str | None = None) -> AcademicReport:
        start, end = self._range(start, end)
        grades = self._grades.list_range(start=start, end=end)
        logger.debug("Academic report start=%s end=%s grades=%d", start, end, len(grades))
        return build_academic_report(grades, start=start, end=end, scale=self._grade_scale)

    def build_attendance_snapshot(
        self,
        *,
        today: date | str,
        window_days: int = ATTENDANCE_WINDOW_DAYS,
    ) -> AttendanceSnapshot:
        today = require_date(today, "today")
        records = self._attendance.list_range(start=today - timedelta(days=int(window_days)), end=today)
        return build_attendance_snapshot(records, today=today, window_days=window_days)

    def build_overdue_payments(self, *, today: date | str) -> OverduePaymentsReport:
        today = require_date(today, "today")
        payments = self._payments.list_outstanding(due_before=today)
        return overdue_payments(payments, today=today)

    def build_top_classes(
        self,
        *,
        today: date | str,
        limit: int = TOP_CLASSES_LIMIT,
        window_days: int = ATTENDANCE_WINDOW_DAYS,
    ) -> list[TopClass]:
        today = require_date(today, "today")
        if int(limit) <= 0:
            raise ValidationError("limit must be positive")
        enrollments = self._enrollments.list_active()
        records = self._attendance.list_range(start=today - timedelta(days=int(window_days)), end=today)
        return top_classes(enrollments, records, today=today, window_days=window_days, limit=int(limit))

    def build_class_attendance_history(
        self,
        class_id: int,
        *,
        start: date | str | None = None,
        end: date | str | None = None,
    ) -> list[ClassDailyAttendance]:
        class_id = require_positive_id(class_id, "class_id")
        start, end = self._range(start, end)
        records = self._attendance.list_range(start=start, end=end, class_id=class_id)
        return class_attendance_history(records, class_id=class_id, start=start, end=end)

    def build_student_attendance_summary(self, student_id: int) -> list[StudentClassAttendance]:
        student_id = require_positive_id(student_id, "student_id")
        records = self._attendance.list_range(student_id=student_id)
        return student_attendance_summary(records, student_id=student_id)
