from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..analytics.aggregation import bucket_by, count_where, rate, top_n, window_filter, within_range
from ..attendance.model import AttendanceFact
from ..core.constants import (
    ATTENDANCE_WINDOW_DAYS,
    DAILY_STATS_LIMIT,
    RISK_ATTENDANCE_THRESHOLD,
    RISK_STUDENTS_LIMIT,
    TOP_CLASSES_LIMIT,
    UNKNOWN_LABEL,
)
from ..core.enums import AttendanceStatus
from ..enrollments.model import Enrollment
from .model import (
    AttendanceReport,
    AttendanceSnapshot,
    ClassAttendanceComparison,
    ClassDailyAttendance,
    ClassWindowRate,
    DailyAttendanceStats,
    OverallAttendanceStats,
    RiskStudent,
    StudentClassAttendance,
    TopClass,
)


def _is(status: AttendanceStatus):
    return lambda r: r.status == status


_present = _is(AttendanceStatus.PRESENT)
_absent = _is(AttendanceStatus.ABSENT)
_late = _is(AttendanceStatus.LATE)
_excused = _is(AttendanceStatus.EXCUSED)


def _attended(r: AttendanceFact) -> bool:
    return r.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


def daily_stats(records: Sequence[AttendanceFact], *, limit: int = DAILY_STATS_LIMIT) -> list[DailyAttendanceStats]:
    """Most recent `limit` days that have at least one record, newest first."""

    rows = [
        DailyAttendanceStats(
            date=day,
            present=count_where(bucket, _present),
            absent=count_where(bucket, _absent),
            late=count_where(bucket, _late),
            total=len(bucket),
            rate=rate(bucket, _present),
        )
        for day, bucket in bucket_by(records, lambda r: r.date).items()
    ]
    return top_n(rows, lambda d: d.date.toordinal(), limit)


def class_comparison(records: Sequence[AttendanceFact]) -> list[ClassAttendanceComparison]:
    rows = [
        ClassAttendanceComparison(
            class_name=name,
            total_sessions=len(bucket),
            average_attendance=rate(bucket, _present),
            present_count=count_where(bucket, _present),
            absent_count=count_where(bucket, _absent),
        )
        for name, bucket in bucket_by(records, lambda r: r.class_name or UNKNOWN_LABEL).items()
    ]
    return top_n(rows, lambda c: c.average_attendance, None, tie_break=lambda c: c.class_name)


def risk_students(
    records: Sequence[AttendanceFact],
    *,
    threshold: float = RISK_ATTENDANCE_THRESHOLD,
    limit: int = RISK_STUDENTS_LIMIT,
) -> list[RiskStudent]:
    """Students strictly below `threshold` percent, worst first.

    Anything but `absent` counts toward attendance here (late, excused).
    """

    rows: list[RiskStudent] = []
    for student_id, bucket in bucket_by(records, lambda r: r.student_id).items():
        first = bucket[0]
        absences = count_where(bucket, _absent)
        rows.append(
            RiskStudent(
                student_id=student_id,
                student_name=first.student_name or UNKNOWN_LABEL,
                student_code=first.student_code or "N/A",
                total_absences=absences,
                attendance_rate=100.0 * (len(bucket) - absences) / len(bucket),
                classes_enrolled=len({r.class_name for r in bucket if r.class_name}),
            )
        )

    at_risk = [r for r in rows if r.attendance_rate < threshold]
    return top_n(at_risk, lambda r: r.attendance_rate, limit, descending=False, tie_break=lambda r: r.student_code)


def overall_stats(records: Sequence[AttendanceFact]) -> OverallAttendanceStats:
    return OverallAttendanceStats(
        total_sessions=len(records),
        average_attendance_rate=rate(records, _present),
        total_present=count_where(records, _present),
        total_absent=count_where(records, _absent),
        total_late=count_where(records, _late),
    )


def build_attendance_report(
    records: Sequence[AttendanceFact],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> AttendanceReport:
    scoped = within_range(records, lambda r: r.date, start, end)
    return AttendanceReport(
        daily_stats=daily_stats(scoped),
        class_comparison=class_comparison(scoped),
        risk_students=risk_students(scoped),
        overall_stats=overall_stats(scoped),
    )


def build_attendance_snapshot(
    records: Sequence[AttendanceFact],
    *,
    today: date,
    window_days: int = ATTENDANCE_WINDOW_DAYS,
) -> AttendanceSnapshot:
    todays = [r for r in records if r.date == today]
    window = window_filter(records, lambda r: r.date, window_days, today=today)

    class_rates = [
        ClassWindowRate(
            class_id=class_id,
            class_name=bucket[0].class_name or UNKNOWN_LABEL,
            total=len(bucket),
            attendance_rate=rate(bucket, _attended),
        )
        for class_id, bucket in bucket_by(window, lambda r: r.class_id).items()
    ]

    return AttendanceSnapshot(
        today=today,
        total_marked_today=len(todays),
        present_today=count_where(todays, _attended),
        absent_today=count_where(todays, _absent),
        window_days=int(window_days),
        window_attendance_rate=rate(window, _attended),
        class_rates=top_n(class_rates, lambda c: c.attendance_rate, None, tie_break=lambda c: c.class_name),
    )


def top_classes(
    enrollments: Sequence[Enrollment],
    records: Sequence[AttendanceFact],
    *,
    today: date,
    window_days: int = ATTENDANCE_WINDOW_DAYS,
    limit: int = TOP_CLASSES_LIMIT,
) -> list[TopClass]:
    """Classes with the most active enrollments, each with its trailing-window
    attended rate (present or late).
    """

    window = bucket_by(window_filter(records, lambda r: r.date, window_days, today=today), lambda r: r.class_id)

    rows = [
        TopClass(
            class_id=class_id,
            class_name=bucket[0].class_name or UNKNOWN_LABEL,
            enrollment_count=len({e.student_id for e in bucket}),
            attendance_rate=rate(window.get(class_id, []), _attended),
        )
        for class_id, bucket in bucket_by((e for e in enrollments if e.is_active), lambda e: e.class_id).items()
    ]
    return top_n(rows, lambda c: c.enrollment_count, limit, tie_break=lambda c: c.class_name)


def class_attendance_history(
    records: Sequence[AttendanceFact],
    *,
    class_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[ClassDailyAttendance]:
    """Daily rollup of one class within [start, end], newest day first."""

    scoped = within_range((r for r in records if r.class_id == class_id), lambda r: r.date, start, end)
    rows = [
        ClassDailyAttendance(
            class_id=class_id,
            class_name=bucket[0].class_name or UNKNOWN_LABEL,
            date=day,
            total_marked=len(bucket),
            present_count=count_where(bucket, _present),
            absent_count=count_where(bucket, _absent),
            late_count=count_where(bucket, _late),
            excused_count=count_where(bucket, _excused),
            attendance_percentage=rate(bucket, _attended),
        )
        for day, bucket in bucket_by(scoped, lambda r: r.date).items()
    ]
    return top_n(rows, lambda d: d.date.toordinal(), None)


def student_attendance_summary(records: Sequence[AttendanceFact], *, student_id: int) -> list[StudentClassAttendance]:
    """One row per class the student has attendance in, ordered by class name."""

    own = [r for r in records if r.student_id == student_id]
    rows: list[StudentClassAttendance] = []
    for class_id, bucket in bucket_by(own, lambda r: r.class_id).items():
        first = bucket[0]
        rows.append(
            StudentClassAttendance(
                student_id=student_id,
                student_name=first.student_name or UNKNOWN_LABEL,
                student_code=first.student_code or "N/A",
                class_id=class_id,
                class_name=first.class_name or UNKNOWN_LABEL,
                total_classes=len(bucket),
                present_count=count_where(bucket, _present),
                absent_count=count_where(bucket, _absent),
                late_count=count_where(bucket, _late),
                excused_count=count_where(bucket, _excused),
                attendance_percentage=rate(bucket, _attended),
            )
        )
    return sorted(rows, key=lambda r: (r.class_name, r.class_id))
