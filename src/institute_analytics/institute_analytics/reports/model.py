from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class MonthlyRevenue:
    month: str
    revenue: float
    payments: int


@dataclass(frozen=True)
class PaymentStats:
    total_revenue: float
    paid_amount: float
    pending_amount: float
    overdue_amount: float
    total_payments: int


@dataclass(frozen=True)
class Defaulter:
    student_id: int
    student_name: str
    student_code: str
    total_pending: float
    overdue_count: int


@dataclass(frozen=True)
class RevenueByClass:
    class_name: str
    revenue: float
    students: int


@dataclass(frozen=True)
class FinancialReport:
    monthly_revenue: list[MonthlyRevenue] = field(default_factory=list)
    payment_stats: PaymentStats = field(default_factory=lambda: PaymentStats(0.0, 0.0, 0.0, 0.0, 0))
    defaulters: list[Defaulter] = field(default_factory=list)
    revenue_by_class: list[RevenueByClass] = field(default_factory=list)


@dataclass(frozen=True)
class OverduePayment:
    payment_id: int
    student_id: int
    student_name: str
    student_code: str
    amount: float
    due_date: date
    days_overdue: int


@dataclass(frozen=True)
class OverduePaymentsReport:
    payments: list[OverduePayment] = field(default_factory=list)
    total_amount: float = 0.0


@dataclass(frozen=True)
class DailyAttendanceStats:
    date: date
    present: int
    absent: int
    late: int
    total: int
    rate: float


@dataclass(frozen=True)
class ClassAttendanceComparison:
    class_name: str
    total_sessions: int
    average_attendance: float
    present_count: int
    absent_count: int


@dataclass(frozen=True)
class RiskStudent:
    student_id: int
    student_name: str
    student_code: str
    total_absences: int
    attendance_rate: float
    classes_enrolled: int


@dataclass(frozen=True)
class OverallAttendanceStats:
    total_sessions: int
    average_attendance_rate: float
    total_present: int
    total_absent: int
    total_late: int


@dataclass(frozen=True)
class AttendanceReport:
    daily_stats: list[DailyAttendanceStats] = field(default_factory=list)
    class_comparison: list[ClassAttendanceComparison] = field(default_factory=list)
    risk_students: list[RiskStudent] = field(default_factory=list)
    overall_stats: OverallAttendanceStats = field(default_factory=lambda: OverallAttendanceStats(0, 0.0, 0, 0, 0))


@dataclass(frozen=True)
class ClassWindowRate:
    class_id: int
    class_name: str
    total: int
    attendance_rate: float


@dataclass(frozen=True)
class AttendanceSnapshot:
    """Dashboard read-out: today's counts plus a trailing-window rate.

    Note: here `late` counts as attended, unlike the report's present-only rate.
    """

    today: date
    total_marked_today: int
    present_today: int
    absent_today: int
    window_days: int
    window_attendance_rate: float
    class_rates: list[ClassWindowRate] = field(default_factory=list)


@dataclass(frozen=True)
class TopClass:
    class_id: int
    class_name: str
    enrollment_count: int
    attendance_rate: float


@dataclass(frozen=True)
class ClassDailyAttendance:
    """One class on one day. `attendance_percentage` counts present and late."""

    class_id: int
    class_name: str
    date: date
    total_marked: int
    present_count: int
    absent_count: int
    late_count: int
    excused_count: int
    attendance_percentage: float


@dataclass(frozen=True)
class StudentClassAttendance:
    student_id: int
    student_name: str
    student_code: str
    class_id: int
    class_name: str
    total_classes: int
    present_count: int
    absent_count: int
    late_count: int
    excused_count: int
    attendance_percentage: float


@dataclass(frozen=True)
class GradeDistribution:
    grade: str
    count: int
    percentage: float


@dataclass(frozen=True)
class TopPerformer:
    student_id: int
    student_name: str
    student_code: str
    average_score: float
    assessments_taken: int


@dataclass(frozen=True)
class ClassPerformance:
    class_name: str
    average_score: float
    assessments_count: int
    students_count: int
    highest_score: float
    lowest_score: float


@dataclass(frozen=True)
class AssessmentStats:
    total_assessments: int
    total_grades: int
    average_score: float
    highest_score: float
    lowest_score: float


@dataclass(frozen=True)
class AcademicReport:
    grade_distribution: list[GradeDistribution] = field(default_factory=list)
    top_performers: list[TopPerformer] = field(default_factory=list)
    class_performance: list[ClassPerformance] = field(default_factory=list)
    assessment_stats: AssessmentStats = field(default_factory=lambda: AssessmentStats(0, 0, 0.0, 0.0, 0.0))
