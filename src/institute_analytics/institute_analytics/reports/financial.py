from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..analytics.aggregation import bucket_by, month_bucket, top_n, within_range
from ..core.constants import DEFAULTERS_LIMIT, UNKNOWN_LABEL
from ..core.enums import PaymentStatus
from ..enrollments.model import Enrollment
from ..payments.model import FeePayment
from .model import (
    Defaulter,
    FinancialReport,
    MonthlyRevenue,
    OverduePayment,
    OverduePaymentsReport,
    PaymentStats,
    RevenueByClass,
)


def monthly_revenue(payments: Sequence[FeePayment]) -> list[MonthlyRevenue]:
    return [
        MonthlyRevenue(month=month, revenue=sum(p.amount_paid for p in bucket), payments=len(bucket))
        for month, bucket in month_bucket(payments, lambda p: p.created_at)
    ]


def payment_stats(payments: Sequence[FeePayment]) -> PaymentStats:
    # Remainders are not clamped: an over-collected payment lowers the total.
    return PaymentStats(
        total_revenue=sum(p.amount for p in payments),
        paid_amount=sum(p.amount_paid for p in payments),
        pending_amount=sum(p.remaining for p in payments if p.status == PaymentStatus.UNPAID),
        overdue_amount=sum(p.remaining for p in payments if p.status == PaymentStatus.OVERDUE),
        total_payments=len(payments),
    )


def defaulters(payments: Sequence[FeePayment], *, limit: int = DEFAULTERS_LIMIT) -> list[Defaulter]:
    overdue = [p for p in payments if p.status == PaymentStatus.OVERDUE]

    rows: list[Defaulter] = []
    for student_id, bucket in bucket_by(overdue, lambda p: p.student_id).items():
        first = bucket[0]
        rows.append(
            Defaulter(
                student_id=student_id,
                student_name=first.student_name or UNKNOWN_LABEL,
                student_code=first.student_code or "N/A",
                total_pending=sum(p.remaining for p in bucket),
                overdue_count=len(bucket),
            )
        )
    return top_n(rows, lambda d: d.total_pending, limit, tie_break=lambda d: d.student_code)


def revenue_by_class(payments: Sequence[FeePayment], enrollments: Sequence[Enrollment]) -> list[RevenueByClass]:
    """Attribute each payment to every class its student is actively enrolled in.

    A student in two classes counts toward both; a student with several
    payments counts once toward a class's `students`.
    """

    classes_by_student = bucket_by((e for e in enrollments if e.is_active), lambda e: e.student_id)

    revenue: dict[str, float] = {}
    students: dict[str, set[int]] = {}
    for p in payments:
        for e in classes_by_student.get(p.student_id, []):
            name = e.class_name or UNKNOWN_LABEL
            revenue[name] = revenue.get(name, 0.0) + p.amount_paid
            students.setdefault(name, set()).add(p.student_id)

    rows = [RevenueByClass(class_name=name, revenue=total, students=len(students[name])) for name, total in revenue.items()]
    return top_n(rows, lambda r: r.revenue, None, tie_break=lambda r: r.class_name)


def build_financial_report(
    payments: Sequence[FeePayment],
    enrollments: Sequence[Enrollment],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> FinancialReport:
    scoped = within_range(payments, lambda p: p.created_at, start, end)
    return FinancialReport(
        monthly_revenue=monthly_revenue(scoped),
        payment_stats=payment_stats(scoped),
        defaulters=defaulters(scoped),
        revenue_by_class=revenue_by_class(scoped, enrollments),
    )


def overdue_payments(payments: Sequence[FeePayment], *, today: date) -> OverduePaymentsReport:
    """Unsettled payments whose due date has passed, oldest due first.

    `amount` is what is still owed on the payment, and `total_amount` sums it.
    """

    late = [p for p in payments if p.is_outstanding and p.due_date is not None and p.due_date < today]
    rows = [
        OverduePayment(
            payment_id=p.payment_id,
            student_id=p.student_id,
            student_name=p.student_name or UNKNOWN_LABEL,
            student_code=p.student_code or "N/A",
            amount=p.remaining,
            due_date=p.due_date,
            days_overdue=(today - p.due_date).days,
        )
        for p in late
    ]
    rows = top_n(rows, lambda r: r.days_overdue, None, tie_break=lambda r: (r.student_code, r.payment_id))
    return OverduePaymentsReport(payments=rows, total_amount=sum((r.amount for r in rows), 0.0))
