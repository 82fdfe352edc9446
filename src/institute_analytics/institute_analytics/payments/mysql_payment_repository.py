from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_date, range_clauses, to_float, where_sql
from .model import OUTSTANDING_STATUSES, FeePayment
from .repository import PaymentRepository

_PAYMENT_SELECT = """
    SELECT
        p.payment_id, p.student_id, p.enrollment_id,
        p.amount, p.amount_paid, p.status, p.created_at, p.payment_date, p.due_date,
        s.full_name, s.student_code
    FROM fee_payments p
    LEFT JOIN students s ON s.student_id = p.student_id
"""


def _to_payment(r: dict) -> FeePayment:
    return FeePayment(
        payment_id=int(r["payment_id"]),
        student_id=int(r["student_id"]),
        enrollment_id=r.get("enrollment_id"),
        amount=to_float(r.get("amount")),
        amount_paid=to_float(r.get("amount_paid")),
        status=PaymentStatus(r["status"]),
        created_at=r["created_at"],
        payment_date=normalize_mysql_date(r.get("payment_date")),
        due_date=normalize_mysql_date(r.get("due_date")),
        student_name=r.get("full_name"),
        student_code=r.get("student_code"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[FeePayment]:
        clauses, params = range_clauses("DATE(p.created_at)", start, end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_PAYMENT_SELECT}
                {where_sql(clauses)}
                ORDER BY p.created_at DESC
                """,
                tuple(params),
            )
            return [_to_payment(r) for r in fetchall(cur)]

    def list_outstanding(self, *, due_before: date) -> Sequence[FeePayment]:
        placeholders = ",".join(["%s"] * len(OUTSTANDING_STATUSES))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_PAYMENT_SELECT}
                WHERE p.status IN ({placeholders}) AND p.due_date IS NOT NULL AND p.due_date < %s
                ORDER BY p.due_date ASC, p.payment_id ASC
                """,
                (*[s.value for s in OUTSTANDING_STATUSES], due_before),
            )
            return [_to_payment(r) for r in fetchall(cur)]
