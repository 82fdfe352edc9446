from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PaymentStatus


OUTSTANDING_STATUSES = (PaymentStatus.UNPAID, PaymentStatus.PARTIAL, PaymentStatus.OVERDUE)


@dataclass(frozen=True)
class FeePayment:
    """Read-model: a billed fee joined with the paying student.

    Note: `amount_paid <= amount` is expected but not enforced; remainders
    may be negative when a payment was over-collected.
    """

    payment_id: int
    student_id: int
    amount: float
    amount_paid: float
    status: PaymentStatus
    created_at: datetime
    enrollment_id: Optional[int] = None
    payment_date: Optional[date] = None
    due_date: Optional[date] = None
    student_name: Optional[str] = None
    student_code: Optional[str] = None

    @property
    def remaining(self) -> float:
        return self.amount - self.amount_paid

    @property
    def is_outstanding(self) -> bool:
        return self.status in OUTSTANDING_STATUSES
