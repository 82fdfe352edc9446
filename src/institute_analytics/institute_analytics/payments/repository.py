from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import FeePayment


class PaymentRepository(Protocol):
    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[FeePayment]:
        """Payments whose created_at day falls within [start, end] (both optional)."""

        raise NotImplementedError

    def list_outstanding(self, *, due_before: date) -> Sequence[FeePayment]:
        """Unsettled payments (unpaid, partial, overdue) with due_date < due_before."""

        raise NotImplementedError
