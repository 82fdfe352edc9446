from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import GradeFact


class GradeRepository(Protocol):
    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[GradeFact]:
        """Grades whose assessment date falls within [start, end] (both optional)."""

        raise NotImplementedError
