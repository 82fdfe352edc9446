from __future__ import annotations

from typing import Sequence

from .base import GradeBand, GradeScale

_BANDS = (
    GradeBand("A (90-100)", 90.0),
    GradeBand("B (80-89)", 80.0),
    GradeBand("C (70-79)", 70.0),
    GradeBand("D (60-69)", 60.0),
    GradeBand("F (0-59)", 0.0),
)


class StandardGradeScale(GradeScale):
    """Standard rule: A >= 90, B >= 80, C >= 70, D >= 60, otherwise F."""

    def bands(self) -> Sequence[GradeBand]:
        return _BANDS
