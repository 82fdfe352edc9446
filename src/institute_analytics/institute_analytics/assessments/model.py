from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Assessment:
    assessment_id: int
    class_id: int
    title: str
    max_score: Optional[float]
    date: date
    class_name: Optional[str] = None


@dataclass(frozen=True)
class GradeFact:
    """Read-model: one grade row joined with its assessment and student.

    A grade with no score is ungraded and takes no part in statistics.
    """

    grade_id: int
    student_id: int
    assessment: Assessment
    score: Optional[float] = None
    student_name: Optional[str] = None
    student_code: Optional[str] = None

    @property
    def is_graded(self) -> bool:
        return self.score is not None and bool(self.assessment.max_score)

    @property
    def percentage(self) -> Optional[float]:
        if not self.is_graded:
            return None
        return 100.0 * float(self.score) / float(self.assessment.max_score)
