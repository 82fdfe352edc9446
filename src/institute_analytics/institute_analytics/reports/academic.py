from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..analytics.aggregation import bucket_by, mean, top_n, within_range
from ..assessments.model import GradeFact
from ..core.constants import TOP_PERFORMER_MIN_ASSESSMENTS, TOP_PERFORMERS_LIMIT, UNKNOWN_LABEL
from .grading.base import GradeScale
from .grading.standard_scale import StandardGradeScale
from .model import AcademicReport, AssessmentStats, ClassPerformance, GradeDistribution, TopPerformer


def grade_distribution(graded: Sequence[GradeFact], scale: GradeScale) -> list[GradeDistribution]:
    counts = {band.label: 0 for band in scale.bands()}
    for g in graded:
        counts[scale.band_for(g.percentage)] += 1

    total = len(graded)
    return [
        GradeDistribution(grade=label, count=count, percentage=(100.0 * count / total) if total else 0.0)
        for label, count in counts.items()
    ]


def top_performers(
    graded: Sequence[GradeFact],
    *,
    min_assessments: int = TOP_PERFORMER_MIN_ASSESSMENTS,
    limit: int = TOP_PERFORMERS_LIMIT,
) -> list[TopPerformer]:
    rows: list[TopPerformer] = []
    for student_id, bucket in bucket_by(graded, lambda g: g.student_id).items():
        if len(bucket) < min_assessments:
            continue
        first = bucket[0]
        rows.append(
            TopPerformer(
                student_id=student_id,
                student_name=first.student_name or UNKNOWN_LABEL,
                student_code=first.student_code or "N/A",
                average_score=mean([g.percentage for g in bucket]),
                assessments_taken=len(bucket),
            )
        )
    return top_n(rows, lambda p: p.average_score, limit, tie_break=lambda p: p.student_code)


def class_performance(graded: Sequence[GradeFact]) -> list[ClassPerformance]:
    rows: list[ClassPerformance] = []
    for name, bucket in bucket_by(graded, lambda g: g.assessment.class_name or UNKNOWN_LABEL).items():
        scores = [g.percentage for g in bucket]
        rows.append(
            ClassPerformance(
                class_name=name,
                average_score=mean(scores),
                assessments_count=len(scores),
                students_count=len({g.student_id for g in bucket}),
                highest_score=max(scores),
                lowest_score=min(scores),
            )
        )
    return top_n(rows, lambda c: c.average_score, None, tie_break=lambda c: c.class_name)


def assessment_stats(grades: Sequence[GradeFact], graded: Sequence[GradeFact]) -> AssessmentStats:
    scores = [g.percentage for g in graded]
    return AssessmentStats(
        total_assessments=len({g.assessment.assessment_id for g in grades}),
        total_grades=len(grades),
        average_score=mean(scores),
        highest_score=max(scores) if scores else 0.0,
        lowest_score=min(scores) if scores else 0.0,
    )


def build_academic_report(
    grades: Sequence[GradeFact],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    scale: Optional[GradeScale] = None,
) -> AcademicReport:
    """Ungraded rows (no score, or an assessment without max_score) count only
    toward `total_grades` and `total_assessments`.
    """

    scoped = within_range(grades, lambda g: g.assessment.date, start, end)
    graded = [g for g in scoped if g.is_graded]
    return AcademicReport(
        grade_distribution=grade_distribution(graded, scale or StandardGradeScale()),
        top_performers=top_performers(graded),
        class_performance=class_performance(graded),
        assessment_stats=assessment_stats(scoped, graded),
    )
