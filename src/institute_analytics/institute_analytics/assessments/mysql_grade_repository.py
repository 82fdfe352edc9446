from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_date, range_clauses, to_float, where_sql
from .model import Assessment, GradeFact
from .repository import GradeRepository


class MySQLGradeRepository(GradeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[GradeFact]:
        clauses, params = range_clauses("a.date", start, end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    g.grade_id, g.student_id, g.score,
                    s.full_name, s.student_code,
                    a.assessment_id, a.class_id, a.title, a.max_score, a.date,
                    c.class_name
                FROM grades g
                JOIN assessments a ON a.assessment_id = g.assessment_id
                LEFT JOIN classes c ON c.class_id = a.class_id
                LEFT JOIN students s ON s.student_id = g.student_id
                {where_sql(clauses)}
                ORDER BY g.created_at DESC
                """,
                tuple(params),
            )
            out: list[GradeFact] = []
            for r in fetchall(cur):
                assessment = Assessment(
                    assessment_id=int(r["assessment_id"]),
                    class_id=int(r["class_id"]),
                    title=r["title"],
                    max_score=to_float(r["max_score"]) if r.get("max_score") is not None else None,
                    date=normalize_mysql_date(r["date"]),
                    class_name=r.get("class_name"),
                )
                out.append(
                    GradeFact(
                        grade_id=int(r["grade_id"]),
                        student_id=int(r["student_id"]),
                        assessment=assessment,
                        score=to_float(r["score"]) if r.get("score") is not None else None,
                        student_name=r.get("full_name"),
                        student_code=r.get("student_code"),
                    )
                )
            return out
