from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EnrollmentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EnrolledStudent, Enrollment
from .repository import EnrollmentRepository


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self, *, student_id: int, class_id: int) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.enrollment_id, e.student_id, e.class_id, e.status, c.class_name
                FROM enrollments e
                JOIN classes c ON c.class_id = e.class_id
                WHERE e.student_id=%s AND e.class_id=%s AND e.status=%s
                """,
                (int(student_id), int(class_id), EnrollmentStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Enrollment(
                enrollment_id=int(r["enrollment_id"]),
                student_id=int(r["student_id"]),
                class_id=int(r["class_id"]),
                status=EnrollmentStatus(r["status"]),
                class_name=r.get("class_name"),
            )

    def list_active_for_class(self, class_id: int) -> Sequence[EnrolledStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.student_id, s.student_code, s.full_name
                FROM enrollments e
                JOIN students s ON s.student_id = e.student_id
                WHERE e.class_id=%s AND e.status=%s
                ORDER BY s.full_name ASC
                """,
                (int(class_id), EnrollmentStatus.ACTIVE.value),
            )
            return [
                EnrolledStudent(
                    student_id=int(r["student_id"]),
                    student_code=r["student_code"],
                    full_name=r["full_name"],
                )
                for r in fetchall(cur)
            ]

    def list_active(self) -> Sequence[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.enrollment_id, e.student_id, e.class_id, e.status, c.class_name
                FROM enrollments e
                JOIN classes c ON c.class_id = e.class_id
                WHERE e.status=%s
                """,
                (EnrollmentStatus.ACTIVE.value,),
            )
            return [
                Enrollment(
                    enrollment_id=int(r["enrollment_id"]),
                    student_id=int(r["student_id"]),
                    class_id=int(r["class_id"]),
                    status=EnrollmentStatus(r["status"]),
                    class_name=r.get("class_name"),
                )
                for r in fetchall(cur)
            ]
