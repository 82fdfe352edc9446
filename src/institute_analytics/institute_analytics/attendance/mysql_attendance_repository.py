from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_date, range_clauses, where_sql
from .model import AttendanceFact, AttendanceRecord
from .repository import AttendanceRepository

_FACT_SELECT = """
    SELECT
        a.attendance_id, a.class_id, c.class_name,
        a.student_id, s.full_name, s.student_code,
        a.date, a.status, a.notes
    FROM attendance a
    LEFT JOIN students s ON s.student_id = a.student_id
    LEFT JOIN classes c ON c.class_id = a.class_id
"""


def _to_fact(r: dict) -> AttendanceFact:
    return AttendanceFact(
        attendance_id=int(r["attendance_id"]),
        class_id=int(r["class_id"]),
        class_name=r.get("class_name"),
        student_id=int(r["student_id"]),
        student_name=r.get("full_name"),
        student_code=r.get("student_code"),
        date=normalize_mysql_date(r["date"]),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_many(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance(class_id, student_id, date, status, marked_by, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status), marked_by=VALUES(marked_by), notes=VALUES(notes)
                """,
                [
                    (int(r.class_id), int(r.student_id), r.date, r.status.value, r.marked_by, r.notes)
                    for r in records
                ],
            )
        return len(records)

    def list_for_class_and_date(self, *, class_id: int, on_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, class_id, student_id, date, status, marked_by, notes
                FROM attendance
                WHERE class_id=%s AND date=%s
                """,
                (int(class_id), on_date),
            )
            return [
                AttendanceRecord(
                    attendance_id=int(r["attendance_id"]),
                    class_id=int(r["class_id"]),
                    student_id=int(r["student_id"]),
                    date=normalize_mysql_date(r["date"]),
                    status=AttendanceStatus(r["status"]),
                    marked_by=r.get("marked_by"),
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]

    def list_for_student(self, student_id: int, limit: int) -> Sequence[AttendanceFact]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_FACT_SELECT}
                WHERE a.student_id=%s
                ORDER BY a.date DESC
                LIMIT %s
                """,
                (int(student_id), int(limit)),
            )
            return [_to_fact(r) for r in fetchall(cur)]

    def list_range(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        class_id: Optional[int] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceFact]:
        clauses, params = range_clauses("a.date", start, end)
        if class_id is not None:
            clauses.append("a.class_id=%s")
            params.append(int(class_id))
        if student_id is not None:
            clauses.append("a.student_id=%s")
            params.append(int(student_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_FACT_SELECT}
                {where_sql(clauses)}
                ORDER BY a.date DESC, a.attendance_id ASC
                """,
                tuple(params),
            )
            return [_to_fact(r) for r in fetchall(cur)]

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
