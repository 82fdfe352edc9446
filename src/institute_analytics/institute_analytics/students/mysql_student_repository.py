from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, student_code, full_name, barcode, status"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        student_code=r["student_code"],
        full_name=r["full_name"],
        barcode=r.get("barcode"),
        status=r.get("status") or "active",
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {column}=%s", (value,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._get_one("student_id", int(student_id))

    def get_by_barcode(self, barcode: str) -> Optional[Student]:
        return self._get_one("barcode", barcode)

    def get_by_code(self, student_code: str) -> Optional[Student]:
        return self._get_one("student_code", student_code)

    def barcode_exists(self, barcode: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM students WHERE barcode=%s LIMIT 1", (barcode,))
            return fetchone(cur) is not None

    def set_barcode(self, student_id: int, barcode: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE students SET barcode=%s WHERE student_id=%s", (barcode, int(student_id)))
            return cur.rowcount > 0

    def list_without_barcode(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE barcode IS NULL ORDER BY student_id ASC")
            return [_to_student(r) for r in fetchall(cur)]
