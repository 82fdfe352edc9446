from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

import pytest

from src.institute_analytics.institute_analytics.attendance.model import AttendanceFact, AttendanceRecord
from src.institute_analytics.institute_analytics.container import build_services
from src.institute_analytics.institute_analytics.core.enums import EnrollmentStatus
from src.institute_analytics.institute_analytics.core.exceptions import PersistenceError
from src.institute_analytics.institute_analytics.enrollments.model import EnrolledStudent, Enrollment
from src.institute_analytics.institute_analytics.students.model import Student


class InMemoryStudents:
    def __init__(self, students: list[Student] | None = None):
        self.by_id: dict[int, Student] = {s.student_id: s for s in students or []}

    def add(self, student: Student) -> Student:
        self.by_id[student.student_id] = student
        return student

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.by_id.get(student_id)

    def get_by_barcode(self, barcode: str) -> Optional[Student]:
        return next((s for s in self.by_id.values() if s.barcode and s.barcode == barcode), None)

    def get_by_code(self, student_code: str) -> Optional[Student]:
        return next((s for s in self.by_id.values() if s.student_code == student_code), None)

    def barcode_exists(self, barcode: str) -> bool:
        return self.get_by_barcode(barcode) is not None

    def set_barcode(self, student_id: int, barcode: str) -> bool:
        s = self.by_id.get(student_id)
        if not s:
            return False
        self.by_id[student_id] = replace(s, barcode=barcode)
        return True

    def list_without_barcode(self):
        return [s for s in self.by_id.values() if not s.barcode]


class InMemoryEnrollments:
    def __init__(self, students: InMemoryStudents, class_names: dict[int, str]):
        self._students = students
        self._class_names = class_names
        self.rows: list[Enrollment] = []

    def enroll(self, student_id: int, class_id: int, status: EnrollmentStatus = EnrollmentStatus.ACTIVE) -> Enrollment:
        e = Enrollment(
            enrollment_id=len(self.rows) + 1,
            student_id=student_id,
            class_id=class_id,
            status=status,
            class_name=self._class_names.get(class_id),
        )
        self.rows.append(e)
        return e

    def get_active(self, *, student_id: int, class_id: int) -> Optional[Enrollment]:
        return next(
            (
                e
                for e in self.rows
                if e.student_id == student_id and e.class_id == class_id and e.status == EnrollmentStatus.ACTIVE
            ),
            None,
        )

    def list_active_for_class(self, class_id: int):
        out = []
        for e in self.rows:
            if e.class_id == class_id and e.status == EnrollmentStatus.ACTIVE:
                s = self._students.get_by_id(e.student_id)
                out.append(EnrolledStudent(student_id=s.student_id, student_code=s.student_code, full_name=s.full_name))
        return out

    def list_active(self):
        return [e for e in self.rows if e.status == EnrollmentStatus.ACTIVE]


class InMemoryAttendance:
    """Upserts on (class_id, student_id, date), like the UNIQUE key in MySQL."""

    def __init__(self, students: InMemoryStudents, class_names: dict[int, str]):
        self._students = students
        self._class_names = class_names
        self._by_key: dict[tuple[int, int, date], AttendanceRecord] = {}
        self._id = 0
        self.fail_writes = False
        self.write_calls = 0
        self.range_calls: list[dict] = []

    def upsert_many(self, records):
        self.write_calls += 1
        if self.fail_writes:
            raise PersistenceError("write failed")
        for r in records:
            key = (r.class_id, r.student_id, r.date)
            existing = self._by_key.get(key)
            if existing:
                attendance_id = existing.attendance_id
            else:
                self._id += 1
                attendance_id = self._id
            self._by_key[key] = replace(r, attendance_id=attendance_id)
        return len(records)

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_key.values())

    def _fact(self, r: AttendanceRecord) -> AttendanceFact:
        s = self._students.get_by_id(r.student_id)
        return AttendanceFact(
            attendance_id=r.attendance_id,
            class_id=r.class_id,
            class_name=self._class_names.get(r.class_id),
            student_id=r.student_id,
            student_name=s.full_name if s else None,
            student_code=s.student_code if s else None,
            date=r.date,
            status=r.status,
            notes=r.notes,
        )

    def list_for_class_and_date(self, *, class_id: int, on_date: date):
        return [r for r in self._by_key.values() if r.class_id == class_id and r.date == on_date]

    def list_for_student(self, student_id: int, limit: int):
        items = [self._fact(r) for r in self._by_key.values() if r.student_id == student_id]
        items.sort(key=lambda f: f.date, reverse=True)
        return items[:limit]

    def list_range(self, *, start=None, end=None, class_id=None, student_id=None):
        self.range_calls.append({"start": start, "end": end, "class_id": class_id, "student_id": student_id})
        return [
            self._fact(r)
            for r in self._by_key.values()
            if (start is None or r.date >= start)
            and (end is None or r.date <= end)
            and (class_id is None or r.class_id == class_id)
            and (student_id is None or r.student_id == student_id)
        ]

    def delete_by_id(self, attendance_id: int) -> bool:
        for key, r in list(self._by_key.items()):
            if r.attendance_id == attendance_id:
                del self._by_key[key]
                return True
        return False


class FakeRangeRepo:
    """Payments/grades fake: returns fixed rows and remembers the range asked for."""

    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.last_args = None

    def list_range(self, *, start=None, end=None):
        self.last_args = {"start": start, "end": end}
        return self.rows


class FakePayments(FakeRangeRepo):
    def list_outstanding(self, *, due_before):
        self.last_args = {"due_before": due_before}
        return [p for p in self.rows if p.is_outstanding and p.due_date and p.due_date < due_before]


class Store:
    def __init__(self):
        self.class_names = {1: "Math 101", 2: "Physics 201"}
        self.students = InMemoryStudents(
            [
                Student(student_id=1, student_code="S001", full_name="Alice Tran", barcode="STU24000001"),
                Student(student_id=2, student_code="S002", full_name="Bao Nguyen"),
                Student(student_id=3, student_code="S003", full_name="Chi Le"),
            ]
        )
        self.enrollments = InMemoryEnrollments(self.students, self.class_names)
        self.attendance = InMemoryAttendance(self.students, self.class_names)
        self.payments = FakePayments()
        self.grades = FakeRangeRepo()

    def services(self):
        return build_services(
            students_repo=self.students,
            enrollments_repo=self.enrollments,
            attendance_repo=self.attendance,
            payments_repo=self.payments,
            grades_repo=self.grades,
        )


@pytest.fixture
def fixed_today() -> date:
    return date(2024, 5, 20)


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def services(store):
    return store.services()
