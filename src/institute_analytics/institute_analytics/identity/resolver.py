from __future__ import annotations

from typing import Optional

from ..enrollments.model import Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..students.model import Student
from ..students.repository import StudentRepository


class IdentityResolver:
    """Map a scanned token to a student and check class membership.

    Both lookups return None instead of raising: an unknown token or a
    missing enrollment is an everyday outcome at a scan station.
    """

    def __init__(self, students: StudentRepository, enrollments: EnrollmentRepository):
        self._students = students
        self._enrollments = enrollments

    def resolve(self, token: str) -> Optional[Student]:
        # Barcode first, then the manually typed student code.
        token = (token or "").strip()
        if not token:
            return None
        return self._students.get_by_barcode(token) or self._students.get_by_code(token)

    def verify_enrollment(self, *, student_id: int, class_id: int) -> Optional[Enrollment]:
        enrollment = self._enrollments.get_active(student_id=int(student_id), class_id=int(class_id))
        if enrollment is None or not enrollment.is_active:
            return None
        return enrollment
