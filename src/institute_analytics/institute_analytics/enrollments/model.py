from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus, EnrollmentStatus


@dataclass(frozen=True)
class Enrollment:
    """Domain entity: a Student's membership in a Class."""

    enrollment_id: int
    student_id: int
    class_id: int
    status: EnrollmentStatus
    class_name: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == EnrollmentStatus.ACTIVE


@dataclass(frozen=True)
class EnrolledStudent:
    """Read-model for the class attendance sheet."""

    student_id: int
    student_code: str
    full_name: str
    attendance_status: Optional[AttendanceStatus] = None
    attendance_notes: Optional[str] = None
