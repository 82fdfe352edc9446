from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EnrolledStudent, Enrollment


class EnrollmentRepository(Protocol):
    def get_active(self, *, student_id: int, class_id: int) -> Optional[Enrollment]:
        """Return the enrollment only when its status is active."""

        raise NotImplementedError

    def list_active_for_class(self, class_id: int) -> Sequence[EnrolledStudent]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Enrollment]:
        """All active enrollments, joined with class names."""

        raise NotImplementedError
