from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PaymentStatus(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"
    OVERDUE = "overdue"
    PARTIAL = "partial"


class ScanOutcome(str, Enum):
    """Which stage of the scan-station protocol decided the result."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    NOT_ENROLLED = "not_enrolled"
    WRITE_FAILED = "write_failed"
