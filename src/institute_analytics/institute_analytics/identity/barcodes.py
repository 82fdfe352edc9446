from __future__ import annotations

import logging
import random
from datetime import date
from typing import Optional

from ..core.constants import BARCODE_MAX_ATTEMPTS, BARCODE_PREFIX
from ..core.exceptions import NotFoundError, PersistenceError
from ..students.repository import StudentRepository

logger = logging.getLogger(__name__)


class BarcodeService:
    """Issue scan tokens: BARCODE_PREFIX + 2-digit year + 6 random digits."""

    def __init__(self, students: StudentRepository, *, rng: Optional[random.Random] = None):
        self._students = students
        self._rng = rng or random.SystemRandom()

    def _candidate(self, today: date) -> str:
        return f"{BARCODE_PREFIX}{today.year % 100:02d}{self._rng.randint(100000, 999999)}"

    def _new_barcode(self, today: date, taken: set[str]) -> str:
        for _ in range(BARCODE_MAX_ATTEMPTS):
            code = self._candidate(today)
            if code not in taken and not self._students.barcode_exists(code):
                taken.add(code)
                return code
        raise PersistenceError("Could not allocate a unique barcode")

    def issue_barcode(self, student_id: int, *, today: Optional[date] = None) -> str:
        """Return the student's barcode, generating one if missing."""

        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        if student.barcode:
            return student.barcode

        code = self._new_barcode(today or date.today(), set())
        if not self._students.set_barcode(student.student_id, code):
            raise PersistenceError("Failed to save barcode")

        logger.info("Issued barcode for student_id=%s", student.student_id)
        return code

    def issue_missing_barcodes(self, *, today: Optional[date] = None) -> int:
        today = today or date.today()
        taken: set[str] = set()
        count = 0
        for student in self._students.list_without_barcode():
            if self._students.set_barcode(student.student_id, self._new_barcode(today, taken)):
                count += 1

        logger.info("Issued %d barcodes", count)
        return count
