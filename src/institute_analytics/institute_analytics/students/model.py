from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: Student.

    Note: `barcode` stays empty until one is issued; `student_code` is the
    human-assigned code printed on enrollment forms.
    """

    student_id: int
    student_code: str
    full_name: str
    barcode: Optional[str] = None
    status: str = "active"
