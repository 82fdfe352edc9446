from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Student lookups needed by identity resolution and barcode issuing.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_barcode(self, barcode: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_code(self, student_code: str) -> Optional[Student]:
        raise NotImplementedError

    def barcode_exists(self, barcode: str) -> bool:
        raise NotImplementedError

    def set_barcode(self, student_id: int, barcode: str) -> bool:
        raise NotImplementedError

    def list_without_barcode(self) -> Sequence[Student]:
        raise NotImplementedError
