from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class GradeBand:
    label: str
    min_percentage: float


class GradeScale(ABC):
    """Grade scale interface (Strategy Pattern for banding percentages)."""

    @abstractmethod
    def bands(self) -> Sequence[GradeBand]:
        """Bands ordered from the highest floor down; the last floor is 0."""

        raise NotImplementedError

    def band_for(self, percentage: float) -> str:
        for band in self.bands():
            if percentage >= band.min_percentage:
                return band.label
        return self.bands()[-1].label
