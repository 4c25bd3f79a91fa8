from __future__ import annotations

from abc import ABC, abstractmethod


class AttendanceRateCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance rates)."""

    @abstractmethod
    def percentage(self, present: int, total: int) -> int:
        """Whole-number percentage 0..100; 0 when total is 0."""
        raise NotImplementedError

    @abstractmethod
    def rate(self, present: int, total: int) -> float:
        """Percentage with one decimal place, for report summaries."""
        raise NotImplementedError
