from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .base import AttendanceRateCalculator


class HalfUpRateCalculator(AttendanceRateCalculator):
    """Standard rule: 100 * present / total, halves rounded up, 0 for no sessions."""

    def percentage(self, present: int, total: int) -> int:
        if total <= 0:
            return 0
        return (200 * int(present) + int(total)) // (2 * int(total))

    def rate(self, present: int, total: int) -> float:
        if total <= 0:
            return 0.0
        value = Decimal(100 * int(present)) / Decimal(int(total))
        return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
