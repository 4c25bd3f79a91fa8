from __future__ import annotations

from datetime import date, time
from typing import Optional

from ..core.exceptions import InvalidRangeError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_time_range(start: time, end: time) -> None:
    if start >= end:
        raise InvalidRangeError(f"Start time {start:%H:%M} must be before end time {end:%H:%M}")


def require_date_range(start: Optional[date], end: Optional[date]) -> None:
    if start and end and start > end:
        raise ValidationError("Start date must not be after end date")
