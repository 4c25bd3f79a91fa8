from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Protocol

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.enums import DayOfWeek
from ..core.exceptions import ValidationError


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Local wall-clock time."""

    def now(self) -> datetime:
        return now_local()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r} (YYYY-MM-DD)")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if not value or not value.strip():
        return None
    return parse_iso_date(value)


def parse_hhmm(value: str) -> time:
    """Parse HH:MM into a minute-precision time."""
    try:
        return datetime.strptime((value or "").strip(), TIME_FORMAT).time()
    except ValueError:
        raise ValidationError(f"Invalid time {value!r} (HH:MM)")


def parse_day(value: str) -> DayOfWeek:
    v = (value or "").strip().capitalize()
    try:
        return DayOfWeek(v)
    except ValueError:
        raise ValidationError(f"Invalid day {value!r} (Monday-Saturday)")


def day_of_week(moment: datetime) -> Optional[DayOfWeek]:
    """Teaching day for a moment, None on Sunday."""
    return DayOfWeek.from_weekday(moment.weekday())


def fmt_time(t: time) -> str:
    return t.strftime(TIME_FORMAT)
