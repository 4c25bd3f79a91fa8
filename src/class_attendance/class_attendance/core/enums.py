from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Directory roles used for permission checks."""

    ADMIN = "admin"
    CR = "cr"
    STUDENT = "student"


class DayOfWeek(str, Enum):
    """Teaching days. Sunday deliberately has no member."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @property
    def order(self) -> int:
        return _DAY_ORDER.index(self)

    @classmethod
    def from_weekday(cls, weekday: int) -> Optional["DayOfWeek"]:
        """Map ``date.weekday()`` (Monday=0 .. Sunday=6) to a teaching day."""
        if 0 <= weekday < len(_DAY_ORDER):
            return _DAY_ORDER[weekday]
        return None


_DAY_ORDER = list(DayOfWeek)


class SlotChange(str, Enum):
    """Kinds of timetable mutation announced to the notification pipeline."""

    ADDED = "ADDED"
    UPDATED = "UPDATED"
    REMOVED = "REMOVED"


class DenialReason(str, Enum):
    NOT_TODAY = "not-today"
    NO_LIVE_SESSION = "no-live-session"
    SUBJECT_MISMATCH = "subject-mismatch"


class AlertState(str, Enum):
    """Per-viewer state of the timetable change alert for a class."""

    IDLE = "IDLE"
    NOTIFIED = "NOTIFIED"
    DISMISSED = "DISMISSED"
