from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.constants import DATE_FORMAT
from ..core.enums import DenialReason
from ..timetable.model import TimetableSlot


@dataclass(frozen=True)
class AttendanceRecord:
    """Did a student attend ``subject`` on ``attendance_date``.

    (student_id, attendance_date, subject) is the unique key; writing the same
    key again overwrites ``present``.
    """

    student_id: str
    attendance_date: date
    subject: str
    present: bool

    @property
    def key(self) -> tuple[str, date, str]:
        return (self.student_id, self.attendance_date, self.subject)

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "date": self.attendance_date.strftime(DATE_FORMAT),
            "subject": self.subject,
            "present": self.present,
        }


@dataclass(frozen=True)
class Mark:
    """One entry of a submitted attendance batch."""

    student_id: str
    present: bool


@dataclass(frozen=True)
class GateDecision:
    """Result of the attendance gate: authorized with the live slot, or denied with a reason."""

    reason: Optional[DenialReason] = None
    slot: Optional[TimetableSlot] = None

    @property
    def authorized(self) -> bool:
        return self.reason is None

    @classmethod
    def allow(cls, slot: TimetableSlot) -> "GateDecision":
        return cls(slot=slot)

    @classmethod
    def deny(cls, reason: DenialReason, slot: Optional[TimetableSlot] = None) -> "GateDecision":
        return cls(reason=reason, slot=slot)

    def to_dict(self) -> dict:
        return {
            "authorized": self.authorized,
            "reason": self.reason.value if self.reason else None,
            "slot": self.slot.to_dict() if self.slot else None,
        }
