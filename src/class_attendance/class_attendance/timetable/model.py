from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import fmt_time
from ..core.enums import DayOfWeek, SlotChange


def intervals_overlap(s1: time, e1: time, s2: time, e2: time) -> bool:
    """Half-open [s1, e1) and [s2, e2) overlap; touching endpoints do not."""
    return s1 < e2 and s2 < e1


@dataclass(frozen=True)
class TimetableSlot:
    """One weekly-recurring teaching session of a class."""

    slot_id: int
    class_id: str
    day: DayOfWeek
    subject: str
    instructor: str
    start_time: time
    end_time: time

    @property
    def sort_key(self) -> tuple[int, time]:
        return (self.day.order, self.start_time)

    @property
    def time_range(self) -> str:
        return f"{fmt_time(self.start_time)}-{fmt_time(self.end_time)}"

    def overlaps(self, other: "TimetableSlot") -> bool:
        return self.day == other.day and intervals_overlap(
            self.start_time, self.end_time, other.start_time, other.end_time
        )

    def describe(self) -> str:
        who = f" ({self.instructor})" if self.instructor else ""
        return f"{self.subject}{who} on {self.day.value} {self.time_range}"

    def to_dict(self) -> dict:
        return {
            "slot_id": self.slot_id,
            "class_id": self.class_id,
            "day": self.day.value,
            "subject": self.subject,
            "instructor": self.instructor,
            "start_time": fmt_time(self.start_time),
            "end_time": fmt_time(self.end_time),
        }


@dataclass(frozen=True)
class SlotEvent:
    """A committed timetable mutation.

    For REMOVED, ``slot`` is the state that was deleted; for UPDATED,
    ``previous`` holds the state before the edit.
    """

    kind: SlotChange
    slot: TimetableSlot
    previous: Optional[TimetableSlot] = None

    @property
    def class_id(self) -> str:
        return self.slot.class_id
