from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import Clock, SystemClock, day_of_week
from .model import TimetableSlot
from .repository import TimetableRepository


def live_slot(slots: Iterable[TimetableSlot], now: datetime) -> Optional[TimetableSlot]:
    """The slot in session at ``now``, if any.

    A slot is live while ``start <= now <= end``; both bounds are inclusive, so
    at a shared boundary two slots match and the earlier-starting one wins.
    Sunday never has a live slot.
    """
    today = day_of_week(now)
    if today is None:
        return None

    moment = now.time()
    candidates = [s for s in slots if s.day == today and s.start_time <= moment <= s.end_time]
    if not candidates:
        return None
    return min(candidates, key=lambda s: (s.start_time, s.slot_id))


@dataclass(frozen=True)
class ScheduleEntry:
    slot: TimetableSlot
    live: bool

    def to_dict(self) -> dict:
        return {**self.slot.to_dict(), "live": self.live}


class SessionEvaluator:
    """Answers "what is in session now" for a class.

    Nothing is cached: every call reads the timetable and the clock again, so
    callers can simply poll it.
    """

    def __init__(self, slots: TimetableRepository, *, clock: Clock | None = None):
        self._slots = slots
        self._clock = clock or SystemClock()

    def now(self) -> datetime:
        return self._clock.now()

    def live_slot(self, class_id: str, now: datetime | None = None) -> Optional[TimetableSlot]:
        now = now or self._clock.now()
        today = day_of_week(now)
        if today is None:
            return None
        return live_slot(self._slots.list_for_class(class_id, day=today), now)

    def today_schedule(self, class_id: str, now: datetime | None = None) -> list[ScheduleEntry]:
        now = now or self._clock.now()
        today = day_of_week(now)
        if today is None:
            return []

        slots = sorted(self._slots.list_for_class(class_id, day=today), key=lambda s: s.start_time)
        current = live_slot(slots, now)
        return [ScheduleEntry(slot=s, live=current is not None and s.slot_id == current.slot_id) for s in slots]
