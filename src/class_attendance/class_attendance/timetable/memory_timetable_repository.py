from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..core.enums import DayOfWeek
from .model import TimetableSlot
from .repository import TimetableRepository


class InMemoryTimetableRepository(TimetableRepository):
    def __init__(self):
        self._by_id: dict[int, TimetableSlot] = {}
        self._id = 0

    def get_by_id(self, slot_id: int) -> Optional[TimetableSlot]:
        return self._by_id.get(int(slot_id))

    def list_for_class(self, class_id: str, *, day: Optional[DayOfWeek] = None) -> Sequence[TimetableSlot]:
        return [
            s for s in self._by_id.values()
            if s.class_id == class_id and (day is None or s.day == day)
        ]

    def insert(
        self,
        *,
        class_id: str,
        day: DayOfWeek,
        subject: str,
        instructor: str,
        start_time: time,
        end_time: time,
    ) -> int:
        self._id += 1
        self._by_id[self._id] = TimetableSlot(
            slot_id=self._id,
            class_id=class_id,
            day=day,
            subject=subject,
            instructor=instructor,
            start_time=start_time,
            end_time=end_time,
        )
        return self._id

    def update(self, slot: TimetableSlot) -> bool:
        if slot.slot_id not in self._by_id:
            return False
        self._by_id[slot.slot_id] = slot
        return True

    def delete(self, slot_id: int) -> bool:
        return self._by_id.pop(int(slot_id), None) is not None
