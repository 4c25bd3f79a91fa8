from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from ..core.enums import DayOfWeek
from .model import TimetableSlot


class TimetableRepository(Protocol):
    def get_by_id(self, slot_id: int) -> Optional[TimetableSlot]:
        raise NotImplementedError

    def list_for_class(self, class_id: str, *, day: Optional[DayOfWeek] = None) -> Sequence[TimetableSlot]:
        """Slots of a class, optionally one day only. Order is not guaranteed."""

        raise NotImplementedError

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
        """Store a new slot. Returns slot_id."""

        raise NotImplementedError

    def update(self, slot: TimetableSlot) -> bool:
        raise NotImplementedError

    def delete(self, slot_id: int) -> bool:
        raise NotImplementedError
