from __future__ import annotations

from dataclasses import replace
from datetime import time
from typing import Callable, Optional

from ..common.locks import KeyedLocks
from ..common.logging import get_logger
from ..common.validators import require_non_empty, require_time_range
from ..core.enums import DayOfWeek, SlotChange
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..directory.repository import DirectoryRepository
from .model import SlotEvent, TimetableSlot, intervals_overlap
from .repository import TimetableRepository

log = get_logger(__name__)

SlotListener = Callable[[SlotEvent], None]


class TimetableService:
    """Weekly timetable of each class; keeps same-day slots from overlapping."""

    def __init__(
        self,
        slots: TimetableRepository,
        directory: DirectoryRepository,
        *,
        locks: KeyedLocks | None = None,
    ):
        self._slots = slots
        self._directory = directory
        self._locks = locks or KeyedLocks()
        self._listeners: list[SlotListener] = []

    def subscribe(self, listener: SlotListener) -> None:
        self._listeners.append(listener)

    def get_slot(self, slot_id: int) -> TimetableSlot:
        slot = self._slots.get_by_id(int(slot_id))
        if not slot:
            raise NotFoundError(f"Timetable slot {slot_id} does not exist")
        return slot

    def slots_for(self, class_id: str) -> list[TimetableSlot]:
        """All slots of a class ordered by (day, start) for display."""
        return sorted(self._slots.list_for_class(class_id), key=lambda s: s.sort_key)

    def add_slot(
        self,
        class_id: str,
        *,
        day: DayOfWeek,
        subject: str,
        instructor: str,
        start_time: time,
        end_time: time,
    ) -> TimetableSlot:
        day = self._require_day(day)
        subject = require_non_empty(subject, "Subject")
        instructor = (instructor or "").strip()
        require_time_range(start_time, end_time)
        if not self._directory.class_exists(class_id):
            raise NotFoundError(f"Class {class_id!r} does not exist")

        with self._locks.hold(class_id):
            self._check_conflict(class_id, day, start_time, end_time)
            slot_id = self._slots.insert(
                class_id=class_id,
                day=day,
                subject=subject,
                instructor=instructor,
                start_time=start_time,
                end_time=end_time,
            )
            slot = TimetableSlot(
                slot_id=slot_id,
                class_id=class_id,
                day=day,
                subject=subject,
                instructor=instructor,
                start_time=start_time,
                end_time=end_time,
            )

        log.info("slot_added", class_id=class_id, slot_id=slot_id, day=day.value, subject=subject, range=slot.time_range)
        self._emit(SlotEvent(kind=SlotChange.ADDED, slot=slot))
        return slot

    def update_slot(
        self,
        slot_id: int,
        *,
        day: Optional[DayOfWeek] = None,
        subject: Optional[str] = None,
        instructor: Optional[str] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
    ) -> TimetableSlot:
        current = self.get_slot(slot_id)

        with self._locks.hold(current.class_id):
            # Re-read under the lock; the slot may have been edited or removed meanwhile.
            current = self.get_slot(slot_id)
            updated = replace(
                current,
                day=self._require_day(day) if day is not None else current.day,
                subject=require_non_empty(subject, "Subject") if subject is not None else current.subject,
                instructor=instructor.strip() if instructor is not None else current.instructor,
                start_time=start_time if start_time is not None else current.start_time,
                end_time=end_time if end_time is not None else current.end_time,
            )
            require_time_range(updated.start_time, updated.end_time)
            self._check_conflict(
                updated.class_id,
                updated.day,
                updated.start_time,
                updated.end_time,
                exclude_id=updated.slot_id,
            )
            if not self._slots.update(updated):
                raise NotFoundError(f"Timetable slot {slot_id} does not exist")

        log.info("slot_updated", class_id=updated.class_id, slot_id=updated.slot_id, day=updated.day.value, range=updated.time_range)
        self._emit(SlotEvent(kind=SlotChange.UPDATED, slot=updated, previous=current))
        return updated

    def delete_slot(self, slot_id: int) -> None:
        current = self.get_slot(slot_id)

        with self._locks.hold(current.class_id):
            if not self._slots.delete(current.slot_id):
                raise NotFoundError(f"Timetable slot {slot_id} does not exist")

        log.info("slot_removed", class_id=current.class_id, slot_id=current.slot_id)
        self._emit(SlotEvent(kind=SlotChange.REMOVED, slot=current))

    def find_conflict(
        self,
        class_id: str,
        day: DayOfWeek,
        start_time: time,
        end_time: time,
        *,
        exclude_id: Optional[int] = None,
    ) -> Optional[TimetableSlot]:
        """First same-class, same-day slot whose interval overlaps [start, end)."""
        for other in sorted(self._slots.list_for_class(class_id, day=day), key=lambda s: s.start_time):
            if exclude_id is not None and other.slot_id == exclude_id:
                continue
            if other.day != day:
                continue
            if intervals_overlap(start_time, end_time, other.start_time, other.end_time):
                return other
        return None

    def _check_conflict(
        self,
        class_id: str,
        day: DayOfWeek,
        start_time: time,
        end_time: time,
        *,
        exclude_id: Optional[int] = None,
    ) -> None:
        other = self.find_conflict(class_id, day, start_time, end_time, exclude_id=exclude_id)
        if other:
            log.info("slot_conflict", class_id=class_id, day=day.value, conflicting_slot=other.slot_id)
            raise ConflictError(f"Overlaps with {other.describe()}", slot=other)

    @staticmethod
    def _require_day(day) -> DayOfWeek:
        if isinstance(day, DayOfWeek):
            return day
        try:
            return DayOfWeek(day)
        except ValueError:
            raise ValidationError(f"Invalid day {day!r} (Monday-Saturday)")

    def _emit(self, event: SlotEvent) -> None:
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                # The mutation is already committed; a failing listener must not undo it.
                log.exception("slot_listener_failed", kind=event.kind.value, slot_id=event.slot.slot_id)
