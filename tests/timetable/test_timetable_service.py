from __future__ import annotations

import random
from datetime import time
from itertools import combinations

import pytest

from src.class_attendance.class_attendance.core.enums import DayOfWeek, SlotChange
from src.class_attendance.class_attendance.core.exceptions import (
    ConflictError,
    InvalidRangeError,
    NotFoundError,
    ValidationError,
)
from src.class_attendance.class_attendance.directory.memory_directory_repository import InMemoryDirectoryRepository
from src.class_attendance.class_attendance.directory.model import ClassSection
from src.class_attendance.class_attendance.timetable.memory_timetable_repository import InMemoryTimetableRepository
from src.class_attendance.class_attendance.timetable.model import intervals_overlap
from src.class_attendance.class_attendance.timetable.service import TimetableService


def _service():
    directory = InMemoryDirectoryRepository(classes=[ClassSection("cse-a", "CSE A"), ClassSection("cse-b", "CSE B")])
    return TimetableService(InMemoryTimetableRepository(), directory)


def _add(svc, day, start, end, subject="Math", class_id="cse-a"):
    return svc.add_slot(
        class_id,
        day=day,
        subject=subject,
        instructor="Dr. Rao",
        start_time=start,
        end_time=end,
    )


def test_overlapping_slot_is_rejected_but_touching_slot_is_accepted():
    svc = _service()
    math = _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0), "Math")

    with pytest.raises(ConflictError) as exc:
        _add(svc, DayOfWeek.MONDAY, time(9, 30), time(10, 30), "Physics")
    assert exc.value.slot.slot_id == math.slot_id

    physics = _add(svc, DayOfWeek.MONDAY, time(10, 0), time(11, 0), "Physics")
    assert physics.subject == "Physics"
    assert len(svc.slots_for("cse-a")) == 2


def test_same_time_on_other_day_or_other_class_does_not_conflict():
    svc = _service()
    _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0))

    _add(svc, DayOfWeek.TUESDAY, time(9, 0), time(10, 0))
    _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0), class_id="cse-b")

    assert len(svc.slots_for("cse-a")) == 2
    assert len(svc.slots_for("cse-b")) == 1


@pytest.mark.parametrize("start,end", [(time(10, 0), time(10, 0)), (time(11, 0), time(10, 0))])
def test_start_must_be_before_end(start, end):
    svc = _service()
    with pytest.raises(InvalidRangeError):
        _add(svc, DayOfWeek.MONDAY, start, end)
    assert svc.slots_for("cse-a") == []


def test_blank_subject_and_unknown_class_are_rejected():
    svc = _service()
    with pytest.raises(ValidationError):
        _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0), subject="  ")
    with pytest.raises(NotFoundError):
        _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0), class_id="nope")


def test_sunday_is_not_a_teaching_day():
    svc = _service()
    with pytest.raises(ValidationError):
        _add(svc, "Sunday", time(9, 0), time(10, 0))


def test_update_ignores_the_slot_being_edited():
    svc = _service()
    slot = _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0))

    updated = svc.update_slot(slot.slot_id, start_time=time(9, 30), end_time=time(10, 30))

    assert updated.start_time == time(9, 30)
    assert svc.get_slot(slot.slot_id).end_time == time(10, 30)


def test_update_into_another_slot_conflicts_and_keeps_old_state():
    svc = _service()
    _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0), "Math")
    physics = _add(svc, DayOfWeek.MONDAY, time(10, 0), time(11, 0), "Physics")

    with pytest.raises(ConflictError):
        svc.update_slot(physics.slot_id, start_time=time(9, 45))

    assert svc.get_slot(physics.slot_id).start_time == time(10, 0)


def test_update_can_move_slot_to_another_day():
    svc = _service()
    _add(svc, DayOfWeek.TUESDAY, time(9, 0), time(10, 0), "Chemistry")
    slot = _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0), "Math")

    with pytest.raises(ConflictError):
        svc.update_slot(slot.slot_id, day=DayOfWeek.TUESDAY)

    moved = svc.update_slot(slot.slot_id, day=DayOfWeek.WEDNESDAY, subject="Maths")
    assert moved.day == DayOfWeek.WEDNESDAY
    assert moved.subject == "Maths"


def test_update_with_inverted_range_is_rejected():
    svc = _service()
    slot = _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0))
    with pytest.raises(InvalidRangeError):
        svc.update_slot(slot.slot_id, end_time=time(8, 0))


def test_update_and_delete_unknown_slot():
    svc = _service()
    with pytest.raises(NotFoundError):
        svc.update_slot(42, subject="Math")
    with pytest.raises(NotFoundError):
        svc.delete_slot(42)


def test_delete_frees_the_interval():
    svc = _service()
    slot = _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0))
    svc.delete_slot(slot.slot_id)

    _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0), "Physics")
    assert [s.subject for s in svc.slots_for("cse-a")] == ["Physics"]


def test_slots_are_listed_by_day_then_start():
    svc = _service()
    _add(svc, DayOfWeek.WEDNESDAY, time(8, 0), time(9, 0), "C")
    _add(svc, DayOfWeek.MONDAY, time(11, 0), time(12, 0), "B")
    _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0), "A")
    _add(svc, DayOfWeek.SATURDAY, time(7, 0), time(8, 0), "D")

    assert [s.subject for s in svc.slots_for("cse-a")] == ["A", "B", "C", "D"]


def test_mutations_emit_events():
    svc = _service()
    events = []
    svc.subscribe(events.append)

    slot = _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0))
    svc.update_slot(slot.slot_id, subject="Maths")
    svc.delete_slot(slot.slot_id)

    assert [e.kind for e in events] == [SlotChange.ADDED, SlotChange.UPDATED, SlotChange.REMOVED]
    assert events[1].previous.subject == "Math"
    assert events[1].slot.subject == "Maths"
    assert events[2].slot.slot_id == slot.slot_id


def test_rejected_mutation_emits_nothing():
    svc = _service()
    _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0))
    events = []
    svc.subscribe(events.append)

    with pytest.raises(ConflictError):
        _add(svc, DayOfWeek.MONDAY, time(9, 30), time(10, 30))

    assert events == []


def test_failing_listener_does_not_undo_the_mutation():
    svc = _service()

    def boom(event):
        raise RuntimeError("notice store down")

    svc.subscribe(boom)
    slot = _add(svc, DayOfWeek.MONDAY, time(9, 0), time(10, 0))

    assert svc.get_slot(slot.slot_id) == slot


def test_no_two_slots_overlap_after_random_adds_and_updates():
    svc = _service()
    rng = random.Random(7)
    days = list(DayOfWeek)[:2]

    for _ in range(200):
        start_h = rng.randint(7, 16)
        start = time(start_h, rng.choice([0, 15, 30, 45]))
        end = time(start_h + rng.randint(1, 2), rng.choice([0, 30]))
        existing = svc.slots_for("cse-a")
        try:
            if existing and rng.random() < 0.4:
                target = rng.choice(existing)
                svc.update_slot(target.slot_id, day=rng.choice(days), start_time=start, end_time=end)
            else:
                _add(svc, rng.choice(days), start, end)
        except (ConflictError, InvalidRangeError):
            pass

    slots = svc.slots_for("cse-a")
    assert slots
    for a, b in combinations(slots, 2):
        if a.day == b.day:
            assert not intervals_overlap(a.start_time, a.end_time, b.start_time, b.end_time)
