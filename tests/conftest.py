from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pytest

from src.class_attendance.class_attendance.container import build_memory_container
from src.class_attendance.class_attendance.core.enums import Role
from src.class_attendance.class_attendance.directory.memory_directory_repository import InMemoryDirectoryRepository
from src.class_attendance.class_attendance.directory.model import ClassSection, Member

# 2024-03-04 is a Monday.
MONDAY_0915 = datetime(2024, 3, 4, 9, 15)


@dataclass
class FixedClock:
    current: datetime

    def now(self) -> datetime:
        return self.current

    def set(self, value: datetime) -> None:
        self.current = value


def make_directory() -> InMemoryDirectoryRepository:
    directory = InMemoryDirectoryRepository(
        classes=[ClassSection("cse-a", "CSE A"), ClassSection("cse-b", "CSE B")],
    )
    directory.add_member(Member("cr-a", "A01", "Asha", "cse-a", Role.CR))
    for i in range(2, 11):
        directory.add_member(Member(f"a{i}", f"A{i:02d}", f"Student A{i}", "cse-a"))
    directory.add_member(Member("b1", "B01", "Dev", "cse-b", Role.CR))
    directory.add_member(Member("b2", "B02", "Esha", "cse-b"))
    return directory


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(MONDAY_0915)


@pytest.fixture
def directory() -> InMemoryDirectoryRepository:
    return make_directory()


@pytest.fixture
def container(directory, clock):
    return build_memory_container(directory=directory, clock=clock)
