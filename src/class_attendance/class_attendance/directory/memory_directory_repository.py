from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Role
from .model import ClassSection, Member
from .repository import DirectoryRepository


class InMemoryDirectoryRepository(DirectoryRepository):
    """Directory kept in process memory (development and tests)."""

    def __init__(self, classes: Iterable[ClassSection] = (), members: Iterable[Member] = ()):
        self._classes: dict[str, ClassSection] = {c.class_id: c for c in classes}
        self._members: dict[str, Member] = {m.student_id: m for m in members}

    def add_class(self, section: ClassSection) -> None:
        self._classes[section.class_id] = section

    def add_member(self, member: Member) -> None:
        self._members[member.student_id] = member

    def class_exists(self, class_id: str) -> bool:
        return class_id in self._classes

    def class_members(self, class_id: str) -> Sequence[str]:
        return [m.student_id for m in self.list_members(class_id)]

    def get_class(self, class_id: str) -> Optional[ClassSection]:
        return self._classes.get(class_id)

    def list_classes(self) -> Sequence[ClassSection]:
        return sorted(self._classes.values(), key=lambda c: c.name)

    def get_member(self, student_id: str) -> Optional[Member]:
        return self._members.get(student_id)

    def list_members(self, class_id: str) -> Sequence[Member]:
        items = [
            m for m in self._members.values()
            if m.class_id == class_id and m.role in (Role.STUDENT, Role.CR)
        ]
        items.sort(key=lambda m: m.roll_no)
        return items
