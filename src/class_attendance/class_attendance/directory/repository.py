from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassSection, Member


class DirectoryRepository(Protocol):
    """Read side of the class directory (classes, students, roll numbers).

    The engine only reads from it; CRUD of classes and students lives elsewhere.
    """

    def class_exists(self, class_id: str) -> bool:
        raise NotImplementedError

    def class_members(self, class_id: str) -> Sequence[str]:
        """Student ids of the class (students and its CR)."""

        raise NotImplementedError

    def get_class(self, class_id: str) -> Optional[ClassSection]:
        raise NotImplementedError

    def list_classes(self) -> Sequence[ClassSection]:
        raise NotImplementedError

    def get_member(self, student_id: str) -> Optional[Member]:
        raise NotImplementedError

    def list_members(self, class_id: str) -> Sequence[Member]:
        raise NotImplementedError
