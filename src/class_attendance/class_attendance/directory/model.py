from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class ClassSection:
    """A cohort of students, referenced by id everywhere else."""

    class_id: str
    name: str


@dataclass(frozen=True)
class Member:
    """A class member as the directory knows it.

    Note: the class representative (Role.CR) is also a student of the class.
    """

    student_id: str
    roll_no: str
    name: str
    class_id: str
    role: Role = Role.STUDENT
