from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClassSection, Member
from .repository import DirectoryRepository

_MEMBER_ROLES = (Role.STUDENT.value, Role.CR.value)


def _to_member(r: dict) -> Member:
    return Member(
        student_id=str(r["student_id"]),
        roll_no=str(r["roll_no"]),
        name=str(r["name"]),
        class_id=str(r["class_id"]),
        role=Role(r["role"]),
    )


class MySQLDirectoryRepository(DirectoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def class_exists(self, class_id: str) -> bool:
        return self.get_class(class_id) is not None

    def class_members(self, class_id: str) -> Sequence[str]:
        return [m.student_id for m in self.list_members(class_id)]

    def get_class(self, class_id: str) -> Optional[ClassSection]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id, name FROM classes WHERE class_id=%s", (class_id,))
            r = fetchone(cur)
            if not r:
                return None
            return ClassSection(class_id=str(r["class_id"]), name=str(r["name"]))

    def list_classes(self) -> Sequence[ClassSection]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id, name FROM classes ORDER BY name ASC")
            return [ClassSection(class_id=str(r["class_id"]), name=str(r["name"])) for r in fetchall(cur)]

    def get_member(self, student_id: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id, roll_no, name, class_id, role FROM members WHERE student_id=%s",
                (student_id,),
            )
            r = fetchone(cur)
            return _to_member(r) if r else None

    def list_members(self, class_id: str) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, roll_no, name, class_id, role
                FROM members
                WHERE class_id=%s AND role IN (%s, %s)
                ORDER BY roll_no ASC
                """,
                (class_id, *_MEMBER_ROLES),
            )
            return [_to_member(r) for r in fetchall(cur)]
