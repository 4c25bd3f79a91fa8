from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..core.enums import DayOfWeek
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import TimetableSlot
from .repository import TimetableRepository


def _to_slot(r: dict) -> TimetableSlot:
    return TimetableSlot(
        slot_id=int(r["slot_id"]),
        class_id=str(r["class_id"]),
        day=DayOfWeek(r["day"]),
        subject=str(r["subject"]),
        instructor=str(r.get("instructor") or ""),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
    )


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, slot_id: int) -> Optional[TimetableSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT slot_id, class_id, day, subject, instructor, start_time, end_time
                FROM timetable_slots
                WHERE slot_id=%s
                """,
                (int(slot_id),),
            )
            r = fetchone(cur)
            return _to_slot(r) if r else None

    def list_for_class(self, class_id: str, *, day: Optional[DayOfWeek] = None) -> Sequence[TimetableSlot]:
        clauses = ["class_id=%s"]
        params: list[object] = [class_id]
        if day is not None:
            clauses.append("day=%s")
            params.append(day.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT slot_id, class_id, day, subject, instructor, start_time, end_time
                FROM timetable_slots
                WHERE {where}
                ORDER BY start_time ASC
                """,
                tuple(params),
            )
            return [_to_slot(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timetable_slots(class_id, day, subject, instructor, start_time, end_time)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (class_id, day.value, subject, instructor, start_time, end_time),
            )
            return int(cur.lastrowid)

    def update(self, slot: TimetableSlot) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE timetable_slots
                SET day=%s, subject=%s, instructor=%s, start_time=%s, end_time=%s
                WHERE slot_id=%s
                """,
                (slot.day.value, slot.subject, slot.instructor, slot.start_time, slot.end_time, int(slot.slot_id)),
            )
            # MySQL reports 0 affected rows when nothing changed; the slot still exists.
            return cur.rowcount > 0 or self._exists(cur, slot.slot_id)

    def delete(self, slot_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timetable_slots WHERE slot_id=%s", (int(slot_id),))
            return cur.rowcount > 0

    @staticmethod
    def _exists(cur, slot_id: int) -> bool:
        cur.execute("SELECT 1 AS found FROM timetable_slots WHERE slot_id=%s", (int(slot_id),))
        return fetchone(cur) is not None
