from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, range_clauses
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        student_id=str(r["student_id"]),
        attendance_date=r["attendance_date"],
        subject=str(r["subject"]),
        present=bool(r["present"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_many(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0
        # One db_cursor block = one transaction: the batch commits or rolls back as a whole.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance_records(student_id, attendance_date, subject, present)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE present=VALUES(present)
                """,
                [(r.student_id, r.attendance_date, r.subject, int(r.present)) for r in records],
            )
        return len(records)

    def get(self, student_id: str, attendance_date: date, subject: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, attendance_date, subject, present
                FROM attendance_records
                WHERE student_id=%s AND attendance_date=%s AND subject=%s
                """,
                (student_id, attendance_date, subject),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_students(
        self,
        student_ids: Sequence[str],
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        ids = list(dict.fromkeys(student_ids))
        if not ids:
            return []

        placeholders = ",".join(["%s"] * len(ids))
        clauses = [f"student_id IN ({placeholders})"]
        params: list[object] = list(ids)
        extra, extra_params = range_clauses("attendance_date", start_date, end_date)
        clauses.extend(extra)
        params.extend(extra_params)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT student_id, attendance_date, subject, present
                FROM attendance_records
                WHERE {where}
                ORDER BY attendance_date DESC, student_id ASC, subject ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, attendance_date, subject, present
                FROM attendance_records
                WHERE attendance_date=%s
                """,
                (attendance_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]
