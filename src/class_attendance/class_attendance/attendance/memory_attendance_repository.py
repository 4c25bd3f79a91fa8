from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from .model import AttendanceRecord
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self):
        self._by_key: dict[tuple[str, date, str], AttendanceRecord] = {}

    def upsert_many(self, records: Sequence[AttendanceRecord]) -> int:
        # Build the new state first so a bad record leaves the ledger untouched.
        staged = dict(self._by_key)
        for r in records:
            staged[r.key] = r
        self._by_key = staged
        return len(records)

    def get(self, student_id: str, attendance_date: date, subject: str) -> Optional[AttendanceRecord]:
        return self._by_key.get((student_id, attendance_date, subject))

    def list_for_students(
        self,
        student_ids: Sequence[str],
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        wanted = set(student_ids)
        items = [
            r for r in self._by_key.values()
            if r.student_id in wanted
            and (start_date is None or r.attendance_date >= start_date)
            and (end_date is None or r.attendance_date <= end_date)
        ]
        items.sort(key=lambda r: (-r.attendance_date.toordinal(), r.student_id, r.subject))
        return items

    def list_for_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        return [r for r in self._by_key.values() if r.attendance_date == attendance_date]

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_key.values())
