from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert_many(self, records: Sequence[AttendanceRecord]) -> int:
        """Insert or overwrite every record keyed by (student, date, subject).

        All-or-nothing: either the whole batch is stored or none of it.
        """

        raise NotImplementedError

    def get(self, student_id: str, attendance_date: date, subject: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_students(
        self,
        student_ids: Sequence[str],
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records of the given students, newest date first. Range is inclusive."""

        raise NotImplementedError

    def list_for_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
