from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Union

from ..common.locks import KeyedLocks
from ..common.logging import get_logger
from ..common.validators import require_date_range, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..directory.repository import DirectoryRepository
from .gate import AttendanceGate
from .model import AttendanceRecord, Mark
from .repository import AttendanceRepository

log = get_logger(__name__)

MarkLike = Union[Mark, tuple[str, bool]]


def _as_mark(item: MarkLike) -> Mark:
    if isinstance(item, Mark):
        return item
    student_id, present = item
    return Mark(student_id=str(student_id), present=bool(present))


class AttendanceLedger:
    """System of record for attendance; every write passes through the gate.

    ``commit`` re-checks the gate while holding the class lock that timetable
    edits also take, so the live session cannot change between the check and
    the write.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: DirectoryRepository,
        gate: AttendanceGate,
        *,
        locks: KeyedLocks | None = None,
    ):
        self._attendance = attendance
        self._directory = directory
        self._gate = gate
        self._locks = locks or KeyedLocks()

    def commit(
        self,
        class_id: str,
        marks: Iterable[MarkLike],
        on_date: date,
        subject: str,
        *,
        now: datetime | None = None,
    ) -> int:
        subject = require_non_empty(subject, "Subject")
        batch = [_as_mark(m) for m in marks]
        if not batch:
            raise ValidationError("Attendance batch is empty")

        with self._locks.hold(class_id):
            self._gate.require_mark(class_id, subject, on_date, now=now)

            members = set(self._directory.class_members(class_id))
            unknown = sorted({m.student_id for m in batch if m.student_id not in members})
            if unknown:
                raise ValidationError(f"Not members of class {class_id}: {', '.join(unknown)}")

            # Later entries for the same student win, same as a second commit would.
            latest: dict[str, bool] = {}
            for m in batch:
                latest[m.student_id] = m.present

            records = [
                AttendanceRecord(student_id=sid, attendance_date=on_date, subject=subject, present=present)
                for sid, present in latest.items()
            ]
            written = self._attendance.upsert_many(records)

        log.info(
            "attendance_committed",
            class_id=class_id,
            subject=subject,
            date=str(on_date),
            records=written,
            present=sum(1 for r in records if r.present),
        )
        return written

    def records_for_student(
        self,
        student_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        require_date_range(start, end)
        return self._attendance.list_for_students([student_id], start_date=start, end_date=end)

    def records_for_class(
        self,
        class_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        require_date_range(start, end)
        if not self._directory.class_exists(class_id):
            raise NotFoundError(f"Class {class_id!r} does not exist")
        members = self._directory.class_members(class_id)
        return self._attendance.list_for_students(members, start_date=start, end_date=end)

    def records_on(self, on_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_date(on_date)
