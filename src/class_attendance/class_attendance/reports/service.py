from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceLedger
from ..core.constants import LOW_ATTENDANCE_THRESHOLD
from ..core.exceptions import NotFoundError
from ..directory.repository import DirectoryRepository
from .calculator.base import AttendanceRateCalculator
from .calculator.standard_calculator import HalfUpRateCalculator
from .model import (
    AttendanceReport,
    ClassActivity,
    DailyOverview,
    ReportRow,
    ReportSummary,
    StudentSummary,
    SubjectBreakdown,
)

_default_calculator = HalfUpRateCalculator()


def percentage(records: Iterable[AttendanceRecord], *, calculator: Optional[AttendanceRateCalculator] = None) -> int:
    """Share of present records, 0..100; 0 for no records."""
    items = list(records)
    present = sum(1 for r in items if r.present)
    return (calculator or _default_calculator).percentage(present, len(items))


class AggregationService:
    """Attendance statistics, always recomputed from the ledger.

    Nothing here is cached or written back; every call reads the current
    ledger contents.
    """

    def __init__(
        self,
        ledger: AttendanceLedger,
        directory: DirectoryRepository,
        *,
        calculator: Optional[AttendanceRateCalculator] = None,
        low_threshold: int = LOW_ATTENDANCE_THRESHOLD,
    ):
        self._ledger = ledger
        self._directory = directory
        self._calculator = calculator or _default_calculator
        self._low_threshold = int(low_threshold)

    @property
    def low_threshold(self) -> int:
        return self._low_threshold

    def percentage(self, records: Iterable[AttendanceRecord]) -> int:
        return percentage(records, calculator=self._calculator)

    def student_percentage(self, student_id: str, *, start: Optional[date] = None, end: Optional[date] = None) -> int:
        return self.percentage(self._ledger.records_for_student(student_id, start=start, end=end))

    def per_subject_breakdown(
        self,
        class_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[SubjectBreakdown]:
        groups: dict[str, list[AttendanceRecord]] = defaultdict(list)
        for r in self._ledger.records_for_class(class_id, start=start, end=end):
            groups[r.subject].append(r)

        out: list[SubjectBreakdown] = []
        for subject in sorted(groups):
            items = groups[subject]
            present = sum(1 for r in items if r.present)
            out.append(
                SubjectBreakdown(
                    subject=subject,
                    total_sessions=len(items),
                    present_sessions=present,
                    percentage=self._calculator.percentage(present, len(items)),
                )
            )
        return out

    def daily_activity(self, on_date: date) -> list[ClassActivity]:
        """Per-class present/absent counts for one day across all classes.

        A student is present if they have at least one present record that day,
        however many subjects they attended.
        """
        present_students = {r.student_id for r in self._ledger.records_on(on_date) if r.present}

        out: list[ClassActivity] = []
        for section in self._directory.list_classes():
            members = set(self._directory.class_members(section.class_id))
            present = len(members & present_students)
            out.append(
                ClassActivity(
                    class_id=section.class_id,
                    class_name=section.name,
                    total_students=len(members),
                    present_count=present,
                    absent_count=len(members) - present,
                )
            )
        return out

    def daily_overview(self, on_date: date) -> DailyOverview:
        classes = self.daily_activity(on_date)
        present = sum(c.present_count for c in classes)
        absent = sum(c.absent_count for c in classes)
        return DailyOverview(
            activity_date=on_date,
            classes=classes,
            present=present,
            absent=absent,
            active_rate=self._calculator.rate(present, present + absent),
        )

    def student_summaries(
        self,
        class_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[StudentSummary]:
        by_student: dict[str, list[AttendanceRecord]] = defaultdict(list)
        for r in self._ledger.records_for_class(class_id, start=start, end=end):
            by_student[r.student_id].append(r)

        out: list[StudentSummary] = []
        for m in self._directory.list_members(class_id):
            items = by_student.get(m.student_id, [])
            present = sum(1 for r in items if r.present)
            pct = self._calculator.percentage(present, len(items))
            out.append(
                StudentSummary(
                    student_id=m.student_id,
                    name=m.name,
                    roll_no=m.roll_no,
                    total_sessions=len(items),
                    present_sessions=present,
                    percentage=pct,
                    below_threshold=bool(items) and pct < self._low_threshold,
                )
            )
        return out

    def class_report(
        self,
        class_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> AttendanceReport:
        members = {m.student_id: m for m in self._directory.list_members(class_id)}
        records = self._ledger.records_for_class(class_id, start=start, end=end)

        rows = []
        for r in records:
            m = members.get(r.student_id)
            rows.append(
                ReportRow(
                    student_id=r.student_id,
                    name=m.name if m else "Unknown",
                    roll_no=m.roll_no if m else "N/A",
                    attendance_date=r.attendance_date,
                    subject=r.subject,
                    present=r.present,
                )
            )
        return AttendanceReport(rows=rows, summary=self._summarize(records), start=start, end=end)

    def student_report(
        self,
        student_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> AttendanceReport:
        member = self._directory.get_member(student_id)
        if not member:
            raise NotFoundError(f"Student {student_id!r} does not exist")

        records = self._ledger.records_for_student(student_id, start=start, end=end)
        rows = [
            ReportRow(
                student_id=r.student_id,
                name=member.name,
                roll_no=member.roll_no,
                attendance_date=r.attendance_date,
                subject=r.subject,
                present=r.present,
            )
            for r in records
        ]
        return AttendanceReport(rows=rows, summary=self._summarize(records), start=start, end=end)

    def _summarize(self, records: Sequence[AttendanceRecord]) -> ReportSummary:
        total = len(records)
        present = sum(1 for r in records if r.present)
        return ReportSummary(
            average=self._calculator.rate(present, total),
            total=total,
            present=present,
            absent=total - present,
        )
