from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from ..core.constants import DATE_FORMAT


@dataclass(frozen=True)
class SubjectBreakdown:
    subject: str
    total_sessions: int
    present_sessions: int
    percentage: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ClassActivity:
    """Distinct-student presence of one class on one day."""

    class_id: str
    class_name: str
    total_students: int
    present_count: int
    absent_count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DailyOverview:
    activity_date: date
    classes: list[ClassActivity]
    present: int
    absent: int
    active_rate: float

    def to_dict(self) -> dict:
        return {
            "date": self.activity_date.strftime(DATE_FORMAT),
            "classes": [c.to_dict() for c in self.classes],
            "present": self.present,
            "absent": self.absent,
            "active_rate": self.active_rate,
        }


@dataclass(frozen=True)
class StudentSummary:
    student_id: str
    name: str
    roll_no: str
    total_sessions: int
    present_sessions: int
    percentage: int
    below_threshold: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ReportSummary:
    average: float
    total: int
    present: int
    absent: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ReportRow:
    """Read-model for report tables: an attendance record joined with the directory."""

    student_id: str
    name: str
    roll_no: str
    attendance_date: date
    subject: str
    present: bool

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "roll_no": self.roll_no,
            "date": self.attendance_date.strftime(DATE_FORMAT),
            "subject": self.subject,
            "present": self.present,
        }


@dataclass(frozen=True)
class AttendanceReport:
    rows: list[ReportRow]
    summary: ReportSummary
    start: Optional[date] = None
    end: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "start": self.start.strftime(DATE_FORMAT) if self.start else None,
            "end": self.end.strftime(DATE_FORMAT) if self.end else None,
            "rows": [r.to_dict() for r in self.rows],
            "summary": self.summary.to_dict(),
        }
