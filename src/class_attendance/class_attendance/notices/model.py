from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import TIMETABLE_NOTICE_PREFIX
from ..core.enums import SlotChange


def is_machine_title(title: str) -> bool:
    return (title or "").startswith(TIMETABLE_NOTICE_PREFIX)


def machine_title(kind: SlotChange) -> str:
    return f"{TIMETABLE_NOTICE_PREFIX}{kind.value}"


@dataclass(frozen=True)
class Notice:
    """An announcement posted to a class. Never edited, only superseded."""

    notice_id: int
    class_id: str
    title: str
    content: str
    posted_at: datetime

    @property
    def is_machine(self) -> bool:
        return is_machine_title(self.title)

    @property
    def action(self) -> Optional[SlotChange]:
        """ADDED/UPDATED/REMOVED for timetable notices, None for human ones."""
        if not self.is_machine:
            return None
        try:
            return SlotChange(self.title[len(TIMETABLE_NOTICE_PREFIX):])
        except ValueError:
            return None

    def to_dict(self) -> dict:
        return {
            "notice_id": self.notice_id,
            "class_id": self.class_id,
            "title": self.title,
            "content": self.content,
            "posted_at": self.posted_at.isoformat(),
        }


@dataclass(frozen=True)
class TimetableAlert:
    notice_id: int
    class_id: str
    action: Optional[SlotChange]
    content: str
    posted_at: datetime

    def to_dict(self) -> dict:
        return {
            "notice_id": self.notice_id,
            "class_id": self.class_id,
            "action": self.action.value if self.action else None,
            "content": self.content,
            "posted_at": self.posted_at.isoformat(),
        }


@dataclass(frozen=True)
class AttendanceAlert:
    """Transient low-attendance warning; recomputed on every poll, never stored."""

    student_id: str
    percentage: int
    threshold: int
    message: str

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "percentage": self.percentage,
            "threshold": self.threshold,
            "message": self.message,
        }
