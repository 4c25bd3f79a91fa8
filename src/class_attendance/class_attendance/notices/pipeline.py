from __future__ import annotations

from typing import Optional

from ..attendance.service import AttendanceLedger
from ..common.datetime_utils import Clock, SystemClock
from ..common.logging import get_logger
from ..common.validators import require_non_empty
from ..core.constants import TIMETABLE_NOTICE_PREFIX
from ..core.enums import AlertState, SlotChange
from ..core.exceptions import NotFoundError, ValidationError
from ..reports.service import AggregationService
from ..timetable.model import SlotEvent
from .model import AttendanceAlert, Notice, TimetableAlert, is_machine_title, machine_title
from .repository import DismissalRepository, NoticeRepository

log = get_logger(__name__)


def describe_change(event: SlotEvent) -> str:
    """Human-readable summary of a timetable mutation."""
    slot = event.slot
    if event.kind == SlotChange.ADDED:
        return f"New class scheduled: {slot.describe()}."
    if event.kind == SlotChange.REMOVED:
        return f"Class cancelled: {slot.describe()} has been removed from the timetable."
    if event.previous is not None and event.previous != slot:
        return f"Schedule changed: {event.previous.describe()} is now {slot.describe()}."
    return f"Schedule updated: {slot.describe()}."


class ChangeNotificationPipeline:
    """Turns timetable mutations into class notices and evaluates alerts.

    Per viewer and class the timetable alert moves IDLE -> NOTIFIED ->
    DISMISSED; the next mutation posts a newer notice and re-arms it.
    Dismissals are remembered by notice id on the server.
    """

    def __init__(
        self,
        notices: NoticeRepository,
        dismissals: DismissalRepository,
        ledger: AttendanceLedger,
        aggregation: AggregationService,
        *,
        clock: Clock | None = None,
    ):
        self._notices = notices
        self._dismissals = dismissals
        self._ledger = ledger
        self._aggregation = aggregation
        self._clock = clock or SystemClock()

    def on_slot_event(self, event: SlotEvent) -> int:
        title = machine_title(event.kind)
        content = describe_change(event)
        notice_id = self._notices.post(event.class_id, title, content, posted_at=self._clock.now())
        log.info("timetable_notice_posted", class_id=event.class_id, notice_id=notice_id, action=event.kind.value)
        return notice_id

    def announce(self, class_id: str, title: str, content: str) -> int:
        """Post a human-authored notice; the timetable marker is reserved."""
        title = require_non_empty(title, "Title")
        content = require_non_empty(content, "Content")
        if is_machine_title(title):
            raise ValidationError("Notice titles may not use the reserved timetable marker")
        notice_id = self._notices.post(class_id, title, content, posted_at=self._clock.now())
        log.info("notice_posted", class_id=class_id, notice_id=notice_id)
        return notice_id

    def list_notices(self, class_id: str) -> list[Notice]:
        return list(self._notices.list_for_class(class_id))

    def latest_timetable_notice(self, class_id: str) -> Optional[Notice]:
        return self._notices.latest_with_prefix(class_id, TIMETABLE_NOTICE_PREFIX)

    def poll(self, class_id: str, viewer_id: str) -> Optional[TimetableAlert]:
        """The newest timetable notice for the class, unless this viewer dismissed it."""
        notice = self.latest_timetable_notice(class_id)
        if notice is None or self._dismissals.is_dismissed(viewer_id, notice.notice_id):
            return None
        return TimetableAlert(
            notice_id=notice.notice_id,
            class_id=notice.class_id,
            action=notice.action,
            content=notice.content,
            posted_at=notice.posted_at,
        )

    def alert_state(self, class_id: str, viewer_id: str) -> AlertState:
        notice = self.latest_timetable_notice(class_id)
        if notice is None:
            return AlertState.IDLE
        if self._dismissals.is_dismissed(viewer_id, notice.notice_id):
            return AlertState.DISMISSED
        return AlertState.NOTIFIED

    def dismiss(self, viewer_id: str, notice_id: int) -> None:
        notice = self._notices.get(int(notice_id))
        if notice is None:
            raise NotFoundError(f"Notice {notice_id} does not exist")
        self._dismissals.add(viewer_id, notice.notice_id)
        log.info("notice_dismissed", viewer_id=viewer_id, notice_id=notice.notice_id)

    def low_attendance_alert(self, student_id: str) -> Optional[AttendanceAlert]:
        records = self._ledger.records_for_student(student_id)
        if not records:
            return None

        pct = self._aggregation.percentage(records)
        threshold = self._aggregation.low_threshold
        if pct >= threshold:
            return None
        return AttendanceAlert(
            student_id=student_id,
            percentage=pct,
            threshold=threshold,
            message=f"Critically low attendance: {pct}%.",
        )
