from __future__ import annotations

from datetime import date, datetime

from ..common.logging import get_logger
from ..core.enums import DenialReason
from ..core.exceptions import DeniedError, NotFoundError
from ..directory.repository import DirectoryRepository
from ..timetable.evaluator import SessionEvaluator
from .model import GateDecision

log = get_logger(__name__)

_MESSAGES = {
    DenialReason.NOT_TODAY: "Attendance can only be marked for today's date",
    DenialReason.NO_LIVE_SESSION: "Attendance can only be marked during an ongoing session",
    DenialReason.SUBJECT_MISMATCH: "The session in progress is for a different subject",
}


class AttendanceGate:
    """Allows an attendance mark only for today's live session of the class.

    Rules are checked in order: the date must be today, a session must be
    live, and the live session's subject must be the requested one.
    """

    def __init__(self, evaluator: SessionEvaluator, directory: DirectoryRepository):
        self._evaluator = evaluator
        self._directory = directory

    def authorize_mark(self, class_id: str, subject: str, on_date: date, *, now: datetime | None = None) -> GateDecision:
        if not self._directory.class_exists(class_id):
            raise NotFoundError(f"Class {class_id!r} does not exist")

        now = now or self._evaluator.now()
        if on_date != now.date():
            return GateDecision.deny(DenialReason.NOT_TODAY)

        slot = self._evaluator.live_slot(class_id, now)
        if slot is None:
            return GateDecision.deny(DenialReason.NO_LIVE_SESSION)

        if slot.subject != (subject or "").strip():
            return GateDecision.deny(DenialReason.SUBJECT_MISMATCH, slot)

        return GateDecision.allow(slot)

    def require_mark(self, class_id: str, subject: str, on_date: date, *, now: datetime | None = None) -> GateDecision:
        """Like authorize_mark, but raises DeniedError on refusal."""
        decision = self.authorize_mark(class_id, subject, on_date, now=now)
        if not decision.authorized:
            log.info("mark_denied", class_id=class_id, subject=subject, date=str(on_date), reason=decision.reason.value)
            raise DeniedError(decision.reason, _MESSAGES[decision.reason])
        return decision
