from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Notice


class NoticeRepository(Protocol):
    def post(self, class_id: str, title: str, content: str, *, posted_at: Optional[datetime] = None) -> int:
        """Store a notice. Returns notice_id."""

        raise NotImplementedError

    def get(self, notice_id: int) -> Optional[Notice]:
        raise NotImplementedError

    def list_for_class(self, class_id: str, *, limit: int = 50) -> Sequence[Notice]:
        """Newest first."""

        raise NotImplementedError

    def latest_with_prefix(self, class_id: str, prefix: str) -> Optional[Notice]:
        """Newest notice of the class whose title starts with ``prefix``, however old."""

        raise NotImplementedError


class DismissalRepository(Protocol):
    """Which viewer has dismissed which notice (kept server-side)."""

    def add(self, viewer_id: str, notice_id: int) -> None:
        raise NotImplementedError

    def is_dismissed(self, viewer_id: str, notice_id: int) -> bool:
        raise NotImplementedError
