from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from .model import Notice
from .repository import DismissalRepository, NoticeRepository


class InMemoryNoticeRepository(NoticeRepository):
    def __init__(self):
        self._by_id: dict[int, Notice] = {}
        self._id = 0

    def post(self, class_id: str, title: str, content: str, *, posted_at: Optional[datetime] = None) -> int:
        self._id += 1
        self._by_id[self._id] = Notice(
            notice_id=self._id,
            class_id=class_id,
            title=title,
            content=content,
            posted_at=posted_at or now_local(),
        )
        return self._id

    def get(self, notice_id: int) -> Optional[Notice]:
        return self._by_id.get(int(notice_id))

    def list_for_class(self, class_id: str, *, limit: int = 50) -> Sequence[Notice]:
        items = [n for n in self._by_id.values() if n.class_id == class_id]
        items.sort(key=lambda n: (n.posted_at, n.notice_id), reverse=True)
        return items[:limit]

    def latest_with_prefix(self, class_id: str, prefix: str) -> Optional[Notice]:
        matches = [n for n in self._by_id.values() if n.class_id == class_id and n.title.startswith(prefix)]
        if not matches:
            return None
        return max(matches, key=lambda n: (n.posted_at, n.notice_id))


class InMemoryDismissalRepository(DismissalRepository):
    def __init__(self):
        self._seen: set[tuple[str, int]] = set()

    def add(self, viewer_id: str, notice_id: int) -> None:
        self._seen.add((str(viewer_id), int(notice_id)))

    def is_dismissed(self, viewer_id: str, notice_id: int) -> bool:
        return (str(viewer_id), int(notice_id)) in self._seen
