from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notice
from .repository import DismissalRepository, NoticeRepository


def _to_notice(r: dict) -> Notice:
    return Notice(
        notice_id=int(r["notice_id"]),
        class_id=str(r["class_id"]),
        title=str(r["title"]),
        content=str(r["content"]),
        posted_at=r["posted_at"],
    )


class MySQLNoticeRepository(NoticeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def post(self, class_id: str, title: str, content: str, *, posted_at: Optional[datetime] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notices(class_id, title, content, posted_at)
                VALUES(%s,%s,%s,%s)
                """,
                (class_id, title, content, posted_at or now_local()),
            )
            return int(cur.lastrowid)

    def get(self, notice_id: int) -> Optional[Notice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT notice_id, class_id, title, content, posted_at FROM notices WHERE notice_id=%s",
                (int(notice_id),),
            )
            r = fetchone(cur)
            return _to_notice(r) if r else None

    def list_for_class(self, class_id: str, *, limit: int = 50) -> Sequence[Notice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notice_id, class_id, title, content, posted_at
                FROM notices
                WHERE class_id=%s
                ORDER BY posted_at DESC, notice_id DESC
                LIMIT %s
                """,
                (class_id, int(limit)),
            )
            return [_to_notice(r) for r in fetchall(cur)]

    def latest_with_prefix(self, class_id: str, prefix: str) -> Optional[Notice]:
        # LEFT() instead of LIKE: the prefix contains "_".
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notice_id, class_id, title, content, posted_at
                FROM notices
                WHERE class_id=%s AND LEFT(title, CHAR_LENGTH(%s)) COLLATE utf8mb4_bin = %s
                ORDER BY posted_at DESC, notice_id DESC
                LIMIT 1
                """,
                (class_id, prefix, prefix),
            )
            r = fetchone(cur)
            return _to_notice(r) if r else None


class MySQLDismissalRepository(DismissalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, viewer_id: str, notice_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO notice_dismissals(viewer_id, notice_id) VALUES(%s,%s)",
                (str(viewer_id), int(notice_id)),
            )

    def is_dismissed(self, viewer_id: str, notice_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM notice_dismissals WHERE viewer_id=%s AND notice_id=%s",
                (str(viewer_id), int(notice_id)),
            )
            return fetchone(cur) is not None
