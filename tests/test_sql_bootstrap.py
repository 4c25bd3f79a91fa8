from __future__ import annotations

from pathlib import Path

import pytest

from src.class_attendance.class_attendance.database.bootstrap import (
    _exec_sql,
    _iter_sql_statements,
    _strip_create_db_and_use,
)
from src.class_attendance.class_attendance.database.mysql_base import db_cursor, range_clauses

DATABASE_DIR = Path(__file__).resolve().parents[1] / "database"


class RecordingCursor:
    def __init__(self):
        self.statements = []

    def execute(self, stmt, params=None):
        self.statements.append(stmt)


def test_splitter_keeps_semicolons_inside_quotes_and_drops_comments():
    sql = """
    -- a comment; with a semicolon
    INSERT INTO notices (title) VALUES ('a;b');
    INSERT INTO notices (title) VALUES ("c;d")
    """
    statements = list(_iter_sql_statements(sql))

    assert len(statements) == 2
    assert "'a;b'" in statements[0]
    assert "comment" not in statements[0]
    assert statements[1].endswith('("c;d")')


def test_create_database_and_use_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS foo;\nUSE foo;\nCREATE TABLE t (id INT);\n"
    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]


def test_schema_file_creates_every_table():
    sql = _strip_create_db_and_use((DATABASE_DIR / "schema.sql").read_text(encoding="utf-8"))
    cur = RecordingCursor()

    count = _exec_sql(cur, sql)

    assert count == len(cur.statements)
    created = " ".join(cur.statements)
    for table in ["classes", "members", "timetable_slots", "attendance_records", "notices", "notice_dismissals"]:
        assert f"CREATE TABLE IF NOT EXISTS {table}" in created
    assert not any(s.upper().startswith("USE ") for s in cur.statements)


def test_seed_file_splits_cleanly():
    sql = (DATABASE_DIR / "seed.sql").read_text(encoding="utf-8")
    statements = list(_iter_sql_statements(_strip_create_db_and_use(sql)))
    assert statements
    assert all(s.upper().startswith(("INSERT", "SET")) for s in statements)


def test_range_clauses():
    assert range_clauses("attendance_date", None, None) == ([], [])
    clauses, params = range_clauses("attendance_date", "2024-03-01", "2024-03-31")
    assert clauses == ["attendance_date >= %s", "attendance_date <= %s"]
    assert params == ["2024-03-01", "2024-03-31"]


def test_attendance_subject_key_is_case_sensitive():
    schema = (DATABASE_DIR / "schema.sql").read_text(encoding="utf-8")
    table = schema.split("CREATE TABLE IF NOT EXISTS attendance_records", 1)[1].split(";", 1)[0]
    subject_line = next(line for line in table.splitlines() if line.strip().startswith("subject "))
    assert "COLLATE utf8mb4_bin" in subject_line


class FakeConnection:
    def __init__(self):
        self.events = []
        self.cursor_kwargs = None

    def cursor(self, **kwargs):
        self.cursor_kwargs = kwargs
        return self

    def execute(self, stmt, params=None):
        self.events.append("execute")

    def commit(self):
        self.events.append("commit")

    def rollback(self):
        self.events.append("rollback")

    def close(self):
        self.events.append("close")


class FakeConnectionFactory:
    def __init__(self):
        self.conn = FakeConnection()

    def connect(self):
        return self.conn


def test_db_cursor_commits_once_with_dict_rows():
    factory = FakeConnectionFactory()
    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")
        cur.execute("SELECT 2")

    assert factory.conn.cursor_kwargs == {"dictionary": True}
    assert factory.conn.events.count("commit") == 1
    assert "rollback" not in factory.conn.events
    assert factory.conn.events[-1] == "close"


def test_db_cursor_rolls_back_on_error():
    factory = FakeConnectionFactory()
    with pytest.raises(RuntimeError):
        with db_cursor(factory) as (_, cur):
            cur.execute("INSERT ...")
            raise RuntimeError("duplicate key")

    assert "commit" not in factory.conn.events
    assert "rollback" in factory.conn.events
    assert factory.conn.events[-1] == "close"
