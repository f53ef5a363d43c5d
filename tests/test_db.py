"""Tests for database initialization, settings and the clear-all command."""
from datetime import datetime

import pytest

from study_journal.db import (
    init_db, get_connection, get_setting, set_setting, new_timestamp_id,
    request_clear_all, confirm_clear_all,
)
from study_journal.errors import ValidationError
from study_journal.history import HistoryStore
from study_journal.journal import add_entry, get_entries
from study_journal.models import QuizAttemptRecord


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = {row[0] for row in cursor.fetchall()}
    assert {"journal_entries", "quiz_attempts", "user_settings"}.issubset(tables)
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    assert len(cursor.fetchall()) > 0
    conn.close()


def test_init_db_creates_parent_directory(tmp_path):
    db_path = str(tmp_path / "nested" / "dir" / "journal.db")
    init_db(db_path)
    assert (tmp_path / "nested" / "dir" / "journal.db").exists()


def test_get_connection_returns_row_factory(db):
    conn = get_connection(db)
    conn.execute("INSERT INTO user_settings (key, value) VALUES ('test', 'val')")
    row = conn.execute("SELECT key, value FROM user_settings WHERE key='test'").fetchone()
    assert row["key"] == "test"
    conn.close()


def test_settings_roundtrip_and_overwrite(db):
    assert get_setting(db, "theme", "light") == "light"
    set_setting(db, "theme", "dark")
    set_setting(db, "theme", "ocean")
    assert get_setting(db, "theme") == "ocean"


def test_new_timestamp_id_uses_milliseconds(db):
    now = datetime(2026, 3, 1, 12, 0, 0)
    conn = get_connection(db)
    assert new_timestamp_id(conn, "journal_entries", now) == int(now.timestamp() * 1000)
    conn.close()


def test_new_timestamp_id_bumps_on_collision(db):
    now = datetime(2026, 3, 1, 12, 0, 0)
    first = add_entry(db, "Math", 10, "Fractions", now=now)
    second = add_entry(db, "Math", 10, "Decimals", now=now)
    assert second.id == first.id + 1


def _fill(db):
    add_entry(db, "Biology", 30, "Cells")
    HistoryStore(db).append(QuizAttemptRecord(1, "Biology", 1, 1, 100, "2026-03-01T10:00:00"))


def test_clear_all_requires_matching_token(db):
    _fill(db)
    request_clear_all(db)
    with pytest.raises(ValidationError):
        confirm_clear_all(db, "wrong")
    assert len(get_entries(db)) == 1
    assert len(HistoryStore(db).get_attempts()) == 1


def test_clear_all_without_request_fails(db):
    _fill(db)
    with pytest.raises(ValidationError):
        confirm_clear_all(db, "")
    assert len(get_entries(db)) == 1


def test_clear_all_two_step(db):
    _fill(db)
    token = request_clear_all(db)
    confirm_clear_all(db, f"  {token} ")
    assert get_entries(db) == []
    assert HistoryStore(db).get_attempts() == []


def test_clear_token_is_single_use(db):
    token = request_clear_all(db)
    confirm_clear_all(db, token)
    with pytest.raises(ValidationError):
        confirm_clear_all(db, token)
