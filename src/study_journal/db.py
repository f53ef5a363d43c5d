"""Local SQLite store: schema, connections, settings and the clear-all command."""
import secrets
import sqlite3
from datetime import datetime
from pathlib import Path

from study_journal.config import DEFAULT_DB_PATH
from study_journal.errors import ValidationError

CLEAR_TOKEN_KEY = "clear_all_token"

SCHEMA = """
CREATE TABLE IF NOT EXISTS journal_entries (
    id INTEGER PRIMARY KEY,
    subject TEXT NOT NULL,
    duration_minutes INTEGER NOT NULL CHECK (duration_minutes > 0),
    notes TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS quiz_attempts (
    id INTEGER PRIMARY KEY,
    topic TEXT NOT NULL,
    correct_count INTEGER NOT NULL,
    total_count INTEGER NOT NULL,
    percentage INTEGER NOT NULL CHECK (percentage BETWEEN 0 AND 100),
    completed_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def new_timestamp_id(conn: sqlite3.Connection, table: str, now: datetime) -> int:
    """Millisecond creation timestamp, bumped past the newest id on collision."""
    candidate = int(now.timestamp() * 1000)
    row = conn.execute(f"SELECT MAX(id) FROM {table}").fetchone()
    if row[0] is not None and row[0] >= candidate:
        return row[0] + 1
    return candidate


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def request_clear_all(db_path: str) -> str:
    """First step of wiping all data: issue a one-time confirmation token."""
    token = secrets.token_hex(4)
    set_setting(db_path, CLEAR_TOKEN_KEY, token)
    return token


def confirm_clear_all(db_path: str, token: str) -> None:
    """Second step: delete every journal entry and quiz attempt if the token matches."""
    expected = get_setting(db_path, CLEAR_TOKEN_KEY)
    if not expected or not secrets.compare_digest(expected, (token or "").strip()):
        raise ValidationError("Confirmation token does not match. Nothing was deleted.")
    conn = get_connection(db_path)
    conn.execute("DELETE FROM journal_entries")
    conn.execute("DELETE FROM quiz_attempts")
    conn.execute("DELETE FROM user_settings WHERE key = ?", (CLEAR_TOKEN_KEY,))
    conn.commit()
    conn.close()
