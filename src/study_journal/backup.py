"""JSON export and import of journal entries and quiz history."""
import json
import logging
from pathlib import Path

from study_journal.db import get_connection
from study_journal.history import HistoryStore
from study_journal.journal import get_entries

logger = logging.getLogger(__name__)

ENTRIES_KEY = "journalEntries"
HISTORY_KEY = "quizHistory"
SQLITE_INT_MIN, SQLITE_INT_MAX = -2**63, 2**63 - 1


def load_collection(raw: str | None, key: str) -> list[dict]:
    """Read one collection from a backup document.

    Unreadable or corrupt JSON, a missing key, or a non-list value all read
    as an empty collection.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Backup is not valid JSON; treating %s as empty", key)
        return []
    items = data.get(key) if isinstance(data, dict) else None
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def export_data(db_path: str, file_path: str) -> dict:
    entries = [e.to_dict() for e in get_entries(db_path)]
    attempts = [a.to_dict() for a in HistoryStore(db_path).get_attempts()]
    Path(file_path).write_text(
        json.dumps({ENTRIES_KEY: entries, HISTORY_KEY: attempts}, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return {"entries": len(entries), "attempts": len(attempts)}


def _sqlite_int(value) -> int:
    number = int(value)
    if not SQLITE_INT_MIN <= number <= SQLITE_INT_MAX:
        raise OverflowError(f"{value!r} does not fit a SQLite INTEGER")
    return number


def _entry_row(item: dict) -> tuple | None:
    try:
        duration = _sqlite_int(item["durationMinutes"])
        row = (_sqlite_int(item["id"]), str(item["subject"]).strip(), duration,
               str(item["notes"]).strip(), str(item["createdAt"]))
    except (KeyError, TypeError, ValueError, OverflowError):
        return None
    if duration <= 0 or not row[1] or not row[3]:
        return None
    return row


def _attempt_row(item: dict) -> tuple | None:
    try:
        correct = _sqlite_int(item["correctCount"])
        total = _sqlite_int(item["totalCount"])
        pct = _sqlite_int(item["percentage"])
        row = (_sqlite_int(item["id"]), str(item["topic"]), correct, total, pct, str(item["completedAt"]))
    except (KeyError, TypeError, ValueError, OverflowError):
        return None
    if total <= 0 or not 0 <= correct <= total or not 0 <= pct <= 100:
        return None
    return row


def import_data(db_path: str, file_path: str) -> dict:
    """Restore a backup. Malformed items and ids already present are skipped."""
    try:
        raw = Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read backup %s: %s", file_path, e)
        raw = None
    entry_rows = [r for r in map(_entry_row, load_collection(raw, ENTRIES_KEY)) if r]
    attempt_rows = [r for r in map(_attempt_row, load_collection(raw, HISTORY_KEY)) if r]
    conn = get_connection(db_path)
    try:
        before = conn.total_changes
        conn.executemany(
            "INSERT OR IGNORE INTO journal_entries (id, subject, duration_minutes, notes, created_at) VALUES (?, ?, ?, ?, ?)",
            entry_rows,
        )
        entries_added = conn.total_changes - before
        conn.executemany(
            """INSERT OR IGNORE INTO quiz_attempts
            (id, topic, correct_count, total_count, percentage, completed_at)
            VALUES (?, ?, ?, ?, ?, ?)""",
            attempt_rows,
        )
        attempts_added = conn.total_changes - before - entries_added
        conn.commit()
    finally:
        conn.close()
    return {"entries": entries_added, "attempts": attempts_added}
