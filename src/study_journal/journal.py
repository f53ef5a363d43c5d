"""Journal entries: the local list of logged study sessions."""
import logging
from datetime import datetime

from study_journal.db import get_connection, new_timestamp_id
from study_journal.errors import EntryNotFoundError, ValidationError
from study_journal.models import JournalEntry

logger = logging.getLogger(__name__)


def _validate(subject: str, duration_minutes, notes: str) -> tuple[str, int, str]:
    subject = (subject or "").strip()
    notes = (notes or "").strip()
    if not subject:
        raise ValidationError("Subject is required.")
    if not notes:
        raise ValidationError("Notes are required.")
    if isinstance(duration_minutes, bool):
        raise ValidationError("Duration must be a whole number of minutes.")
    try:
        duration = int(duration_minutes)
    except (TypeError, ValueError):
        raise ValidationError("Duration must be a whole number of minutes.") from None
    if duration <= 0 or duration != float(duration_minutes):
        raise ValidationError("Duration must be a positive whole number of minutes.")
    return subject, duration, notes


def add_entry(
    db_path: str,
    subject: str,
    duration_minutes: int,
    notes: str,
    now: datetime | None = None,
) -> JournalEntry:
    subject, duration, notes = _validate(subject, duration_minutes, notes)
    now = now or datetime.now()
    conn = get_connection(db_path)
    entry = JournalEntry(
        id=new_timestamp_id(conn, "journal_entries", now),
        subject=subject,
        duration_minutes=duration,
        notes=notes,
        created_at=now.isoformat(),
    )
    conn.execute(
        "INSERT INTO journal_entries (id, subject, duration_minutes, notes, created_at) VALUES (?, ?, ?, ?, ?)",
        (entry.id, entry.subject, entry.duration_minutes, entry.notes, entry.created_at),
    )
    conn.commit()
    conn.close()
    logger.debug("Saved journal entry %s (%s, %d min)", entry.id, subject, duration)
    return entry


def get_entries(db_path: str) -> list[JournalEntry]:
    """All entries, most recent first."""
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM journal_entries ORDER BY id DESC").fetchall()
    conn.close()
    return [JournalEntry.from_row(r) for r in rows]


def get_entry(db_path: str, entry_id: int) -> JournalEntry:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM journal_entries WHERE id = ?", (entry_id,)).fetchone()
    conn.close()
    if row is None:
        raise EntryNotFoundError(entry_id)
    return JournalEntry.from_row(row)


def delete_entry(db_path: str, entry_id: int) -> None:
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM journal_entries WHERE id = ?", (entry_id,))
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        raise EntryNotFoundError(entry_id)


def search_entries(db_path: str, term: str) -> list[JournalEntry]:
    """Case-insensitive match on subject or notes. An empty term returns everything."""
    term = (term or "").strip().lower()
    entries = get_entries(db_path)
    if not term:
        return entries
    return [e for e in entries if term in e.subject.lower() or term in e.notes.lower()]
