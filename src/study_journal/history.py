"""Quiz attempt history and the statistics derived from it."""
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable

from study_journal.db import get_connection
from study_journal.models import QuizAttemptRecord

logger = logging.getLogger(__name__)


def to_local_date(timestamp: str) -> date | None:
    """Calendar day of an ISO-8601 timestamp in local time, or None if unparseable."""
    try:
        moment = datetime.fromisoformat(timestamp)
    except (TypeError, ValueError):
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def calc_streak(timestamps: Iterable[str], today: date | None = None) -> int:
    """Consecutive calendar days, ending today, with at least one timestamp."""
    days = {d for d in (to_local_date(t) for t in timestamps) if d is not None}
    cursor = today or date.today()
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


class HistoryStore:
    """Owns the persisted quiz history and the journal-wide statistics.

    Handlers receive an instance rather than reaching for module state.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def append(self, record: QuizAttemptRecord) -> QuizAttemptRecord:
        conn = get_connection(self.db_path)
        newest = conn.execute("SELECT MAX(id) FROM quiz_attempts").fetchone()[0]
        if newest is not None and newest >= record.id:
            record = replace(record, id=newest + 1)
        conn.execute(
            """INSERT INTO quiz_attempts
            (id, topic, correct_count, total_count, percentage, completed_at)
            VALUES (?, ?, ?, ?, ?, ?)""",
            (record.id, record.topic, record.correct_count, record.total_count,
             record.percentage, record.completed_at),
        )
        conn.commit()
        conn.close()
        logger.info("Recorded quiz attempt %s on %r: %d%%", record.id, record.topic, record.percentage)
        return record

    def get_attempts(self, limit: int | None = None) -> list[QuizAttemptRecord]:
        """Attempts, most recent first."""
        conn = get_connection(self.db_path)
        if limit is None:
            rows = conn.execute("SELECT * FROM quiz_attempts ORDER BY id DESC").fetchall()
        else:
            rows = conn.execute("SELECT * FROM quiz_attempts ORDER BY id DESC LIMIT ?", (limit,)).fetchall()
        conn.close()
        return [QuizAttemptRecord.from_row(r) for r in rows]

    def clear(self) -> None:
        conn = get_connection(self.db_path)
        conn.execute("DELETE FROM quiz_attempts")
        conn.commit()
        conn.close()

    def total_minutes(self) -> int:
        conn = get_connection(self.db_path)
        total = conn.execute("SELECT COALESCE(SUM(duration_minutes), 0) FROM journal_entries").fetchone()[0]
        conn.close()
        return total

    def streak_days(self, today: date | None = None) -> int:
        conn = get_connection(self.db_path)
        rows = conn.execute("SELECT created_at FROM journal_entries").fetchall()
        conn.close()
        return calc_streak((r["created_at"] for r in rows), today)

    def average_percentage(self) -> int:
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT COUNT(*) as n, SUM(percentage) as s FROM quiz_attempts").fetchone()
        conn.close()
        if not row["n"]:
            return 0
        return (2 * row["s"] + row["n"]) // (2 * row["n"])
