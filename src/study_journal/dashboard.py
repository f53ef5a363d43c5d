"""Progress statistics and the data series behind the progress charts."""
from datetime import date, timedelta

from study_journal.db import get_connection
from study_journal.history import HistoryStore, to_local_date


def get_streak_label(streak: int) -> str:
    if streak == 0:
        return "No active streak. Log a session today!"
    if streak == 1:
        return "1 day streak"
    return f"{streak} day streak"


def get_score_color(percentage: float) -> str:
    if percentage >= 80:
        return "green"
    elif percentage >= 60:
        return "yellow"
    elif percentage >= 40:
        return "dark_orange"
    return "red"


def get_study_stats(db_path: str, today: date | None = None) -> dict:
    store = HistoryStore(db_path)
    conn = get_connection(db_path)
    entries = conn.execute("SELECT COUNT(*) FROM journal_entries").fetchone()[0]
    quizzes = conn.execute("SELECT COUNT(*) FROM quiz_attempts").fetchone()[0]
    conn.close()
    return {
        "total_entries": entries,
        "total_minutes": store.total_minutes(),
        "total_quizzes": quizzes,
        "avg_score": store.average_percentage(),
        "streak": store.streak_days(today),
    }


def get_daily_minutes(db_path: str, days: int = 7, today: date | None = None) -> list[tuple[date, int]]:
    """Minutes studied per calendar day for the last ``days`` days, oldest first."""
    today = today or date.today()
    window = [today - timedelta(days=i) for i in range(days - 1, -1, -1)]
    totals = {d: 0 for d in window}
    conn = get_connection(db_path)
    rows = conn.execute("SELECT duration_minutes, created_at FROM journal_entries").fetchall()
    conn.close()
    for row in rows:
        day = to_local_date(row["created_at"])
        if day in totals:
            totals[day] += row["duration_minutes"]
    return [(d, totals[d]) for d in window]


def get_score_trend(db_path: str, limit: int = 10) -> list[int]:
    """Percentages of the last ``limit`` quizzes, oldest first."""
    attempts = HistoryStore(db_path).get_attempts(limit=limit)
    return [a.percentage for a in reversed(attempts)]
