"""Achievement badges, derived from entries and quiz history on every call."""
from datetime import date

from study_journal.history import calc_streak
from study_journal.models import Badge, JournalEntry, QuizAttemptRecord


def _minutes(entries: list[JournalEntry]) -> int:
    return sum(e.duration_minutes for e in entries)


BADGES = [
    Badge("first_entry", "First Step", "🎯", lambda entries, attempts, today: len(entries) >= 1),
    Badge("five_entries", "5 Sessions", "📚", lambda entries, attempts, today: len(entries) >= 5),
    Badge("ten_entries", "10 Sessions", "🔥", lambda entries, attempts, today: len(entries) >= 10),
    Badge("first_quiz", "Quiz Taker", "❓", lambda entries, attempts, today: len(attempts) >= 1),
    Badge("five_quizzes", "5 Quizzes", "🧠", lambda entries, attempts, today: len(attempts) >= 5),
    Badge("ten_quizzes", "10 Quizzes", "🎓", lambda entries, attempts, today: len(attempts) >= 10),
    Badge("hundred_minutes", "100 Minutes", "⏱️", lambda entries, attempts, today: _minutes(entries) >= 100),
    Badge("thousand_minutes", "1000 Minutes", "⚡", lambda entries, attempts, today: _minutes(entries) >= 1000),
    Badge("perfect_score", "Perfect Score", "💯",
          lambda entries, attempts, today: any(a.percentage == 100 for a in attempts)),
    Badge("streak_7", "7 Day Streak", "🔥",
          lambda entries, attempts, today: calc_streak((e.created_at for e in entries), today) >= 7),
]


def evaluate_badges(
    entries: list[JournalEntry],
    attempts: list[QuizAttemptRecord],
    today: date | None = None,
) -> list[tuple[Badge, bool]]:
    return [(badge, bool(badge.condition(entries, attempts, today))) for badge in BADGES]


def unlocked_badges(entries, attempts, today: date | None = None) -> list[Badge]:
    return [badge for badge, unlocked in evaluate_badges(entries, attempts, today) if unlocked]
