# tests/test_history.py
from datetime import date, datetime, timedelta, timezone

from study_journal.history import HistoryStore, calc_streak, to_local_date
from study_journal.journal import add_entry
from study_journal.models import QuizAttemptRecord


def _record(id, pct=80, topic="Math"):
    return QuizAttemptRecord(id, topic, 4, 5, pct, "2026-03-01T10:00:00")


def test_append_and_get_most_recent_first(db):
    store = HistoryStore(db)
    store.append(_record(100, topic="First"))
    store.append(_record(200, topic="Second"))
    assert [a.topic for a in store.get_attempts()] == ["Second", "First"]


def test_append_reassigns_colliding_id(db):
    store = HistoryStore(db)
    first = store.append(_record(100))
    second = store.append(_record(100))
    assert second.id == first.id + 1
    assert len(store.get_attempts()) == 2


def test_get_attempts_limit(db):
    store = HistoryStore(db)
    for i in range(12):
        store.append(_record(i + 1))
    attempts = store.get_attempts(limit=10)
    assert len(attempts) == 10
    assert attempts[0].id == 12


def test_clear(db):
    store = HistoryStore(db)
    store.append(_record(1))
    store.clear()
    assert store.get_attempts() == []


def test_average_percentage(db):
    store = HistoryStore(db)
    assert store.average_percentage() == 0
    store.append(_record(1, pct=60))
    store.append(_record(2, pct=85))
    assert store.average_percentage() == 73  # 72.5 rounds up


def test_total_minutes(db):
    store = HistoryStore(db)
    assert store.total_minutes() == 0
    add_entry(db, "Math", 30, "a")
    add_entry(db, "Art", 45, "b")
    assert store.total_minutes() == 75


def test_streak_three_days(db):
    today = date(2026, 3, 10)
    for offset in (0, 1, 2, 4):
        day = today - timedelta(days=offset)
        add_entry(db, "Math", 10, "a", now=datetime(day.year, day.month, day.day, 18, 0))
    assert HistoryStore(db).streak_days(today=today) == 3


def test_streak_no_entries(db):
    assert HistoryStore(db).streak_days() == 0


def test_calc_streak_requires_today():
    today = date(2026, 3, 10)
    assert calc_streak(["2026-03-09T10:00:00", "2026-03-08T10:00:00"], today) == 0


def test_calc_streak_uses_calendar_days_not_24h():
    today = date(2026, 3, 10)
    # 03-10 00:05 and 03-08 00:01 are over 48h apart, yet three calendar days in a row
    stamps = ["2026-03-10T00:05:00", "2026-03-09T23:55:00", "2026-03-08T00:01:00"]
    assert calc_streak(stamps, today) == 3


def test_calc_streak_multiple_entries_same_day():
    today = date(2026, 3, 10)
    stamps = ["2026-03-10T08:00:00", "2026-03-10T20:00:00", "2026-03-09T12:00:00"]
    assert calc_streak(stamps, today) == 2


def test_calc_streak_ignores_bad_timestamps():
    today = date(2026, 3, 10)
    assert calc_streak(["garbage", "", "2026-03-10T08:00:00"], today) == 1


def test_to_local_date_converts_aware_timestamps():
    moment = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
    assert to_local_date(moment.isoformat()) == moment.astimezone().date()
    assert to_local_date("2026-03-10T12:00:00") == date(2026, 3, 10)
    assert to_local_date(None) is None
