# tests/test_backup.py
import json
from datetime import datetime

from study_journal.backup import export_data, import_data, load_collection
from study_journal.db import init_db
from study_journal.history import HistoryStore
from study_journal.journal import add_entry, get_entries
from study_journal.models import QuizAttemptRecord


def test_export_then_import_into_fresh_db(db, tmp_path):
    add_entry(db, "Biology", 30, "Cells", now=datetime(2026, 3, 1, 9, 0))
    HistoryStore(db).append(QuizAttemptRecord(1, "Biology", 3, 5, 60, "2026-03-01T10:00:00"))
    backup = tmp_path / "backup.json"
    assert export_data(db, str(backup)) == {"entries": 1, "attempts": 1}

    data = json.loads(backup.read_text())
    assert data["journalEntries"][0]["subject"] == "Biology"
    assert data["quizHistory"][0]["percentage"] == 60

    other = str(tmp_path / "other.db")
    init_db(other)
    assert import_data(other, str(backup)) == {"entries": 1, "attempts": 1}
    assert get_entries(other) == get_entries(db)


def test_import_skips_existing_ids(db, tmp_path):
    add_entry(db, "Biology", 30, "Cells")
    backup = tmp_path / "backup.json"
    export_data(db, str(backup))
    assert import_data(db, str(backup)) == {"entries": 0, "attempts": 0}
    assert len(get_entries(db)) == 1


def test_import_corrupt_file_is_empty(db, tmp_path):
    backup = tmp_path / "backup.json"
    backup.write_text("{not json")
    assert import_data(db, str(backup)) == {"entries": 0, "attempts": 0}


def test_import_missing_file_is_empty(db, tmp_path):
    assert import_data(db, str(tmp_path / "missing.json")) == {"entries": 0, "attempts": 0}


def test_import_skips_malformed_items(db, tmp_path):
    backup = tmp_path / "backup.json"
    backup.write_text(json.dumps({
        "journalEntries": [
            {"id": 1, "subject": "Math", "durationMinutes": 20, "notes": "x", "createdAt": "2026-03-01T09:00:00"},
            {"id": 2, "subject": "Math", "durationMinutes": 0, "notes": "x", "createdAt": "2026-03-01T09:00:00"},
            {"id": 3, "subject": "Math"},
            "junk",
        ],
        "quizHistory": [
            {"id": 1, "topic": "Math", "correctCount": 6, "totalCount": 5, "percentage": 120, "completedAt": "x"},
        ],
    }))
    assert import_data(db, str(backup)) == {"entries": 1, "attempts": 0}


def test_load_collection():
    assert load_collection(None, "journalEntries") == []
    assert load_collection("", "journalEntries") == []
    assert load_collection("[broken", "journalEntries") == []
    assert load_collection("[1, 2]", "journalEntries") == []
    assert load_collection('{"journalEntries": {"a": 1}}', "journalEntries") == []
    assert load_collection('{"journalEntries": [{"id": 1}, 5]}', "journalEntries") == [{"id": 1}]


GOOD_ENTRY = {"id": 1, "subject": "Biology", "durationMinutes": 30, "notes": "Cells", "createdAt": "2026-03-01T09:00:00"}


def _write_entries(path, entries_json):
    path.write_text('{"journalEntries": [' + entries_json + "," + json.dumps(GOOD_ENTRY) + "]}")


def test_import_skips_infinite_duration(db, tmp_path):
    backup = tmp_path / "backup.json"
    _write_entries(backup, '{"id": 2, "subject": "Math", "durationMinutes": Infinity, '
                           '"notes": "Limits", "createdAt": "2026-03-01T10:00:00"}')
    assert import_data(db, str(backup)) == {"entries": 1, "attempts": 0}
    assert [e.subject for e in get_entries(db)] == ["Biology"]


def test_import_skips_id_too_large_for_sqlite(db, tmp_path):
    backup = tmp_path / "backup.json"
    _write_entries(backup, json.dumps({**GOOD_ENTRY, "id": 10**23, "subject": "Math"}))
    assert import_data(db, str(backup)) == {"entries": 1, "attempts": 0}
    assert [e.id for e in get_entries(db)] == [1]


def test_import_skips_attempt_with_huge_counts(db, tmp_path):
    backup = tmp_path / "backup.json"
    good = {"id": 5, "topic": "Math", "correctCount": 1, "totalCount": 2, "percentage": 50,
            "completedAt": "2026-03-01T10:00:00"}
    bad = {**good, "id": 6, "totalCount": 2**64, "correctCount": 2**63}
    backup.write_text(json.dumps({"quizHistory": [bad, good]}))
    assert import_data(db, str(backup)) == {"entries": 0, "attempts": 1}
    assert [a.id for a in HistoryStore(db).get_attempts()] == [5]
