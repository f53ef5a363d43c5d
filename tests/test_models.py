"""Tests for data model classes."""
import pytest

from study_journal.errors import ValidationError
from study_journal.models import (
    JournalEntry, QuizQuestion, QAPair, QuizAttemptRecord, Badge, Prompt,
)


def test_journal_entry_to_dict():
    e = JournalEntry(id=1, subject="Biology", duration_minutes=30, notes="Cells", created_at="2026-03-01T10:00:00")
    assert e.to_dict() == {
        "id": 1,
        "subject": "Biology",
        "durationMinutes": 30,
        "notes": "Cells",
        "createdAt": "2026-03-01T10:00:00",
    }


def test_quiz_question_creation():
    q = QuizQuestion("2+2?", ("3", "4", "5", "6"), 1)
    assert q.correct_option == "4"


def test_quiz_question_requires_four_options():
    with pytest.raises(ValidationError):
        QuizQuestion("2+2?", ("3", "4", "5"), 1)


@pytest.mark.parametrize("index", [-1, 4])
def test_quiz_question_index_in_range(index):
    with pytest.raises(ValidationError):
        QuizQuestion("2+2?", ("3", "4", "5", "6"), index)


def test_qa_pair():
    pair = QAPair(question="What is ATP?", answer="Energy currency.")
    assert pair.answer == "Energy currency."


def test_attempt_record_to_dict():
    r = QuizAttemptRecord(5, "Math", 3, 5, 60, "2026-03-01T10:00:00")
    assert r.to_dict()["correctCount"] == 3
    assert r.to_dict()["percentage"] == 60


def test_badge_equality_ignores_condition():
    a = Badge("x", "X", "*", lambda e, a, t: True)
    b = Badge("x", "X", "*", lambda e, a, t: False)
    assert a == b


def test_prompt_to_messages():
    p = Prompt(system_prompt="sys", user_prompt="usr")
    assert p.to_messages() == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "usr"},
    ]
