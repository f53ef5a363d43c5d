# tests/test_prompts.py
import pytest

from study_journal.errors import InvalidModeError, ValidationError
from study_journal.prompts import build_prompt, normalize_question_count


@pytest.mark.parametrize("value,expected", [
    (None, 5),
    (0, 5),
    ("0", 5),
    ("abc", 5),
    ("", 5),
    (True, 5),
    (7, 7),
    ("12", 12),
    (3.9, 3),
    (1, 1),
    (20, 20),
    (50, 20),
    (-3, 1),
])
def test_normalize_question_count(value, expected):
    assert normalize_question_count(value) == expected


def test_summary_prompt():
    prompt = build_prompt("summary", source_text="Photosynthesis turns light into sugar.")
    assert "3-7" in prompt.user_prompt
    assert "bullet" in prompt.user_prompt
    assert "Photosynthesis turns light into sugar." in prompt.user_prompt
    assert prompt.system_prompt


def test_note_quiz_prompt_defaults_to_five():
    prompt = build_prompt("note-quiz", source_text="Mitochondria is the powerhouse of the cell.")
    assert "exactly 5 multiple-choice" in prompt.user_prompt
    assert "ONLY on the student's note" in prompt.user_prompt
    assert "Mitochondria is the powerhouse of the cell." in prompt.user_prompt
    assert '"correctAnswer"' in prompt.user_prompt


def test_note_quiz_prompt_with_count():
    prompt = build_prompt("note-quiz", source_text="Notes", question_count=3)
    assert "exactly 3 multiple-choice" in prompt.user_prompt


def test_topic_quiz_prompt():
    prompt = build_prompt("topic-quiz", topic="World War II", question_count=8)
    assert "exactly 8" in prompt.user_prompt
    assert '"World War II"' in prompt.user_prompt
    assert "exactly 4 options" in prompt.user_prompt


def test_topic_quiz_prompt_clamps_count():
    prompt = build_prompt("topic-quiz", topic="Algebra", question_count=500)
    assert "exactly 20" in prompt.user_prompt


@pytest.mark.parametrize("mode", ["summary", "note-quiz", "note-qa"])
@pytest.mark.parametrize("text", [None, "", "   "])
def test_note_modes_require_text(mode, text):
    with pytest.raises(ValidationError):
        build_prompt(mode, source_text=text)


@pytest.mark.parametrize("topic", [None, "", "  "])
def test_topic_quiz_requires_topic(topic):
    with pytest.raises(ValidationError):
        build_prompt("topic-quiz", topic=topic)


@pytest.mark.parametrize("mode", ["flashcards", "", None, "SUMMARY"])
def test_invalid_mode(mode):
    with pytest.raises(InvalidModeError):
        build_prompt(mode, source_text="text", topic="topic")


def test_build_prompt_is_pure():
    a = build_prompt("topic-quiz", topic="Rome", question_count=4)
    b = build_prompt("topic-quiz", topic="Rome", question_count=4)
    assert a == b


def test_note_qa_prompt():
    prompt = build_prompt("note-qa", source_text="Enzymes lower activation energy.")
    assert "Create 3 short question and answer pairs" in prompt.user_prompt
    assert '"answer"' in prompt.user_prompt
    assert "Enzymes lower activation energy." in prompt.user_prompt


def test_note_qa_prompt_count_is_clamped():
    prompt = build_prompt("note-qa", source_text="Notes", question_count=50)
    assert "Create 20 short" in prompt.user_prompt
