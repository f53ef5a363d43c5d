"""Prompt construction for summaries and quizzes."""
from study_journal.errors import InvalidModeError, ValidationError
from study_journal.models import Prompt

SUMMARY = "summary"
NOTE_QUIZ = "note-quiz"
TOPIC_QUIZ = "topic-quiz"
NOTE_QA = "note-qa"
MODES = (SUMMARY, NOTE_QUIZ, TOPIC_QUIZ, NOTE_QA)

DEFAULT_QUESTION_COUNT = 5
DEFAULT_QA_COUNT = 3
MIN_QUESTIONS = 1
MAX_QUESTIONS = 20

SYSTEM_PROMPT = "You are a helpful study assistant."
QUIZ_SYSTEM_PROMPT = "You are a quiz generator for students. Return ONLY valid JSON."

QUIZ_SCHEMA = """[
  {
    "question": "Question text?",
    "options": ["First option", "Second option", "Third option", "Fourth option"],
    "correctAnswer": 0
  }
]"""

QA_SCHEMA = """[
  { "question": "Question text?", "answer": "Short answer." }
]"""

QUIZ_RULES = """Formatting rules:
- Output ONLY a JSON array, with no preamble or explanation
- Each question must have exactly 4 options
- Do not prefix options with letters
- "correctAnswer" is the 0-based index (0-3) of the correct option"""


def normalize_question_count(value) -> int:
    """Default to 5 for missing, zero or non-numeric counts, then clamp to [1, 20]."""
    if value is None or isinstance(value, bool):
        return DEFAULT_QUESTION_COUNT
    try:
        count = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_QUESTION_COUNT
    if count == 0:
        return DEFAULT_QUESTION_COUNT
    return max(MIN_QUESTIONS, min(MAX_QUESTIONS, count))


def _require(value: str | None, name: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{name} is required for this mode.")
    return text


def build_prompt(
    mode: str,
    source_text: str | None = None,
    topic: str | None = None,
    question_count=None,
) -> Prompt:
    if mode == SUMMARY:
        note = _require(source_text, "Note text")
        return Prompt(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=(
                "Summarize the following student's study note into 3-7 concise bullet points, "
                "aimed at a student reviewing for an exam. Focus on key concepts, definitions "
                "and important relationships. Use clear, simple language and start each "
                "bullet with \"- \".\n\n"
                f"NOTE:\n{note}"
            ),
        )
    if mode == NOTE_QUIZ:
        note = _require(source_text, "Note text")
        count = normalize_question_count(question_count)
        return Prompt(
            system_prompt=QUIZ_SYSTEM_PROMPT,
            user_prompt=(
                f"Create exactly {count} multiple-choice questions based ONLY on the "
                "student's note below. Do not use outside knowledge.\n\n"
                f"{QUIZ_RULES}\n\nRequired shape:\n{QUIZ_SCHEMA}\n\n"
                f"NOTE:\n{note}"
            ),
        )
    if mode == TOPIC_QUIZ:
        subject = _require(topic, "Topic")
        count = normalize_question_count(question_count)
        return Prompt(
            system_prompt=QUIZ_SYSTEM_PROMPT,
            user_prompt=(
                f"Create exactly {count} medium-difficulty, concept-focused multiple-choice "
                f"questions to test a student on the topic: \"{subject}\".\n\n"
                f"{QUIZ_RULES}\n\nRequired shape:\n{QUIZ_SCHEMA}"
            ),
        )
    if mode == NOTE_QA:
        note = _require(source_text, "Note text")
        count = normalize_question_count(question_count if question_count else DEFAULT_QA_COUNT)
        return Prompt(
            system_prompt=QUIZ_SYSTEM_PROMPT,
            user_prompt=(
                f"Create {count} short question and answer pairs based ONLY on this study note. "
                "Output ONLY a JSON array, with no preamble or explanation.\n\n"
                f"Required shape:\n{QA_SCHEMA}\n\n"
                f"NOTE:\n{note}"
            ),
        )
    raise InvalidModeError(mode)
