"""Parse sanitized model output into quiz questions or Q&A pairs.

Two wire shapes are accepted for either kind of content: a bare JSON array,
or an object whose ``questions`` field holds that array. Anything else, or a
single malformed item, fails the whole parse with ``QuizParseError``; a
partial quiz is never returned.
"""
import json
import re

from study_journal.errors import QuizParseError, ValidationError
from study_journal.models import OPTION_COUNT, QAPair, QuizQuestion

LIST_OF_QUESTIONS = "list-of-questions"
LIST_OF_QA_PAIRS = "list-of-qa-pairs"

INDEX_FIELDS = ("correctOptionIndex", "correctAnswer")
ANSWER_LETTER_RE = re.compile(r"^\s*([A-Da-d])\s*[.)]?\s*$")
OPTION_LABEL_RE = re.compile(r"^\s*([A-D])\s*[.)]\s+")


def _load_items(text: str) -> list:
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise QuizParseError(f"response is not valid JSON ({e})", text) from None
    if isinstance(data, dict) and "questions" in data:
        data = data["questions"]
    if not isinstance(data, list):
        raise QuizParseError("expected a JSON array or an object with a 'questions' array", text)
    if not data:
        raise QuizParseError("no questions returned", text)
    return data


def _text_field(item: dict, name: str) -> str | None:
    value = item.get(name)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _strip_option_labels(options: list[str]) -> list[str]:
    """Drop "A. ", "B. " ... prefixes, but only when all four carry them in order."""
    labels = [OPTION_LABEL_RE.match(o) for o in options]
    if all(m and m.group(1) == "ABCD"[i] for i, m in enumerate(labels)):
        return [o[m.end():].strip() for o, m in zip(options, labels)]
    return options


def _resolve_index(item: dict) -> int | None:
    for name in INDEX_FIELDS:
        if name in item:
            value = item[name]
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            return None
    answer = item.get("answer")
    if isinstance(answer, str):
        match = ANSWER_LETTER_RE.match(answer)
        if match:
            return "ABCD".index(match.group(1).upper())
    return None


def _to_question(item, position: int, raw_text: str) -> QuizQuestion:
    where = f"question {position + 1}"
    if not isinstance(item, dict):
        raise QuizParseError(f"{where} is not an object", raw_text)
    text = _text_field(item, "question")
    if text is None:
        raise QuizParseError(f"{where} has no question text", raw_text)
    options = item.get("options")
    if not isinstance(options, list) or len(options) != OPTION_COUNT:
        raise QuizParseError(f"{where} must have exactly {OPTION_COUNT} options", raw_text)
    if not all(isinstance(o, str) and o.strip() for o in options):
        raise QuizParseError(f"{where} has an empty or non-text option", raw_text)
    index = _resolve_index(item)
    if index is None:
        raise QuizParseError(f"{where} has no usable correct answer", raw_text)
    try:
        return QuizQuestion(
            question_text=text,
            options=tuple(o.strip() for o in _strip_option_labels(options)),
            correct_option_index=index,
        )
    except ValidationError as e:
        raise QuizParseError(f"{where}: {e.message}", raw_text) from None


def parse_quiz(text: str, expected_count: int | None = None) -> list[QuizQuestion]:
    items = _load_items(text)
    questions = [_to_question(item, i, text) for i, item in enumerate(items)]
    if expected_count is not None and len(questions) != expected_count:
        raise QuizParseError(
            f"expected {expected_count} questions, got {len(questions)}", text
        )
    return questions


def parse_qa_pairs(text: str) -> list[QAPair]:
    items = _load_items(text)
    pairs = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise QuizParseError(f"item {i + 1} is not an object", text)
        question = _text_field(item, "question")
        answer = _text_field(item, "answer")
        if question is None or answer is None:
            raise QuizParseError(f"item {i + 1} needs both a question and an answer", text)
        pairs.append(QAPair(question=question, answer=answer))
    return pairs


def parse_quiz_response(text: str, shape: str = LIST_OF_QUESTIONS, expected_count: int | None = None):
    if shape == LIST_OF_QUESTIONS:
        return parse_quiz(text, expected_count=expected_count)
    if shape == LIST_OF_QA_PAIRS:
        return parse_qa_pairs(text)
    raise ValidationError(f"Unknown response shape: {shape!r}")
