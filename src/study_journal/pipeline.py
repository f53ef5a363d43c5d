"""Generation pipeline: prompt, completion, sanitize, parse."""
import logging
import re

from study_journal.errors import InvalidModeError
from study_journal.gateway import ChatGateway
from study_journal.models import QAPair
from study_journal.parser import LIST_OF_QA_PAIRS, parse_quiz, parse_quiz_response
from study_journal.prompts import NOTE_QA, NOTE_QUIZ, SUMMARY, TOPIC_QUIZ, build_prompt, normalize_question_count
from study_journal.quiz import QuizSession
from study_journal.sanitize import sanitize

logger = logging.getLogger(__name__)

BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")

SUMMARY_TEMPERATURE = 0.5


def generate_quiz(
    gateway: ChatGateway,
    mode: str,
    source_text: str | None = None,
    topic: str | None = None,
    question_count=None,
    label: str | None = None,
) -> QuizSession:
    """Build, request and parse a quiz; return an ACTIVE session.

    Raises the gateway errors or ``QuizParseError``. Nothing is persisted
    here; only a submitted session is written to history.
    """
    if mode not in (NOTE_QUIZ, TOPIC_QUIZ):
        raise InvalidModeError(mode)
    prompt = build_prompt(mode, source_text=source_text, topic=topic, question_count=question_count)
    # A short note may support fewer questions than asked for; a topic may not.
    expected = normalize_question_count(question_count) if mode == TOPIC_QUIZ else None
    session = QuizSession(label or (topic.strip() if mode == TOPIC_QUIZ else "Note quiz"))
    raw = gateway.complete(prompt)
    questions = parse_quiz(sanitize(raw), expected_count=expected)
    session.load(questions)
    logger.info("Generated %d-question %s on %r", len(questions), mode, session.topic)
    return session


def split_bullets(text: str) -> list[str]:
    lines = (BULLET_RE.sub("", line).strip() for line in text.splitlines())
    return [line for line in lines if line]


def generate_summary(gateway: ChatGateway, source_text: str) -> list[str]:
    """Summarize a note into bullet points."""
    prompt = build_prompt(SUMMARY, source_text=source_text)
    return split_bullets(sanitize(gateway.complete(prompt, temperature=SUMMARY_TEMPERATURE)))


def generate_qa_pairs(gateway: ChatGateway, source_text: str, count=None) -> list[QAPair]:
    """Short question and answer pairs for reviewing a note. Nothing is graded."""
    prompt = build_prompt(NOTE_QA, source_text=source_text, question_count=count)
    return parse_quiz_response(sanitize(gateway.complete(prompt)), LIST_OF_QA_PAIRS)
