"""Quiz session state machine and grading."""
import enum
import logging
from datetime import datetime

from study_journal.errors import IncompleteAnswersError, SessionStateError, ValidationError
from study_journal.models import QuizAttemptRecord, QuizQuestion

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    BUILDING = "building"
    ACTIVE = "active"
    SUBMITTED = "submitted"


def calc_percentage(correct: int, total: int) -> int:
    """round(100 * correct / total), halves rounded up, in integer arithmetic."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


class QuizSession:
    """One quiz from generation to submission.

    BUILDING while the questions are being generated, ACTIVE once they are
    loaded, SUBMITTED after grading. SUBMITTED is terminal; retaking a quiz
    means generating a new session.
    """

    def __init__(self, topic: str):
        self.topic = topic
        self.questions: list[QuizQuestion] = []
        self.selected_answers: dict[int, int | None] = {}
        self.started_at: datetime | None = None
        self.state = SessionState.BUILDING
        self.result: QuizAttemptRecord | None = None

    @classmethod
    def start(cls, topic: str, questions: list[QuizQuestion]) -> "QuizSession":
        session = cls(topic)
        session.load(questions)
        return session

    def _require_state(self, state: SessionState, action: str) -> None:
        if self.state is not state:
            raise SessionStateError(f"Cannot {action} a quiz that is {self.state.value}.")

    def load(self, questions: list[QuizQuestion], now: datetime | None = None) -> None:
        self._require_state(SessionState.BUILDING, "load questions into")
        if not questions:
            raise ValidationError("A quiz needs at least one question.")
        self.questions = list(questions)
        self.selected_answers = {i: None for i in range(len(self.questions))}
        self.started_at = now or datetime.now()
        self.state = SessionState.ACTIVE

    def select_option(self, question_index: int, option_index: int) -> None:
        self._require_state(SessionState.ACTIVE, "answer")
        if not 0 <= question_index < len(self.questions):
            raise ValidationError(f"No question at index {question_index}.")
        if not 0 <= option_index < len(self.questions[question_index].options):
            raise ValidationError(f"No option at index {option_index}.")
        self.selected_answers[question_index] = option_index

    @property
    def unanswered(self) -> list[int]:
        return [i for i, choice in self.selected_answers.items() if choice is None]

    def submit(self, now: datetime | None = None, record_id: int | None = None) -> QuizAttemptRecord:
        self._require_state(SessionState.ACTIVE, "submit")
        missing = self.unanswered
        if missing:
            raise IncompleteAnswersError(missing)
        now = now or datetime.now()
        correct = sum(
            1 for i, q in enumerate(self.questions)
            if self.selected_answers[i] == q.correct_option_index
        )
        total = len(self.questions)
        self.result = QuizAttemptRecord(
            id=record_id if record_id is not None else int(now.timestamp() * 1000),
            topic=self.topic,
            correct_count=correct,
            total_count=total,
            percentage=calc_percentage(correct, total),
            completed_at=now.isoformat(),
        )
        self.state = SessionState.SUBMITTED
        logger.debug("Quiz on %r graded %d/%d", self.topic, correct, total)
        return self.result

    def question_results(self) -> list[dict]:
        """Per-question outcome for display after grading."""
        self._require_state(SessionState.SUBMITTED, "review")
        return [
            {
                "question": q,
                "selected": self.selected_answers[i],
                "correct": q.correct_option_index,
                "is_correct": self.selected_answers[i] == q.correct_option_index,
            }
            for i, q in enumerate(self.questions)
        ]
