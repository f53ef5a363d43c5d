"""Data classes for the study journal domain model."""
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from study_journal.errors import ValidationError

OPTION_COUNT = 4


@dataclass
class JournalEntry:
    id: int
    subject: str
    duration_minutes: int
    notes: str
    created_at: str

    @classmethod
    def from_row(cls, row) -> "JournalEntry":
        return cls(
            id=row["id"],
            subject=row["subject"],
            duration_minutes=row["duration_minutes"],
            notes=row["notes"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subject": self.subject,
            "durationMinutes": self.duration_minutes,
            "notes": self.notes,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class QuizQuestion:
    question_text: str
    options: tuple[str, ...]
    correct_option_index: int

    def __post_init__(self):
        if len(self.options) != OPTION_COUNT:
            raise ValidationError(f"A question needs exactly {OPTION_COUNT} options, got {len(self.options)}.")
        if not 0 <= self.correct_option_index < OPTION_COUNT:
            raise ValidationError(f"Correct option index {self.correct_option_index} is out of range.")

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]


@dataclass(frozen=True)
class QAPair:
    question: str
    answer: str


@dataclass(frozen=True)
class QuizAttemptRecord:
    id: int
    topic: str
    correct_count: int
    total_count: int
    percentage: int
    completed_at: str

    @classmethod
    def from_row(cls, row) -> "QuizAttemptRecord":
        return cls(
            id=row["id"],
            topic=row["topic"],
            correct_count=row["correct_count"],
            total_count=row["total_count"],
            percentage=row["percentage"],
            completed_at=row["completed_at"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "topic": self.topic,
            "correctCount": self.correct_count,
            "totalCount": self.total_count,
            "percentage": self.percentage,
            "completedAt": self.completed_at,
        }


@dataclass(frozen=True)
class Badge:
    id: str
    display_name: str
    icon: str
    # (entries, attempts, today) -> unlocked
    condition: Callable[[list, list, Optional[date]], bool] = field(compare=False, repr=False)


@dataclass(frozen=True)
class Prompt:
    system_prompt: str
    user_prompt: str

    def to_messages(self) -> list[dict]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_prompt},
        ]
