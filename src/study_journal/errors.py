"""Exception hierarchy for the study journal.

Every error carries a human-readable ``message`` and the HTTP ``status_code``
the proxy endpoint answers with. Only the CLI loop and the Flask handlers turn
these into user-facing output.
"""
from typing import Any, Optional


class StudyJournalError(Exception):
    """Base class for all study journal errors."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ConfigurationError(StudyJournalError):
    """The process is missing required configuration. Not retried."""


class MissingCredentialError(ConfigurationError):
    def __init__(self, message: str = "Server configuration error: OPENAI_API_KEY is not set."):
        super().__init__(message)


class ValidationError(StudyJournalError):
    """Bad caller input."""

    status_code = 400


class InvalidModeError(ValidationError):
    def __init__(self, mode: Any):
        self.mode = mode
        super().__init__(f"Invalid mode: {mode!r}")


class EntryNotFoundError(StudyJournalError):
    status_code = 404

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Journal entry {entry_id} not found.")


class UpstreamError(StudyJournalError):
    """The completion service answered with a non-success status."""

    def __init__(self, status_code: int, body: Any, message: str = "Failed to contact AI service."):
        self.body = body
        super().__init__(message, status_code=status_code)


class TransportError(StudyJournalError):
    """The completion service could not be reached."""


class ChatTimeoutError(StudyJournalError):
    """The completion service did not answer within the configured timeout."""


class QuizParseError(StudyJournalError):
    """Model output did not match the expected quiz shape."""

    status_code = 502

    def __init__(self, reason: str, raw_text: str):
        self.reason = reason
        self.raw_text = raw_text
        super().__init__(f"Could not parse quiz: {reason}")


class IncompleteAnswersError(StudyJournalError):
    status_code = 400

    def __init__(self, unanswered: list[int]):
        self.unanswered = unanswered
        numbers = ", ".join(str(i + 1) for i in unanswered)
        super().__init__(f"Please answer all questions before submitting (missing: {numbers}).")


class SessionStateError(StudyJournalError):
    """An operation was attempted in the wrong quiz session state."""

    status_code = 409
