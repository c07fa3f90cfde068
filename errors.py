from __future__ import annotations

from typing import Sequence

from catalog import COPY, DEFAULT_LANGUAGE, Text


class UnknownFieldError(ValueError):
    """Raised when an edit names a field that does not exist in its category."""


class RecordFormatError(ValueError):
    """Raised when a stored record cannot be turned back into an answer set."""


class SubmissionError(Exception):
    default_message: Text = COPY["errors"]["rejected"]

    def __init__(self, user_message: Text | None = None, reason: str | None = None):
        self.user_message = user_message or self.default_message
        self.reason = reason
        super().__init__(reason or self.user_message.en)

    def render(self, language: str = DEFAULT_LANGUAGE) -> str:
        return self.user_message.render(language)


class ValidationError(SubmissionError):
    default_message = COPY["errors"]["missing_personal"]

    def __init__(self, user_message: Text | None = None, missing: Sequence[str] = ()):
        self.missing = list(missing)
        super().__init__(user_message, reason=f"missing required fields: {', '.join(self.missing)}")


class SubmissionInProgress(SubmissionError):
    default_message = COPY["errors"]["in_progress"]


class AnswerSetFrozen(SubmissionError):
    default_message = COPY["errors"]["already_submitted"]


class PersistenceError(SubmissionError):
    pass


class PersistenceUnavailable(PersistenceError):
    default_message = COPY["errors"]["unreachable"]


class PersistenceRejected(PersistenceError):
    default_message = COPY["errors"]["rejected"]


class PersistenceFailed(PersistenceError):
    default_message = COPY["errors"]["unexpected"]
