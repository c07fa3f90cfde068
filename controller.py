from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

from answers import (
    REQUIRED_GROUPS,
    SERVICE_KEYS,
    AnswerSet,
    field_category,
    missing_required,
    parse_rank,
    serialize,
)
from catalog import COPY, DEFAULT_LANGUAGE
from errors import (
    AnswerSetFrozen,
    PersistenceFailed,
    SubmissionError,
    SubmissionInProgress,
    UnknownFieldError,
    ValidationError,
)
from gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    EDITING = "editing"
    PERSISTING = "persisting"
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class SetScalar:
    field: str
    value: str


@dataclass(frozen=True)
class ToggleMember:
    field: str
    value: str
    present: bool


@dataclass(frozen=True)
class SetRank:
    service: str
    rank: int | str | None


Edit = Union[SetScalar, ToggleMember, SetRank]


class QuestionnaireController:
    """Owns one in-progress answer set from the empty form to a stored submission."""

    def __init__(self, gateway: PersistenceGateway, language: str = DEFAULT_LANGUAGE):
        self._gateway = gateway
        self.language = language
        self._answers = AnswerSet()
        self.state = SessionState.EDITING

    @property
    def answers(self) -> AnswerSet:
        return self._answers.copy()

    def apply(self, edit: Edit) -> None:
        self._ensure_editable()
        if isinstance(edit, SetScalar):
            self._require_category(edit.field, "scalar")
            setattr(self._answers, edit.field, edit.value)
        elif isinstance(edit, ToggleMember):
            self._require_category(edit.field, "set")
            members = getattr(self._answers, edit.field)
            if edit.present:
                members.add(edit.value)
            else:
                members.discard(edit.value)
        elif isinstance(edit, SetRank):
            if edit.service not in SERVICE_KEYS:
                raise UnknownFieldError(f"Unknown service: {edit.service!r}")
            rank = parse_rank(edit.rank)
            if rank is None:
                self._answers.services_needed.pop(edit.service, None)
            else:
                self._answers.services_needed[edit.service] = rank
        else:
            raise TypeError(f"Unsupported edit: {edit!r}")

    def set_field(self, name: str, value: str) -> None:
        self.apply(SetScalar(name, value))

    def toggle_set_member(self, name: str, value: str, present: bool) -> None:
        self.apply(ToggleMember(name, value, present))

    def set_rank(self, service_key: str, rank: int | str | None) -> None:
        self.apply(SetRank(service_key, rank))

    def validate(self) -> str | None:
        error = self._validation_error()
        return error.render(self.language) if error else None

    def submit(self) -> AnswerSet:
        """Validate, store and freeze the answer set.

        On any failure the controller stays editable with the answers intact.
        """
        self._ensure_editable()
        error = self._validation_error()
        if error:
            logger.info("Questionnaire rejected by validation: %d required fields empty", len(error.missing))
            raise error

        record = serialize(self._answers)
        self.state = SessionState.PERSISTING
        try:
            self._gateway.insert(record)
        except SubmissionError:
            self.state = SessionState.EDITING
            logger.warning("Questionnaire could not be stored", exc_info=True)
            raise
        except Exception as exc:
            self.state = SessionState.EDITING
            logger.exception("Unexpected failure while storing questionnaire")
            raise PersistenceFailed(reason=f"{type(exc).__name__}: {exc}") from exc
        self.state = SessionState.SUBMITTED
        logger.info("Questionnaire stored (%d fields)", len(record))
        return self._answers.copy()

    def back(self) -> "QuestionnaireController":
        return QuestionnaireController(self._gateway, language=self.language)

    def _validation_error(self) -> ValidationError | None:
        missing = missing_required(self._answers)
        if not missing:
            return None
        for message_key, group in REQUIRED_GROUPS:
            if any(name in missing for name in group):
                return ValidationError(COPY["errors"][message_key], missing=missing)
        return ValidationError(missing=missing)

    def _ensure_editable(self) -> None:
        if self.state is SessionState.PERSISTING:
            raise SubmissionInProgress()
        if self.state is SessionState.SUBMITTED:
            raise AnswerSetFrozen()

    @staticmethod
    def _require_category(name: str, expected: str) -> None:
        category = field_category(name)
        if category != expected:
            raise UnknownFieldError(f"Field {name!r} is a {category} field, not {expected}")
