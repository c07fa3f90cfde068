"""Read-only projection of a submitted answer set into a bilingual report.

Everything here is a pure function of the answers, the option catalog, the
display language and the clock; the clock is only used for the date line.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Tuple

from answers import AnswerSet
from catalog import (
    CATALOG,
    COPY,
    DEFAULT_LANGUAGE,
    NO_FEEDBACK,
    NO_FOLLOW_UP,
    NOT_ANSWERED,
    NOT_PROVIDED,
    NOT_SPECIFIED,
    PERSONAL_FIELDS,
    PHONE_LABEL,
    QUESTIONS,
    WHATSAPP_LABEL,
    Option,
    Question,
    Text,
    catalog_position,
    find_option,
    ordered_values,
)

Catalog = Mapping[str, Tuple[Option, ...]]

MULTI_SELECT_DELIMITER = ", "
RANKING_DELIMITER = "; "
RATING_SCALE = 5


@dataclass(frozen=True)
class ReportLine:
    label: str
    value: str


@dataclass(frozen=True)
class ReportBlock:
    number: int | None
    prompt: Tuple[str, ...]
    answer: str
    details: Tuple[ReportLine, ...] = ()

    @property
    def heading(self) -> str:
        first = self.prompt[0] if self.prompt else ""
        return f"{self.number}. {first}" if self.number is not None else first


@dataclass(frozen=True)
class Report:
    language: str
    title: Tuple[str, ...]
    date_label: str
    date: str
    answer_label: str
    personal_title: str
    personal: Tuple[ReportLine, ...]
    questions: Tuple[ReportBlock, ...]


def resolve_choice(field: str, value: str, language: str, catalog: Catalog = CATALOG) -> str:
    if not value:
        return NOT_ANSWERED.render(language)
    option = find_option(field, value, catalog)
    return option.label.render(language) if option else value


def resolve_choices(field: str, values: Iterable[str], language: str, catalog: Catalog = CATALOG) -> str:
    labels = [resolve_choice(field, value, language, catalog) for value in ordered_values(field, values, catalog)]
    return MULTI_SELECT_DELIMITER.join(labels) if labels else NOT_ANSWERED.render(language)


def resolve_ranking(ranks: Dict[str, int], language: str, catalog: Catalog = CATALOG) -> str:
    ranked = sorted(
        ranks.items(),
        key=lambda item: (int(item[1]), catalog_position("services_needed", item[0], catalog), item[0]),
    )
    entries = [
        f"{rank}. {resolve_choice('services_needed', service, language, catalog)}" for service, rank in ranked
    ]
    return RANKING_DELIMITER.join(entries) if entries else NOT_ANSWERED.render(language)


def resolve_rating(field: str, value: str, language: str, catalog: Catalog = CATALOG) -> str:
    if not value:
        return NOT_ANSWERED.render(language)
    if find_option(field, value, catalog) is None:
        return value
    return f"{value}/{RATING_SCALE}"


def resolve_text(value: str, language: str, sentinel: Text = NOT_PROVIDED) -> str:
    return value if value.strip() else sentinel.render(language)


def resolve_follow_up(answers: AnswerSet, language: str, catalog: Catalog = CATALOG) -> str:
    channel = answers.follow_up
    if channel == "phone":
        return f"{PHONE_LABEL.render(language)}: {resolve_text(answers.phone, language)}"
    if channel == "whatsapp":
        return f"{WHATSAPP_LABEL.render(language)}: {resolve_text(answers.whatsapp, language)}"
    if channel == "no":
        return NO_FOLLOW_UP.render(language)
    if not channel:
        return NOT_SPECIFIED.render(language)
    return resolve_choice("follow_up", channel, language, catalog)


def render_answer(question: Question, answers: AnswerSet, language: str, catalog: Catalog = CATALOG) -> str:
    value = getattr(answers, question.field)
    if question.kind == "single":
        return resolve_choice(question.field, value, language, catalog)
    if question.kind == "multi":
        return resolve_choices(question.field, value, language, catalog)
    if question.kind == "ranking":
        return resolve_ranking(value, language, catalog)
    if question.kind == "rating":
        return resolve_rating(question.field, value, language, catalog)
    if question.kind == "follow_up":
        return resolve_follow_up(answers, language, catalog)
    if question.field == "feedback":
        return resolve_text(value, language, NO_FEEDBACK)
    return resolve_text(value, language)


def render_block(question: Question, answers: AnswerSet, language: str, catalog: Catalog = CATALOG) -> ReportBlock:
    details: Tuple[ReportLine, ...] = ()
    if question.detail_field and question.detail_label:
        details = (
            ReportLine(
                label=question.detail_label.render(language),
                value=resolve_text(getattr(answers, question.detail_field), language),
            ),
        )
    return ReportBlock(
        number=question.number,
        prompt=question.prompt.lines(language),
        answer=render_answer(question, answers, language, catalog),
        details=details,
    )


def render_personal(answers: AnswerSet, language: str, catalog: Catalog = CATALOG) -> List[ReportLine]:
    lines: List[ReportLine] = []
    for field, label, input_type, _ in PERSONAL_FIELDS:
        value = getattr(answers, field)
        if input_type == "select" and value:
            rendered = resolve_choice(field, value, language, catalog)
        else:
            rendered = resolve_text(value, language)
        lines.append(ReportLine(label=label.render(language), value=rendered))
    return lines


def format_date(day: date) -> str:
    return day.strftime("%d/%m/%Y")


def render_report(
    answers: AnswerSet,
    catalog: Catalog = CATALOG,
    clock: Callable[[], date] = date.today,
    language: str = DEFAULT_LANGUAGE,
) -> Report:
    report_copy = COPY["report"]
    return Report(
        language=language,
        title=report_copy["title"].lines(language),
        date_label=report_copy["date"].render(language),
        date=format_date(clock()),
        answer_label=report_copy["answer"].render(language),
        personal_title=report_copy["personal_title"].render(language),
        personal=tuple(render_personal(answers, language, catalog)),
        questions=tuple(render_block(question, answers, language, catalog) for question in QUESTIONS),
    )
