"""Answer set model and its flat-record encoding.

The datastore table has one text column per field. The two multi-select
fields are stored as JSON arrays and the service ranking as a JSON object of
``{service: "rank"}``, which is the shape existing rows already use.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from typing import Dict, List, Mapping, Set, Tuple

from catalog import SERVICE_OPTIONS, ordered_values
from errors import RecordFormatError, UnknownFieldError

REQUIRED_FIELDS: Tuple[str, ...] = (
    "name",
    "age",
    "gender",
    "contact",
    "address",
    "emergency_contact",
    "blood_group",
)

# Validation reports the first group with a gap, in this order.
REQUIRED_GROUPS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("missing_personal", ("name", "age", "gender", "contact")),
    ("missing_address", ("address", "emergency_contact", "blood_group")),
)

SET_FIELDS: Tuple[str, ...] = ("no_visit_reasons", "visit_hours")
RANK_FIELD = "services_needed"
RANKS: Tuple[int, ...] = (1, 2, 3)
SERVICE_KEYS: Tuple[str, ...] = tuple(option.value for option in SERVICE_OPTIONS)


@dataclass
class AnswerSet:
    name: str = ""
    age: str = ""
    gender: str = ""
    contact: str = ""
    address: str = ""
    emergency_contact: str = ""
    blood_group: str = ""
    area: str = ""
    visited_doctor: str = ""
    no_visit_reasons: Set[str] = field(default_factory=set)
    other_reason: str = ""
    services_needed: Dict[str, int] = field(default_factory=dict)
    use_wellness_centre: str = ""
    cghs_importance: str = ""
    wrong_treatment: str = ""
    wrong_treatment_details: str = ""
    blood_test_cost: str = ""
    generic_medicines: str = ""
    visit_hours: Set[str] = field(default_factory=set)
    health_sessions: str = ""
    health_topics: str = ""
    feedback: str = ""
    follow_up: str = ""
    phone: str = ""
    whatsapp: str = ""
    satisfaction: str = ""

    def copy(self) -> "AnswerSet":
        return replace(
            self,
            no_visit_reasons=set(self.no_visit_reasons),
            visit_hours=set(self.visit_hours),
            services_needed=dict(self.services_needed),
        )


FIELD_NAMES: Tuple[str, ...] = tuple(f.name for f in fields(AnswerSet))
SCALAR_FIELDS: Tuple[str, ...] = tuple(
    name for name in FIELD_NAMES if name not in SET_FIELDS and name != RANK_FIELD
)


def field_category(name: str) -> str:
    if name in SET_FIELDS:
        return "set"
    if name == RANK_FIELD:
        return "ranking"
    if name in SCALAR_FIELDS:
        return "scalar"
    raise UnknownFieldError(f"Unknown questionnaire field: {name!r}")


def parse_rank(rank: int | str | None) -> int | None:
    """Normalise a rank from a form or a stored row; ``None`` means unranked."""
    if rank is None or rank == "":
        return None
    try:
        value = int(rank)
    except (TypeError, ValueError):
        raise ValueError(f"Rank must be one of {RANKS}, got {rank!r}") from None
    if value not in RANKS:
        raise ValueError(f"Rank must be one of {RANKS}, got {rank!r}")
    return value


def missing_required(answers: AnswerSet) -> List[str]:
    return [name for name in REQUIRED_FIELDS if not getattr(answers, name).strip()]


def serialize(answers: AnswerSet) -> Dict[str, str]:
    record: Dict[str, str] = {}
    for name in FIELD_NAMES:
        value = getattr(answers, name)
        if name in SET_FIELDS:
            record[name] = json.dumps(ordered_values(name, value), ensure_ascii=False)
        elif name == RANK_FIELD:
            ranked = {service: str(value[service]) for service in ordered_values(name, value)}
            record[name] = json.dumps(ranked, ensure_ascii=False)
        else:
            record[name] = value if value is not None else ""
    return record


def _load_json(name: str, raw: str, expected: type):
    if not raw:
        return expected()
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RecordFormatError(f"Field {name!r} is not valid JSON: {exc}") from exc
    if not isinstance(value, expected):
        raise RecordFormatError(f"Field {name!r} should hold a JSON {expected.__name__}")
    return value


def deserialize(record: Mapping[str, object]) -> AnswerSet:
    """Rebuild an answer set from a flat record.

    Keys that are not questionnaire fields (row ids, timestamps, form
    controls) are ignored. Ranking entries stored with an empty rank are
    treated as unranked.
    """
    values: Dict[str, object] = {}
    for name in FIELD_NAMES:
        raw = record.get(name)
        raw = "" if raw is None else str(raw)
        if name in SET_FIELDS:
            members = _load_json(name, raw, list)
            values[name] = {str(member) for member in members}
        elif name == RANK_FIELD:
            services: Dict[str, int] = {}
            for service, rank in _load_json(name, raw, dict).items():
                try:
                    parsed = parse_rank(rank)
                except ValueError as exc:
                    raise RecordFormatError(f"Service {service!r}: {exc}") from exc
                if parsed is not None:
                    services[str(service)] = parsed
            values[name] = services
        else:
            values[name] = raw
    return AnswerSet(**values)
