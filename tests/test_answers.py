import json

import pytest

from answers import (
    REQUIRED_FIELDS,
    AnswerSet,
    deserialize,
    field_category,
    missing_required,
    parse_rank,
    serialize,
)
from errors import RecordFormatError, UnknownFieldError


def test_empty_answer_set_serializes_to_strings_only():
    record = serialize(AnswerSet())

    assert all(isinstance(value, str) for value in record.values())
    assert record["no_visit_reasons"] == "[]"
    assert record["visit_hours"] == "[]"
    assert record["services_needed"] == "{}"
    assert record["feedback"] == ""


def test_nested_fields_use_catalog_order_and_string_ranks(complete_answers):
    record = serialize(complete_answers)

    assert json.loads(record["no_visit_reasons"]) == ["long-waiting", "cost"]
    assert json.loads(record["visit_hours"]) == ["evening", "weekend"]
    assert json.loads(record["services_needed"]) == {"diagnostic": "1", "cghs-support": "2"}
    assert record["name"] == "Asha Verma"


def test_serialized_set_and_mapping_fields_round_trip(complete_answers):
    restored = deserialize(serialize(complete_answers))

    assert restored.no_visit_reasons == complete_answers.no_visit_reasons
    assert restored.visit_hours == complete_answers.visit_hours
    assert restored.services_needed == complete_answers.services_needed
    assert restored == complete_answers


def test_hindi_text_is_kept_readable():
    record = serialize(AnswerSet(feedback="बहुत अच्छा", visit_hours={"पता नहीं"}))

    assert record["feedback"] == "बहुत अच्छा"
    assert "पता नहीं" in record["visit_hours"]


def test_deserialize_ignores_foreign_keys_and_missing_fields():
    answers = deserialize({"id": 17, "created_at": "2025-01-01", "lang": "en", "name": "Ravi"})

    assert answers.name == "Ravi"
    assert answers.services_needed == {}
    assert answers.visit_hours == set()


def test_deserialize_drops_legacy_empty_ranks():
    answers = deserialize({"services_needed": json.dumps({"daycare": "", "general-opd": "3"})})

    assert answers.services_needed == {"general-opd": 3}


@pytest.mark.parametrize(
    "record",
    [
        {"visit_hours": "not json"},
        {"visit_hours": json.dumps({"morning": True})},
        {"services_needed": json.dumps(["diagnostic"])},
        {"services_needed": json.dumps({"diagnostic": "first"})},
    ],
)
def test_deserialize_rejects_malformed_records(record):
    with pytest.raises(RecordFormatError):
        deserialize(record)


def test_missing_required_lists_blank_and_whitespace_fields(personal_info):
    answers = AnswerSet(**{**personal_info, "address": "   ", "blood_group": ""})

    assert missing_required(answers) == ["address", "blood_group"]
    assert missing_required(AnswerSet()) == list(REQUIRED_FIELDS)


def test_area_is_not_required(personal_info):
    assert missing_required(AnswerSet(**personal_info)) == []


def test_field_categories():
    assert field_category("name") == "scalar"
    assert field_category("visit_hours") == "set"
    assert field_category("services_needed") == "ranking"
    with pytest.raises(UnknownFieldError):
        field_category("favourite_colour")


def test_parse_rank():
    assert parse_rank("") is None
    assert parse_rank(None) is None
    assert parse_rank("2") == 2
    with pytest.raises(ValueError):
        parse_rank("4")
