import pytest

from controller import QuestionnaireController, SessionState, SetRank, SetScalar, ToggleMember
from errors import (
    AnswerSetFrozen,
    PersistenceFailed,
    PersistenceRejected,
    PersistenceUnavailable,
    SubmissionInProgress,
    UnknownFieldError,
    ValidationError,
)
from gateway import UnconfiguredGateway


def fill_personal(controller, personal_info):
    for name, value in personal_info.items():
        controller.set_field(name, value)


def test_new_controller_starts_editing_with_empty_answers(gateway):
    controller = QuestionnaireController(gateway)

    assert controller.state is SessionState.EDITING
    assert controller.answers.name == ""
    assert controller.answers.visit_hours == set()


def test_toggle_set_member_add_is_idempotent(gateway):
    controller = QuestionnaireController(gateway)
    controller.toggle_set_member("visit_hours", "morning", True)
    controller.toggle_set_member("visit_hours", "morning", True)

    assert controller.answers.visit_hours == {"morning"}


def test_toggle_set_member_remove_absent_is_noop(gateway):
    controller = QuestionnaireController(gateway)
    controller.toggle_set_member("no_visit_reasons", "cost", True)
    controller.toggle_set_member("no_visit_reasons", "long-waiting", False)

    assert controller.answers.no_visit_reasons == {"cost"}

    controller.toggle_set_member("no_visit_reasons", "cost", False)
    assert controller.answers.no_visit_reasons == set()


def test_set_rank_writes_and_clears_entries(gateway):
    controller = QuestionnaireController(gateway)
    controller.set_rank("diagnostic", "1")
    controller.set_rank("daycare", 2)
    controller.set_rank("daycare", "")

    assert controller.answers.services_needed == {"diagnostic": 1}


def test_duplicate_ranks_are_accepted(gateway):
    controller = QuestionnaireController(gateway)
    controller.set_rank("diagnostic", "1")
    controller.set_rank("general-opd", "1")

    assert controller.answers.services_needed == {"diagnostic": 1, "general-opd": 1}


def test_set_rank_rejects_unknown_service_and_rank(gateway):
    controller = QuestionnaireController(gateway)
    with pytest.raises(UnknownFieldError):
        controller.set_rank("dentistry", "1")
    with pytest.raises(ValueError):
        controller.set_rank("diagnostic", "7")


def test_edits_are_checked_against_field_category(gateway):
    controller = QuestionnaireController(gateway)
    with pytest.raises(UnknownFieldError):
        controller.set_field("visit_hours", "morning")
    with pytest.raises(UnknownFieldError):
        controller.toggle_set_member("gender", "male", True)
    with pytest.raises(UnknownFieldError):
        controller.apply(SetScalar("favourite_colour", "blue"))


def test_apply_dispatches_tagged_edits(gateway):
    controller = QuestionnaireController(gateway)
    controller.apply(SetScalar("visited_doctor", "yes"))
    controller.apply(ToggleMember("visit_hours", "weekend", True))
    controller.apply(SetRank("cghs-support", 3))

    answers = controller.answers
    assert answers.visited_doctor == "yes"
    assert answers.visit_hours == {"weekend"}
    assert answers.services_needed == {"cghs-support": 3}


def test_answers_property_returns_a_copy(gateway):
    controller = QuestionnaireController(gateway)
    snapshot = controller.answers
    snapshot.visit_hours.add("morning")

    assert controller.answers.visit_hours == set()


@pytest.mark.parametrize(
    "blank_field",
    ["name", "age", "gender", "contact", "address", "emergency_contact", "blood_group"],
)
def test_submit_with_missing_required_field_never_calls_gateway(gateway, personal_info, blank_field):
    controller = QuestionnaireController(gateway)
    fill_personal(controller, {**personal_info, blank_field: ""})

    assert controller.validate() is not None
    with pytest.raises(ValidationError) as excinfo:
        controller.submit()

    assert excinfo.value.missing == [blank_field]
    assert gateway.records == []
    assert controller.state is SessionState.EDITING


def test_validate_reports_personal_group_before_address_group(gateway):
    controller = QuestionnaireController(gateway, language="en")

    assert controller.validate() == "Please fill all mandatory personal information fields."


def test_validate_reports_address_group(gateway, personal_info):
    controller = QuestionnaireController(gateway, language="en")
    fill_personal(controller, {**personal_info, "emergency_contact": ""})

    assert controller.validate() == (
        "Please fill all mandatory address, emergency contact, and blood group fields."
    )


def test_validate_passes_with_personal_fields(gateway, personal_info):
    controller = QuestionnaireController(gateway)
    fill_personal(controller, personal_info)

    assert controller.validate() is None


def test_successful_submit_stores_flat_record_and_freezes(gateway, personal_info):
    controller = QuestionnaireController(gateway)
    fill_personal(controller, personal_info)
    controller.toggle_set_member("visit_hours", "morning", True)
    controller.set_rank("diagnostic", "1")

    answers = controller.submit()

    assert controller.state is SessionState.SUBMITTED
    assert answers.name == personal_info["name"]
    assert len(gateway.records) == 1
    record = gateway.records[0]
    assert record["visit_hours"] == '["morning"]'
    assert record["services_needed"] == '{"diagnostic": "1"}'
    assert all(isinstance(value, str) for value in record.values())

    with pytest.raises(AnswerSetFrozen):
        controller.set_field("name", "Someone else")
    with pytest.raises(AnswerSetFrozen):
        controller.submit()
    assert len(gateway.records) == 1


def test_gateway_rejection_keeps_answers_editable(failing_gateway, personal_info):
    controller = QuestionnaireController(failing_gateway)
    fill_personal(controller, personal_info)
    controller.set_field("feedback", "More specialists")

    with pytest.raises(PersistenceRejected) as excinfo:
        controller.submit()

    assert controller.state is SessionState.EDITING
    assert controller.answers.feedback == "More specialists"
    assert excinfo.value.render("en") == "Failed to save response. Please try again."

    controller.set_field("feedback", "More specialists please")
    assert controller.answers.feedback == "More specialists please"


def test_unconfigured_gateway_reports_distinct_message(personal_info):
    controller = QuestionnaireController(UnconfiguredGateway())
    fill_personal(controller, personal_info)

    with pytest.raises(PersistenceUnavailable) as excinfo:
        controller.submit()

    assert "not configured" in excinfo.value.render("en")
    assert controller.state is SessionState.EDITING


def test_unexpected_gateway_failure_becomes_persistence_failed(personal_info):
    class BrokenGateway:
        def insert(self, record):
            raise RuntimeError("driver bug")

    controller = QuestionnaireController(BrokenGateway())
    fill_personal(controller, personal_info)

    with pytest.raises(PersistenceFailed) as excinfo:
        controller.submit()

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert "driver bug" in excinfo.value.reason
    assert excinfo.value.render("en") == "Unexpected error. Please try again."
    assert controller.state is SessionState.EDITING
    assert controller.answers.name == personal_info["name"]


def test_resubmission_while_persisting_is_refused(personal_info):
    class ReentrantGateway:
        def __init__(self):
            self.controller = None
            self.calls = 0
            self.nested_error = None

        def insert(self, record):
            self.calls += 1
            try:
                self.controller.submit()
            except SubmissionInProgress as exc:
                self.nested_error = exc

    gateway = ReentrantGateway()
    controller = QuestionnaireController(gateway)
    gateway.controller = controller
    fill_personal(controller, personal_info)

    controller.submit()

    assert gateway.calls == 1
    assert isinstance(gateway.nested_error, SubmissionInProgress)
    assert controller.state is SessionState.SUBMITTED


def test_back_starts_a_fresh_answer_set(gateway, personal_info):
    controller = QuestionnaireController(gateway, language="hi")
    fill_personal(controller, personal_info)
    controller.submit()

    fresh = controller.back()

    assert fresh is not controller
    assert fresh.state is SessionState.EDITING
    assert fresh.answers.name == ""
    assert fresh.language == "hi"
    assert controller.state is SessionState.SUBMITTED
