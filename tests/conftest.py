from datetime import date

import pytest

from answers import AnswerSet
from app import create_app
from errors import PersistenceRejected
from settings import Settings

FIXED_DAY = date(2025, 3, 14)


class RecordingGateway:
    def __init__(self, error=None):
        self.records = []
        self.error = error

    def insert(self, record):
        self.records.append(dict(record))
        if self.error is not None:
            raise self.error


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def failing_gateway():
    return RecordingGateway(error=PersistenceRejected(reason="HTTP 500: boom"))


@pytest.fixture
def settings(tmp_path):
    return Settings(_env_file=None, PDF_FONT_DIR=tmp_path)


@pytest.fixture
def app(settings, gateway):
    flask_app = create_app(settings=settings, gateway=gateway, clock=lambda: FIXED_DAY)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def personal_info():
    return {
        "name": "Asha Verma",
        "age": "42",
        "gender": "female",
        "contact": "9876543210",
        "address": "Chhatarpur Enclave, New Delhi",
        "emergency_contact": "9123456780",
        "blood_group": "B+",
    }


@pytest.fixture
def complete_answers(personal_info):
    return AnswerSet(
        **personal_info,
        area="Chhatarpur",
        visited_doctor="no",
        no_visit_reasons={"cost", "long-waiting"},
        services_needed={"diagnostic": 1, "cghs-support": 2},
        use_wellness_centre="definitely",
        cghs_importance="4",
        wrong_treatment="yes-once-twice",
        wrong_treatment_details="Unneeded scans",
        blood_test_cost="300-600",
        generic_medicines="yes",
        visit_hours={"evening", "weekend"},
        health_sessions="yes",
        health_topics="Diabetes",
        feedback="Open earlier on Sundays",
        follow_up="whatsapp",
        whatsapp="9000000000",
        satisfaction="2",
    )
