from __future__ import annotations

import pytest

from survey.config import SurveyConfig
from survey.records import RecordStore

TRUST_ONLY = SurveyConfig(question_groups={"Trust": ("Q3_num",)}, num_columns=("Q3_num",))


@pytest.fixture
def welder_store() -> RecordStore:
    return RecordStore.from_records(
        [
            {"Role": "Welder", "Q3_num": "80"},
            {"Role": "Welder", "Q3_num": "90"},
            {"Role": "Fitter", "Q3_num": "70"},
        ]
    )


@pytest.fixture
def trust_config() -> SurveyConfig:
    return TRUST_ONLY


@pytest.fixture
def survey_rows():
    return [
        {"Role": "Welder", "Location": "Arizona - Chandler Shop", "Q3_num": "80", "Q4_num": "60", "Q9_cat": "Pay", "Q9": "Good pay"},
        {"Role": "Welder", "Location": "Pennsylvania - York Shop", "Q3_num": "90", "Q4_num": "", "Q9_cat": "Culture", "Q9": "Nice people"},
        {"Role": "Fitter", "Location": "Arizona - Chandler Shop", "Q3_num": "70", "Q4_num": "50", "Q9_cat": "Pay", "Q9": "Fair"},
        {"Role": "Painter", "Location": "Pennsylvania - York Shop", "Q3_num": "n/a", "Q4_num": "40", "Q9_cat": "  ", "Q9": ""},
        {"Role": "Fitter", "Location": "Pennsylvania - York Shop", "Q3_num": "100", "Q4_num": "70", "Q9_cat": "Physical Environment", "Q9": "Hot"},
    ]


@pytest.fixture
def survey_store(survey_rows) -> RecordStore:
    return RecordStore.from_records(survey_rows, source="fixture")
