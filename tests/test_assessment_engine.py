import sqlite3

import pytest

import assessment_engine
from assessment_engine import (
    ANONYMOUS_USER,
    get_history,
    get_local_results,
    parse_answers,
    run_assessment,
    to_response,
)
from models import count_rows

PRIYA_ID = 1

RF_ANSWERS = [{"questionId": "rf_chest_radiation", "value": 1.0, "label": "Yes"}]
SX_ANSWERS = [{"questionId": "sx_feel", "value": 0, "label": "No"}]


def test_parse_answers_accepts_camel_and_snake_case_ids():
    parsed = parse_answers(
        [
            {"questionId": "rf_age", "value": 1, "label": "Above 60"},
            {"question_id": "rf_diet", "value": 0.25},
        ]
    )

    assert parsed == [
        {"question_id": "rf_age", "value": 1.0, "label": "Above 60"},
        {"question_id": "rf_diet", "value": 0.25, "label": ""},
    ]


@pytest.mark.parametrize(
    "raw",
    [
        "not a list",
        [["rf_age", 1]],
        [{"value": 1}],
        [{"questionId": "rf_age", "value": "1"}],
        [{"questionId": "rf_age", "value": True}],
        [{"questionId": "rf_age", "value": 1.5}],
        [{"questionId": "rf_age", "value": -0.1}],
    ],
)
def test_parse_answers_rejects_bad_input(raw):
    with pytest.raises(ValueError):
        parse_answers(raw)


def test_assessment_is_saved_to_history():
    before = len(get_history(PRIYA_ID))

    result = run_assessment(PRIYA_ID, RF_ANSWERS, SX_ANSWERS)

    assert isinstance(result["id"], int)
    assert result["user_id"] == PRIYA_ID
    assert result["total_score"] == 40
    assert result["timestamp"]

    history = get_history(PRIYA_ID)
    assert len(history) == before + 1
    saved = next(item for item in history if item["id"] == result["id"])
    assert saved["answers"]["riskFactorAnswers"][0]["question_id"] == "rf_chest_radiation"
    assert saved["explanations"] == result["explanations"]


def test_anonymous_assessment_is_not_stored():
    before = count_rows("Assessment")

    result = run_assessment(None, RF_ANSWERS, SX_ANSWERS)

    assert result["id"] is None
    assert result["user_id"] == ANONYMOUS_USER
    assert result["risk_level"] == "moderate"
    assert count_rows("Assessment") == before


def test_result_is_kept_locally_when_database_write_fails(monkeypatch):
    def failing_create_assessment(**kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(assessment_engine, "create_assessment", failing_create_assessment)

    result = run_assessment(PRIYA_ID, RF_ANSWERS, SX_ANSWERS)

    assert result["id"].startswith("local-")
    assert result["total_score"] == 40
    assert [item["id"] for item in get_local_results(PRIYA_ID)] == [result["id"]]
    assert result["id"] in [item["id"] for item in get_history(PRIYA_ID)]


def test_invalid_answers_are_not_scored():
    before = count_rows("Assessment")

    with pytest.raises(ValueError):
        run_assessment(PRIYA_ID, [{"questionId": "rf_age", "value": 2}], SX_ANSWERS)

    assert count_rows("Assessment") == before


def test_response_uses_camel_case_keys():
    payload = to_response(run_assessment(None, RF_ANSWERS, SX_ANSWERS))

    assert set(payload) == {
        "id",
        "userId",
        "riskFactorScore",
        "symptomScore",
        "totalScore",
        "riskLevel",
        "explanations",
        "recommendations",
        "timestamp",
    }
    assert payload["userId"] == ANONYMOUS_USER


def test_cached_results_are_written_back_after_next_successful_save(monkeypatch):
    def failing_create_assessment(**kwargs):
        raise sqlite3.OperationalError("disk I/O error")

    working_create_assessment = assessment_engine.create_assessment
    before = count_rows("Assessment")

    monkeypatch.setattr(assessment_engine, "create_assessment", failing_create_assessment)
    cached = run_assessment(PRIYA_ID, RF_ANSWERS, SX_ANSWERS)
    assert cached["id"].startswith("local-")

    monkeypatch.setattr(assessment_engine, "create_assessment", working_create_assessment)
    stored = run_assessment(PRIYA_ID, RF_ANSWERS, SX_ANSWERS)

    assert isinstance(stored["id"], int)
    assert get_local_results(PRIYA_ID) == []
    assert count_rows("Assessment") == before + 2
    history_ids = [item["id"] for item in get_history(PRIYA_ID)]
    assert cached["id"] not in history_ids
    assert all(isinstance(item_id, int) for item_id in history_ids)


def test_local_cache_keeps_only_newest_results(monkeypatch):
    def failing_create_assessment(**kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(assessment_engine, "create_assessment", failing_create_assessment)
    monkeypatch.setattr(assessment_engine, "MAX_LOCAL_RESULTS_PER_USER", 2)

    ids = [run_assessment(PRIYA_ID, RF_ANSWERS, SX_ANSWERS)["id"] for _ in range(3)]

    assert [item["id"] for item in get_local_results(PRIYA_ID)] == ids[1:]
