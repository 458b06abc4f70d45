import pytest

from question_bank import RISK_FACTOR, RISK_FACTOR_QUESTIONS, SYMPTOM, SYMPTOM_QUESTIONS, get_question, get_questions
from scoring_engine import (
    HIGH,
    LOW,
    MODERATE,
    calculate_risk_score,
    compute_category_score,
    get_recommendations,
    get_risk_level,
)


def _answers(questions, value):
    return [{"question_id": q["id"], "value": value} for q in questions]


@pytest.mark.parametrize(
    "score,expected",
    [
        (0, LOW),
        (30, LOW),
        (31, MODERATE),
        (60, MODERATE),
        (61, HIGH),
        (100, HIGH),
    ],
)
def test_risk_level_boundaries(score, expected):
    assert get_risk_level(score) == expected


def test_single_heavy_risk_factor_gives_moderate_total():
    result = calculate_risk_score(
        [{"question_id": "rf_chest_radiation", "value": 1.0}],
        _answers(SYMPTOM_QUESTIONS, 0),
    )

    assert result["risk_factor_score"] == 100.0
    assert result["symptom_score"] == 0.0
    assert result["total_score"] == 40
    assert result["risk_level"] == MODERATE
    assert result["recommendations"][-1] == "Consider an annual mammogram if you are 40 or older."


def test_no_answers_is_low_risk():
    result = calculate_risk_score([], [])

    assert result["risk_factor_score"] == 0.0
    assert result["symptom_score"] == 0.0
    assert result["total_score"] == 0
    assert result["risk_level"] == LOW
    assert result["recommendations"] == get_recommendations(LOW, 0.0)


def test_all_concerning_answers_is_high_risk():
    result = calculate_risk_score(
        _answers(RISK_FACTOR_QUESTIONS, 1.0),
        _answers(SYMPTOM_QUESTIONS, 1.0),
    )

    assert result["total_score"] == 100
    assert result["risk_level"] == HIGH
    assert result["recommendations"][0] == "Please consult a healthcare professional as soon as possible."


def test_symptoms_alone_can_reach_moderate_with_urgent_advice():
    result = calculate_risk_score(
        _answers(RISK_FACTOR_QUESTIONS, 0),
        _answers(SYMPTOM_QUESTIONS, 1.0),
    )

    assert result["total_score"] == 60
    assert result["risk_level"] == MODERATE
    assert "Please consult a doctor soon." in result["recommendations"][-1]


def test_unanswered_questions_are_left_out_of_the_average():
    result = compute_category_score(
        RISK_FACTOR_QUESTIONS,
        [
            {"question_id": "rf_age", "value": 1.0},
            {"question_id": "rf_diet", "value": 0.0},
        ],
    )

    # weights 3 and 1 only
    assert result["score"] == 75.0


def test_category_score_is_rounded_to_one_decimal():
    result = compute_category_score(
        RISK_FACTOR_QUESTIONS,
        [
            {"question_id": "rf_menstrual", "value": 1.0},
            {"question_id": "rf_age", "value": 0.0},
            {"question_id": "rf_phh", "value": 0.0},
            {"question_id": "rf_diet", "value": 0.0},
        ],
    )

    assert result["score"] == 22.2


def test_first_answer_for_a_question_wins():
    result = compute_category_score(
        RISK_FACTOR_QUESTIONS,
        [
            {"question_id": "rf_age", "value": 1.0},
            {"question_id": "rf_age", "value": 0.0},
        ],
    )

    assert result["score"] == 100.0


def test_unknown_question_ids_are_ignored():
    result = compute_category_score(SYMPTOM_QUESTIONS, [{"question_id": "rf_age", "value": 1.0}])

    assert result == {"score": 0.0, "explanations": []}


def test_elevated_answers_are_explained():
    question = get_question("sx_discharge")
    result = compute_category_score(
        SYMPTOM_QUESTIONS,
        [
            {"question_id": "sx_discharge", "value": 0.5},
            {"question_id": "sx_feel", "value": 0.4},
        ],
    )

    assert result["explanations"] == [
        f"{question['text']} — Your response indicates elevated concern (weight: 5/5)."
    ]


def test_explanations_start_with_score_summary():
    result = calculate_risk_score(
        [{"question_id": "rf_chest_radiation", "value": 1.0}],
        [],
    )

    assert result["explanations"][:3] == [
        "Risk Factor Score: 100/100 (contributes 40% to total)",
        "Symptom Score: 0/100 (contributes 60% to total)",
        "Overall Score: 40/100 → MODERATE risk",
    ]
    assert any("elevated concern (weight: 5/5)" in line for line in result["explanations"])


def test_scoring_is_deterministic():
    rf = [{"question_id": "rf_age", "value": 0.6}, {"question_id": "rf_alcohol", "value": 0.3}]
    sx = [{"question_id": "sx_skin", "value": 0.7}]

    assert calculate_risk_score(rf, sx) == calculate_risk_score(rf, sx)


@pytest.mark.parametrize(
    "level,symptom_score,count",
    [
        (LOW, 0, 5),
        (MODERATE, 10, 6),
        (MODERATE, 80, 6),
        (HIGH, 90, 7),
    ],
)
def test_recommendation_list_sizes(level, symptom_score, count):
    recommendations = get_recommendations(level, symptom_score)

    assert len(recommendations) == count
    assert "Perform monthly breast self-examinations (BSE)." in recommendations


@pytest.mark.parametrize(
    "rf_answers,sx_answers,rf_score,sx_score,total,level",
    [
        # 20 + 10.5 = 30.5
        (
            [{"question_id": "rf_worklife", "value": 0.5}],
            [{"question_id": "sx_feel", "value": 0.875}]
            + [{"question_id": q["id"], "value": 0} for q in SYMPTOM_QUESTIONS if q["id"] != "sx_feel"],
            50.0,
            17.5,
            31,
            MODERATE,
        ),
        # 20 + 40.5 = 60.5
        (
            [{"question_id": "rf_worklife", "value": 0.5}],
            [
                {"question_id": "sx_dimpling", "value": 0},
                {"question_id": "sx_skin", "value": 0.9},
                {"question_id": "sx_feel", "value": 0.9},
            ],
            50.0,
            67.5,
            61,
            HIGH,
        ),
    ],
)
def test_composite_halves_round_up_across_tier_boundaries(rf_answers, sx_answers, rf_score, sx_score, total, level):
    result = calculate_risk_score(rf_answers, sx_answers)

    assert result["risk_factor_score"] == rf_score
    assert result["symptom_score"] == sx_score
    assert result["total_score"] == total
    assert result["risk_level"] == level


def test_category_score_halves_round_up():
    # 0.5 / 8 = 6.25%
    result = compute_category_score(
        SYMPTOM_QUESTIONS,
        [
            {"question_id": "sx_discharge", "value": 0.1},
            {"question_id": "sx_swelling", "value": 0},
        ],
    )

    assert result["score"] == 6.3


def test_fractional_scores_keep_their_decimal_in_summary():
    result = calculate_risk_score(
        [{"question_id": "rf_worklife", "value": 0.5}],
        [{"question_id": "sx_discharge", "value": 0.1}, {"question_id": "sx_swelling", "value": 0}],
    )

    assert result["explanations"][0] == "Risk Factor Score: 50/100 (contributes 40% to total)"
    assert result["explanations"][1] == "Symptom Score: 6.3/100 (contributes 60% to total)"


def test_questions_per_category():
    assert get_questions(RISK_FACTOR) == RISK_FACTOR_QUESTIONS
    assert get_questions(SYMPTOM) == SYMPTOM_QUESTIONS
    assert all(q["category"] == SYMPTOM for q in get_questions(SYMPTOM))

    with pytest.raises(ValueError):
        get_questions("lifestyle")
