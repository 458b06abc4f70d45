import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from numbers import Real

from models import create_assessment, get_assessments_for_user
from scoring_engine import calculate_risk_score

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "anonymous"
MAX_LOCAL_RESULTS_PER_USER = 20

# Results that could not be written to the database, keyed by user id.
_local_results = {}


def _now_iso():
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def parse_answers(raw_answers, field_name="answers"):
    """
    Validate client answers: a list of {questionId, value, label?} objects
    with value in [0, 1]. Returns dicts keyed the way the scorer expects.
    """
    if not isinstance(raw_answers, list):
        raise ValueError(f"{field_name} must be a list")

    parsed = []
    for idx, item in enumerate(raw_answers):
        if not isinstance(item, dict):
            raise ValueError(f"{field_name}[{idx}] must be an object")

        question_id = item.get("questionId", item.get("question_id"))
        if not isinstance(question_id, str) or not question_id.strip():
            raise ValueError(f"{field_name}[{idx}].questionId is required")

        value = item.get("value")
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ValueError(f"{field_name}[{idx}].value must be a number")
        if not 0 <= value <= 1:
            raise ValueError(f"{field_name}[{idx}].value must be between 0 and 1")

        parsed.append(
            {
                "question_id": question_id.strip(),
                "value": float(value),
                "label": str(item.get("label") or ""),
            }
        )
    return parsed


def _store(assessment, answers):
    return create_assessment(
        user_id=assessment["user_id"],
        risk_factor_score=assessment["risk_factor_score"],
        symptom_score=assessment["symptom_score"],
        total_score=assessment["total_score"],
        risk_level=assessment["risk_level"],
        explanations=assessment["explanations"],
        recommendations=assessment["recommendations"],
        answers=answers,
        timestamp=assessment["timestamp"],
    )


def _keep_locally(assessment, answers):
    assessment["id"] = f"local-{uuid.uuid4().hex[:12]}"
    cached = _local_results.setdefault(assessment["user_id"], [])
    cached.append(dict(assessment, answers=answers))
    if len(cached) > MAX_LOCAL_RESULTS_PER_USER:
        dropped = cached.pop(0)
        logger.warning("Local cache full for user %s, dropped %s", assessment["user_id"], dropped["id"])


def _flush_local_results(user_id):
    """Write cached results back once the database accepts writes again."""
    cached = _local_results.get(user_id)
    while cached:
        item = cached[0]
        try:
            stored_id = _store(item, item["answers"])
        except sqlite3.Error as exc:
            logger.warning("Still cannot store cached assessment %s: %s", item["id"], exc)
            return
        logger.info("Stored cached assessment %s as %s", item["id"], stored_id)
        cached.pop(0)
    _local_results.pop(user_id, None)


def _persist(assessment, answers):
    try:
        assessment_id = _store(assessment, answers)
    except sqlite3.Error as exc:
        logger.warning(
            "Could not persist assessment for user %s, keeping it locally: %s",
            assessment["user_id"],
            exc,
        )
        _keep_locally(assessment, answers)
        return assessment

    assessment["id"] = assessment_id
    _flush_local_results(assessment["user_id"])
    return assessment


def run_assessment(user_id, risk_factor_answers, symptom_answers):
    """
    Score a questionnaire submission and record it in the user's history.

    Anonymous submissions (user_id is None) are scored but not stored.
    """
    rf_answers = parse_answers(risk_factor_answers, "riskFactorAnswers")
    sx_answers = parse_answers(symptom_answers, "symptomAnswers")

    assessment = calculate_risk_score(rf_answers, sx_answers)
    assessment["timestamp"] = _now_iso()

    if user_id is None:
        assessment["id"] = None
        assessment["user_id"] = ANONYMOUS_USER
        return assessment

    assessment["user_id"] = user_id
    assessment = _persist(
        assessment,
        answers={"riskFactorAnswers": rf_answers, "symptomAnswers": sx_answers},
    )
    logger.info(
        "Assessment %s for user %s: %s (%s)",
        assessment["id"],
        user_id,
        assessment["total_score"],
        assessment["risk_level"],
    )
    return assessment


def get_history(user_id):
    """Stored and locally kept assessments for a user, newest first."""
    history = get_assessments_for_user(user_id)
    history.extend(dict(item) for item in _local_results.get(user_id, []))
    history.sort(key=lambda item: item["timestamp"], reverse=True)
    return history


def get_local_results(user_id):
    return [dict(item) for item in _local_results.get(user_id, [])]


def discard_local_results(user_id):
    _local_results.pop(user_id, None)


def clear_local_results():
    _local_results.clear()


def to_response(assessment):
    """AssessmentResult in the camelCase shape the results view reads."""
    return {
        "id": assessment["id"],
        "userId": assessment["user_id"],
        "riskFactorScore": assessment["risk_factor_score"],
        "symptomScore": assessment["symptom_score"],
        "totalScore": assessment["total_score"],
        "riskLevel": assessment["risk_level"],
        "explanations": list(assessment["explanations"]),
        "recommendations": list(assessment["recommendations"]),
        "timestamp": assessment["timestamp"],
    }
