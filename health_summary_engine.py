from explanation_engine import generate_patient_summary_text
from health_summary_api import generate_health_summary
from models import get_latest_assessment, get_user


def generate_patient_summary(user_id, assessment=None):
    user = get_user(user_id)
    if not user:
        return "Patient summary unavailable: user not found."

    if assessment is None:
        assessment = get_latest_assessment(user_id)

    template_summary = generate_patient_summary_text(user, assessment)
    if not assessment:
        return template_summary

    # Only per-question findings; the model gets the scores separately.
    findings = [line for line in assessment["explanations"] if "elevated concern" in line]

    return generate_health_summary(
        patient_name=user["name"],
        risk_level=assessment["risk_level"],
        total_score=assessment["total_score"],
        risk_factor_score=assessment["risk_factor_score"],
        symptom_score=assessment["symptom_score"],
        explanations=findings,
        fallback_text=template_summary,
    )
