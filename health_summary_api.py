import logging

from google import genai

import config

logger = logging.getLogger(__name__)


def _get_client():
    if not config.GEMINI_API_KEY:
        return None
    return genai.Client(api_key=config.GEMINI_API_KEY)


def is_configured():
    return bool(config.GEMINI_API_KEY)


def generate_health_summary(patient_name, risk_level, total_score, risk_factor_score, symptom_score,
                            explanations, fallback_text):
    """
    Ask Gemini for a short clinical summary of a patient's latest assessment.
    Returns fallback_text when no API key is configured or the call fails.
    """
    client = _get_client()
    if not client:
        return fallback_text

    findings = "\n".join(f"- {line}" for line in explanations) if explanations else "None reported"
    prompt = f"""
You are a clinical assistant preparing a breast health screening summary for a doctor.

Patient: {patient_name}
Overall risk tier: {risk_level}
Composite score: {total_score}/100
Risk factor score: {risk_factor_score}/100
Symptom score: {symptom_score}/100

Self-assessment findings:
{findings}

Write a concise summary for the doctor.

Include:

- overall risk picture
- notable risk factors or symptoms
- suggested next clinical step

Limit to 4 sentences. Do not state a diagnosis.
"""

    try:
        response = client.models.generate_content(
            model=config.GEMINI_MODEL,
            contents=prompt,
            config={"temperature": 0.3},
        )
        text = (response.text or "").strip()
        if not text:
            return fallback_text
        return text
    except Exception:
        logger.exception("Gemini summary failed for %s, using template summary", patient_name)
        return fallback_text
