from datetime import datetime


def _format_assessment_date(timestamp):
    try:
        return datetime.fromisoformat(str(timestamp)).strftime("%d %b %Y")
    except ValueError:
        return str(timestamp)


def generate_patient_summary_text(patient, assessment):
    """Create a human-readable summary of a patient's latest assessment for doctors."""
    if not assessment:
        return f"{patient['name']} has not completed a risk assessment yet."

    lines = [
        f"**Patient**: {patient['name']} (ID: {patient['id']})",
        f"**Assessment Date**: {_format_assessment_date(assessment['timestamp'])}",
        f"**Overall Risk**: {assessment['risk_level'].upper()} ({assessment['total_score']}/100)",
        "",
        f"Risk factor analysis shows a score of {assessment['risk_factor_score']}/100 and "
        f"symptom-based evaluation yields {assessment['symptom_score']}/100.",
        "",
    ]

    if assessment["risk_level"] == "high":
        lines.append(
            "This patient shows multiple concerning indicators. Immediate clinical evaluation is "
            "recommended. Consider ordering diagnostic imaging and referring to a specialist."
        )
    elif assessment["risk_level"] == "moderate":
        lines.append(
            "This patient has some elevated risk factors. A clinical breast exam is advisable, "
            "and screening frequency should be discussed."
        )
    else:
        lines.append(
            "Risk profile is within normal range. Standard screening schedule is appropriate. "
            "Encourage continued self-examination."
        )

    return "\n".join(lines)


def generate_suggested_actions(assessment):
    if not assessment:
        return ["Request patient to complete self-assessment."]

    if assessment["risk_level"] == "high":
        return [
            "Order bilateral mammogram + ultrasound",
            "Refer to breast specialist / surgical oncology",
            "Consider genetic counseling referral (BRCA testing)",
            "Schedule follow-up within 2 weeks",
            "Document detailed clinical breast exam findings",
        ]
    if assessment["risk_level"] == "moderate":
        return [
            "Perform clinical breast examination",
            "Schedule mammogram if patient is 40+",
            "Review family history in detail",
            "Schedule follow-up in 1 month",
            "Provide breast health education materials",
        ]
    return [
        "Encourage regular self-examination",
        "Schedule next routine screening per age guidelines",
        "Provide lifestyle modification counseling",
        "No urgent action required",
    ]
