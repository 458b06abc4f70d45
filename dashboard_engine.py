from datetime import datetime, timezone

from appointment_engine import to_response as appointment_to_response
from assessment_engine import get_history, to_response as assessment_to_response
from explanation_engine import generate_suggested_actions
from health_summary_engine import generate_patient_summary
from models import (
    count_appointments_by_status,
    count_assessments_by_level,
    count_rows,
    get_appointments_for_patient,
    list_recent_assessments,
    list_users,
)


def _user_to_response(user):
    return {
        "id": user["id"],
        "name": user["name"],
        "email": user["email"],
        "role": user["role"],
        "createdAt": user["created_at"],
    }


def build_patient_summary(patient):
    history = get_history(patient["id"])
    latest = history[0] if history else None

    return {
        "patient": _user_to_response(patient),
        "latestAssessment": assessment_to_response(latest) if latest else None,
        "aiSummary": generate_patient_summary(patient["id"], assessment=latest),
        "suggestedActions": generate_suggested_actions(latest),
        "appointments": [
            appointment_to_response(a) for a in get_appointments_for_patient(patient["id"])
        ],
    }


def get_patient_summaries():
    """
    Doctor dashboard rows: every patient with their latest assessment,
    a summary, suggested actions and appointments.
    """
    return [build_patient_summary(patient) for patient in list_users(role="patient")]


def get_admin_metrics():
    return {
        "overview": {
            "totalUsers": count_rows("User"),
            "totalAssessments": count_rows("Assessment"),
            "totalAppointments": count_rows("Appointment"),
            "totalChatSessions": count_rows("ChatSession"),
        },
        "riskDistribution": [
            {"level": row["risk_level"], "count": row["count"]} for row in count_assessments_by_level()
        ],
        "appointmentsByStatus": [
            {"status": row["status"], "count": row["count"]} for row in count_appointments_by_status()
        ],
        "recentAssessments": [
            {
                "id": row["id"],
                "userName": row["user_name"],
                "level": row["risk_level"],
                "score": row["total_score"],
                "createdAt": row["timestamp"],
            }
            for row in list_recent_assessments(limit=10)
        ],
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }
