import config
import health_summary_api
from dashboard_engine import get_admin_metrics, get_patient_summaries
from explanation_engine import generate_patient_summary_text, generate_suggested_actions
from health_summary_engine import generate_patient_summary


def _summary_for(name):
    return next(row for row in get_patient_summaries() if row["patient"]["name"] == name)


def test_every_patient_is_listed():
    names = [row["patient"]["name"] for row in get_patient_summaries()]

    assert names == ["Priya Sharma", "Anita Desai", "Meera Joshi", "Kavita Rao"]


def test_high_risk_patient_summary():
    row = _summary_for("Meera Joshi")

    assert row["latestAssessment"]["riskLevel"] == "high"
    assert row["latestAssessment"]["totalScore"] == 73
    assert "**Overall Risk**: HIGH (73/100)" in row["aiSummary"]
    assert row["suggestedActions"][0] == "Order bilateral mammogram + ultrasound"
    assert [a["time"] for a in row["appointments"]] == ["2:00 PM"]


def test_patient_without_assessment():
    patient = {"id": 42, "name": "New Patient"}

    assert generate_patient_summary_text(patient, None) == "New Patient has not completed a risk assessment yet."
    assert generate_suggested_actions(None) == ["Request patient to complete self-assessment."]


def test_summary_for_unknown_user():
    assert generate_patient_summary(999) == "Patient summary unavailable: user not found."


def test_gemini_failure_falls_back_to_template(monkeypatch):
    class BrokenModels:
        def generate_content(self, **kwargs):
            raise RuntimeError("quota exceeded")

    class BrokenClient:
        models = BrokenModels()

    monkeypatch.setattr(config, "GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(health_summary_api, "_get_client", lambda: BrokenClient())

    summary = generate_patient_summary(3)

    assert summary.startswith("**Patient**: Meera Joshi (ID: 3)")


def test_gemini_text_is_used_when_available(monkeypatch):
    class Response:
        text = "  Moderate risk, clinical exam advised.  "

    class Models:
        def generate_content(self, **kwargs):
            assert kwargs["model"] == config.GEMINI_MODEL
            return Response()

    class Client:
        models = Models()

    monkeypatch.setattr(health_summary_api, "_get_client", lambda: Client())

    assert generate_patient_summary(2) == "Moderate risk, clinical exam advised."


def test_admin_metrics_totals():
    metrics = get_admin_metrics()

    assert metrics["overview"] == {
        "totalUsers": 8,
        "totalAssessments": 4,
        "totalAppointments": 3,
        "totalChatSessions": 0,
    }
    assert {row["level"]: row["count"] for row in metrics["riskDistribution"]} == {
        "high": 1,
        "low": 2,
        "moderate": 1,
    }
    assert {row["status"]: row["count"] for row in metrics["appointmentsByStatus"]} == {
        "confirmed": 2,
        "pending": 1,
    }
    assert metrics["recentAssessments"][0]["userName"] == "Kavita Rao"
