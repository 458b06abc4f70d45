import logging
import sqlite3
from datetime import datetime, timezone

from flask import Flask, abort, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

import config
from appointment_engine import (
    SlotUnavailableError,
    book_appointment,
    change_status,
    get_doctor_availability,
    to_response as appointment_to_response,
)
from assessment_engine import (
    discard_local_results,
    get_history,
    run_assessment,
    to_response as assessment_to_response,
)
from chatbot_engine import get_chatbot_response
from conclave_engine import add_reply, create_post, list_posts
from dashboard_engine import get_admin_metrics, get_patient_summaries
from database import init_db
from health_summary_api import is_configured as gemini_configured
from models import (
    add_chat_messages,
    create_chat_session,
    create_user,
    delete_appointment,
    delete_user_data,
    get_appointment,
    get_appointments_for_user,
    get_chat_messages,
    get_chat_session,
    get_chat_sessions_for_user,
    get_user,
    get_user_counts,
    list_users,
    ping,
)
from question_bank import catalog_payload

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "sanghini-backend"
SERVICE_VERSION = "1.0.0"
ASSESSMENT_DISCLAIMER = "This assessment is for awareness only and does NOT constitute a medical diagnosis."
USER_ROLES = ("patient", "doctor", "volunteer", "admin")
MAX_CHAT_MESSAGE_LENGTH = 1000

app = Flask(__name__)
app.config["RATELIMIT_ENABLED"] = config.RATELIMIT_ENABLED
CORS(app, resources={r"/api/*": {"origins": config.CORS_ORIGINS}})
limiter = Limiter(
    get_remote_address,
    app=app,
    default_limits=["100 per 15 minutes"],
    storage_uri="memory://",
)


@app.before_request
def setup_database_once():
    init_db()


@app.errorhandler(HTTPException)
def handle_http_error(exc):
    return jsonify({"error": exc.description}), exc.code


@app.errorhandler(Exception)
def handle_unexpected_error(exc):
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"error": "Internal server error"}), 500


def _now_iso():
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _json_body():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        abort(400, "Invalid or empty JSON body")
    return body


def _to_int_or_none(value, field_name):
    if value is None or value == "":
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        abort(400, f"{field_name} must be an integer id")
    try:
        return int(value)
    except (TypeError, ValueError):
        abort(400, f"{field_name} must be an integer id")


def _optional_flag(body, field_name):
    value = body.get(field_name, False)
    if not isinstance(value, bool):
        abort(400, f"{field_name} must be true or false")
    return value


def _require_user(user_id):
    user = get_user(user_id)
    if not user:
        abort(404, "User not found")
    return user


def _user_to_response(user):
    return {
        "id": user["id"],
        "name": user["name"],
        "email": user["email"],
        "role": user["role"],
        "createdAt": user["created_at"],
    }


@app.route("/")
def service_info():
    return jsonify({"service": SERVICE_NAME, "version": SERVICE_VERSION, "status": "running"})


@app.route("/api/health")
def health_check():
    health = {
        "status": "ok",
        "timestamp": _now_iso(),
        "service": SERVICE_NAME,
        "checks": {
            "database": "unknown",
            "gemini": "configured" if gemini_configured() else "not_configured",
        },
    }

    try:
        ping()
        health["checks"]["database"] = "connected"
    except sqlite3.Error as exc:
        logger.error("Database health check failed: %s", exc)
        health["checks"]["database"] = "disconnected"
        health["status"] = "degraded"

    status_code = 200 if health["status"] == "ok" else 503
    return jsonify(health), status_code


# Risk assessment

@app.route("/api/assessment/questions")
def assessment_questions():
    return jsonify(catalog_payload())


@app.route("/api/assess", methods=["POST"])
def assess():
    body = _json_body()
    risk_factor_answers = body.get("riskFactorAnswers")
    symptom_answers = body.get("symptomAnswers")
    if risk_factor_answers is None or symptom_answers is None:
        abort(400, "Missing riskFactorAnswers or symptomAnswers")

    user_id = _to_int_or_none(body.get("userId"), "userId")
    if user_id is not None:
        _require_user(user_id)

    try:
        result = run_assessment(user_id, risk_factor_answers, symptom_answers)
    except ValueError as exc:
        abort(400, str(exc))

    return jsonify(
        {
            "success": True,
            "result": assessment_to_response(result),
            "disclaimer": ASSESSMENT_DISCLAIMER,
        }
    )


@app.route("/api/assessments/history/<int:user_id>")
def assessment_history(user_id):
    _require_user(user_id)
    assessments = [assessment_to_response(a) for a in get_history(user_id)]
    return jsonify({"assessments": assessments, "total": len(assessments)})


# Support chat

@app.route("/api/chat", methods=["POST"])
@limiter.limit("10 per minute")
def chat():
    body = _json_body()
    message = body.get("message")
    if not isinstance(message, str) or not message.strip():
        abort(400, "Missing message field")
    if len(message) > MAX_CHAT_MESSAGE_LENGTH:
        abort(400, f"message must be at most {MAX_CHAT_MESSAGE_LENGTH} characters")

    user_id = _to_int_or_none(body.get("userId"), "userId")
    session_id = _to_int_or_none(body.get("sessionId"), "sessionId")

    reply = get_chatbot_response(message)
    timestamp = _now_iso()

    if user_id is not None:
        _require_user(user_id)
        if session_id is not None:
            if not get_chat_session(session_id, user_id):
                abort(404, "Chat session not found")
        else:
            session_id = create_chat_session(user_id, timestamp)
        add_chat_messages(
            session_id,
            [("user", message), ("assistant", reply["content"])],
            timestamp,
        )
    else:
        session_id = None

    return jsonify(
        {
            "success": True,
            "sessionId": session_id,
            "intent": reply["intent"],
            "response": reply["content"],
            "timestamp": timestamp,
        }
    )


@app.route("/api/chat/sessions/<int:user_id>")
def chat_sessions(user_id):
    _require_user(user_id)
    sessions = []
    for session in get_chat_sessions_for_user(user_id):
        sessions.append(
            {
                "id": session["id"],
                "createdAt": session["created_at"],
                "updatedAt": session["updated_at"],
                "messages": [
                    {
                        "id": m["id"],
                        "role": m["role"],
                        "content": m["content"],
                        "timestamp": m["created_at"],
                    }
                    for m in get_chat_messages(session["id"])
                ],
            }
        )
    return jsonify({"sessions": sessions})


# Appointments

@app.route("/api/doctors")
def doctors():
    return jsonify({"doctors": [_user_to_response(d) for d in list_users(role="doctor")]})


@app.route("/api/doctors/<int:doctor_id>/availability")
def doctor_availability(doctor_id):
    date = request.args.get("date", "")
    try:
        slots = get_doctor_availability(doctor_id, date)
    except ValueError as exc:
        abort(400, str(exc))
    except LookupError as exc:
        abort(404, str(exc))
    return jsonify({"doctorId": doctor_id, "date": date, "slots": slots})


@app.route("/api/appointments", methods=["GET"])
def list_appointments():
    user_id = _to_int_or_none(request.args.get("userId"), "userId")
    if user_id is None:
        abort(400, "userId is required")
    status = request.args.get("status") or None
    appointments = [appointment_to_response(a) for a in get_appointments_for_user(user_id, status=status)]
    return jsonify({"success": True, "appointments": appointments, "total": len(appointments)})


@app.route("/api/appointments", methods=["POST"])
def create_appointment_route():
    body = _json_body()
    doctor_id = _to_int_or_none(body.get("doctorId"), "doctorId")
    patient_id = _to_int_or_none(body.get("patientId"), "patientId")
    date = body.get("date")
    time = body.get("time")
    reason = body.get("reason")

    if doctor_id is None or patient_id is None or not date or not time or not reason:
        abort(400, "Missing required fields")

    try:
        appointment = book_appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            date=date,
            time=time,
            reason=reason,
            notes=body.get("notes"),
        )
    except ValueError as exc:
        abort(400, str(exc))
    except LookupError as exc:
        abort(404, str(exc))
    except SlotUnavailableError as exc:
        abort(409, str(exc))

    return jsonify({"success": True, "appointment": appointment_to_response(appointment)}), 201


@app.route("/api/appointments/<int:appointment_id>", methods=["GET"])
def appointment_detail(appointment_id):
    appointment = get_appointment(appointment_id)
    if not appointment:
        abort(404, "Appointment not found")
    return jsonify({"appointment": appointment_to_response(appointment)})


@app.route("/api/appointments/<int:appointment_id>/status", methods=["PATCH"])
def appointment_status(appointment_id):
    body = _json_body()
    try:
        appointment = change_status(appointment_id, body.get("status"))
    except ValueError as exc:
        abort(400, str(exc))
    except LookupError as exc:
        abort(404, str(exc))
    except SlotUnavailableError as exc:
        abort(409, str(exc))
    return jsonify({"message": "Appointment status updated", "appointment": appointment_to_response(appointment)})


@app.route("/api/appointments/<int:appointment_id>", methods=["DELETE"])
def remove_appointment(appointment_id):
    if not delete_appointment(appointment_id):
        abort(404, "Appointment not found")
    return jsonify({"message": "Appointment deleted successfully"})


# Smart Conclave forum

@app.route("/api/conclave/posts", methods=["GET"])
def conclave_posts():
    return jsonify({"posts": list_posts(topic=request.args.get("topic") or None)})


@app.route("/api/conclave/posts", methods=["POST"])
def conclave_create_post():
    body = _json_body()
    user_id = _to_int_or_none(body.get("userId"), "userId")
    if user_id is None:
        abort(400, "userId is required")
    try:
        post = create_post(
            user_id=user_id,
            title=body.get("title"),
            content=body.get("content"),
            topic=body.get("topic"),
            is_anonymous=_optional_flag(body, "isAnonymous"),
            tags=body.get("tags"),
        )
    except ValueError as exc:
        abort(400, str(exc))
    except LookupError as exc:
        abort(404, str(exc))
    return jsonify({"post": post}), 201


@app.route("/api/conclave/posts/<int:post_id>/replies", methods=["POST"])
def conclave_reply(post_id):
    body = _json_body()
    user_id = _to_int_or_none(body.get("userId"), "userId")
    if user_id is None:
        abort(400, "userId is required")
    try:
        post = add_reply(
            post_id=post_id,
            user_id=user_id,
            content=body.get("content"),
            is_anonymous=_optional_flag(body, "isAnonymous"),
        )
    except ValueError as exc:
        abort(400, str(exc))
    except LookupError as exc:
        abort(404, str(exc))
    return jsonify({"post": post}), 201


# Doctor dashboard and admin

@app.route("/api/patients")
def patient_summaries():
    return jsonify({"success": True, "patients": get_patient_summaries()})


@app.route("/api/admin/metrics")
def admin_metrics():
    return jsonify(get_admin_metrics())


# Users

@app.route("/api/users", methods=["POST"])
def create_user_route():
    body = _json_body()
    name = str(body.get("name") or "").strip()
    email = body.get("email")
    role = str(body.get("role") or "patient").lower()

    if not name:
        abort(400, "name is required")
    if email is not None and (not isinstance(email, str) or "@" not in email):
        abort(400, "email is invalid")
    if role not in USER_ROLES:
        abort(400, "role is invalid")

    user_id = create_user(
        name=name,
        email=email.strip().lower() if email else None,
        role=role,
        created_at=datetime.now().isoformat(timespec="seconds"),
    )
    return jsonify({"user": _user_to_response(get_user(user_id))}), 201


@app.route("/api/users/<int:user_id>")
def user_detail(user_id):
    user = _require_user(user_id)
    counts = get_user_counts(user_id)
    payload = _user_to_response(user)
    payload["counts"] = {
        "assessments": counts["assessments"],
        "appointments": counts["appointments"],
        "chatSessions": counts["chat_sessions"],
    }
    return jsonify({"user": payload})


@app.route("/api/users/<int:user_id>/data", methods=["DELETE"])
def delete_user_data_route(user_id):
    _require_user(user_id)
    delete_user_data(user_id)
    discard_local_results(user_id)
    logger.info("Deleted data for user %s", user_id)
    return jsonify({"message": "User data deleted successfully", "userId": user_id})


if __name__ == "__main__":
    init_db()
    app.run(host="0.0.0.0", port=config.PORT)
