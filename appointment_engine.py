import logging
import re
import sqlite3
from datetime import datetime

from models import (
    create_appointment,
    get_appointment,
    get_booked_times,
    get_user,
    update_appointment_status,
)

logger = logging.getLogger(__name__)

DAILY_SLOTS = [
    "9:00 AM",
    "9:30 AM",
    "10:00 AM",
    "10:30 AM",
    "11:00 AM",
    "11:30 AM",
    "2:00 PM",
    "2:30 PM",
    "3:00 PM",
    "3:30 PM",
    "4:00 PM",
]

APPOINTMENT_STATUSES = ("pending", "confirmed", "completed", "cancelled")

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class SlotUnavailableError(Exception):
    pass


def validate_date(date):
    if not isinstance(date, str) or not _DATE_PATTERN.match(date):
        raise ValueError("date must be in YYYY-MM-DD format")
    try:
        datetime.strptime(date, "%Y-%m-%d")
    except ValueError:
        raise ValueError(f"Invalid date: {date}") from None
    return date


def _get_doctor(doctor_id):
    doctor = get_user(doctor_id)
    if not doctor or doctor["role"] != "doctor":
        raise LookupError("Doctor not found")
    return doctor


def get_doctor_availability(doctor_id, date):
    """All daily slots for a doctor, flagged by whether a live booking holds them."""
    validate_date(date)
    _get_doctor(doctor_id)
    booked = get_booked_times(doctor_id, date)
    return [{"time": slot, "available": slot not in booked} for slot in DAILY_SLOTS]


def book_appointment(patient_id, doctor_id, date, time, reason, notes=None):
    validate_date(date)
    if not reason or not str(reason).strip():
        raise ValueError("reason is required")

    doctor = _get_doctor(doctor_id)
    patient = get_user(patient_id)
    if not patient:
        raise LookupError("Patient not found")

    slots = get_doctor_availability(doctor["id"], date)
    slot = next((s for s in slots if s["time"] == time), None)
    if not slot or not slot["available"]:
        raise SlotUnavailableError("Time slot not available")

    try:
        appointment_id = create_appointment(
            patient_id=patient["id"],
            doctor_id=doctor["id"],
            date=date,
            time=time,
            reason=str(reason).strip(),
            notes=notes,
            status="pending",
            created_at=datetime.now().isoformat(timespec="seconds"),
        )
    except sqlite3.IntegrityError:
        # Another booking took the slot after the availability check.
        raise SlotUnavailableError("Time slot not available") from None
    logger.info(
        "Booked appointment %s: patient %s with doctor %s on %s at %s",
        appointment_id,
        patient["id"],
        doctor["id"],
        date,
        time,
    )
    return get_appointment(appointment_id)


def change_status(appointment_id, status):
    if status not in APPOINTMENT_STATUSES:
        raise ValueError("Invalid status")
    try:
        updated = update_appointment_status(appointment_id, status)
    except sqlite3.IntegrityError:
        raise SlotUnavailableError("Time slot not available") from None
    if not updated:
        raise LookupError("Appointment not found")
    return get_appointment(appointment_id)


def to_response(appointment):
    return {
        "id": appointment["id"],
        "patientId": appointment["patient_id"],
        "patientName": appointment.get("patient_name") or "Patient",
        "doctorId": appointment["doctor_id"],
        "doctorName": appointment.get("doctor_name") or "Doctor",
        "date": appointment["date"],
        "time": appointment["time"],
        "status": appointment["status"],
        "reason": appointment["reason"],
        "notes": appointment.get("notes"),
    }
