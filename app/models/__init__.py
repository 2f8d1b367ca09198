"""Database models."""

from app.models.appointments import appointments
from app.models.base import metadata
from app.models.doctors import doctor_availability, doctors
from app.models.emergency import emergency_queue, emergency_triage
from app.models.prescriptions import prescriptions
from app.models.telemedicine import telemedicine_messages

__all__ = [
    "appointments",
    "doctor_availability",
    "doctors",
    "emergency_queue",
    "emergency_triage",
    "metadata",
    "prescriptions",
    "telemedicine_messages",
]
