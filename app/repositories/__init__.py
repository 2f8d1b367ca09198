"""Repositories wrapping an injected database session."""

from app.repositories.appointment_repository import AppointmentRepository
from app.repositories.doctor_repository import DoctorRepository
from app.repositories.emergency_repository import EmergencyRepository
from app.repositories.prescription_repository import PrescriptionRepository
from app.repositories.telemedicine_repository import TelemedicineRepository

__all__ = [
    "AppointmentRepository",
    "DoctorRepository",
    "EmergencyRepository",
    "PrescriptionRepository",
    "TelemedicineRepository",
]
