"""Appointment schemas for request/response validation."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.doctors import DoctorResponse
from app.schemas.emergency import EmergencyQueueResponse, EmergencyTriageResponse
from app.schemas.prescriptions import PrescriptionResponse
from app.schemas.telemedicine import TelemedicineMessageResponse

TIME_SLOT_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AppointmentType(str, Enum):
    """Appointment type enumeration."""

    NORMAL = "normal"
    EMERGENCY = "emergency"


class AppointmentMode(str, Enum):
    """Consultation mode enumeration."""

    CLINIC = "clinic"
    TELEMEDICINE = "telemedicine"


class AppointmentCreate(BaseModel):
    """Schema for booking a new appointment."""

    patient_id: str = Field(..., min_length=1, max_length=100)
    doctor_id: UUID
    appointment_date: date
    time_slot: str = Field(..., pattern=TIME_SLOT_PATTERN)
    appointment_type: AppointmentType = AppointmentType.NORMAL
    mode: AppointmentMode = AppointmentMode.CLINIC
    symptoms: list[str] = Field(default_factory=list)
    patient_lat: float | None = Field(None, ge=-90, le=90)
    patient_lng: float | None = Field(None, ge=-180, le=180)

    @field_validator("symptoms", mode="before")
    @classmethod
    def coerce_symptoms(cls, v: object) -> object:
        """Treat a missing symptom list as empty."""
        return [] if v is None else v

    @model_validator(mode="after")
    def validate_coordinates(self) -> "AppointmentCreate":
        """Patient coordinates come as a pair or not at all."""
        if (self.patient_lat is None) != (self.patient_lng is None):
            raise ValueError("patient_lat and patient_lng must be provided together")
        return self


class AppointmentReschedule(BaseModel):
    """Schema for moving an appointment to a new slot."""

    appointment_date: date
    time_slot: str = Field(..., pattern=TIME_SLOT_PATTERN)


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: UUID
    patient_id: str
    doctor_id: UUID
    appointment_date: date
    time_slot: str
    appointment_type: AppointmentType
    mode: AppointmentMode
    status: AppointmentStatus
    created_at: datetime
    updated_at: datetime
    cancelled_at: datetime | None = None
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}


class AppointmentDetailResponse(AppointmentResponse):
    """Appointment with its owned records."""

    doctor: DoctorResponse | None = None
    emergency_triage: EmergencyTriageResponse | None = None
    emergency_queue: EmergencyQueueResponse | None = None
    prescriptions: list[PrescriptionResponse] = Field(default_factory=list)
    telemedicine_messages: list[TelemedicineMessageResponse] = Field(default_factory=list)


class AppointmentCreateResponse(AppointmentDetailResponse):
    """Booking result; the distance warning is computed per request, never stored."""

    distance_warning: bool = False
