"""Prescription schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.doctors import DoctorResponse


class PrescriptionCreate(BaseModel):
    """Schema for issuing (or re-issuing) a prescription."""

    appointment_id: UUID
    doctor_id: UUID
    medications: list[str] = Field(default_factory=list)
    notes: str | None = Field(None, max_length=2000)

    @field_validator("medications")
    @classmethod
    def strip_medications(cls, v: list[str]) -> list[str]:
        """Drop blank entries and surrounding whitespace."""
        return [m.strip() for m in v if m and m.strip()]


class PrescriptionResponse(BaseModel):
    """Prescription response schema."""

    id: UUID
    appointment_id: UUID
    doctor_id: UUID
    medications: list[str]
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    doctor: DoctorResponse | None = None

    model_config = {"from_attributes": True}
