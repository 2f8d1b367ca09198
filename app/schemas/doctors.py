"""Doctor schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class DoctorSortField(str, Enum):
    """Supported doctor list orderings."""

    RATING = "rating"
    EXPERIENCE = "experience"


class WeeklyAvailabilityResponse(BaseModel):
    """One recurring weekly availability rule."""

    id: UUID
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday, 6 = Saturday")
    start_time: str
    end_time: str
    is_available: bool

    model_config = {"from_attributes": True}


class DoctorResponse(BaseModel):
    """Doctor response schema."""

    id: UUID
    name: str
    specialty: str
    experience_years: int
    rating: float
    hospital: str | None = None
    location: str
    latitude: float | None = None
    longitude: float | None = None
    telemedicine_available: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DoctorDetailResponse(DoctorResponse):
    """Doctor with weekly availability rules."""

    availability: list[WeeklyAvailabilityResponse] = Field(default_factory=list)


class DoctorFilters(BaseModel):
    """Doctor list filters, search and ordering."""

    specialty: str | None = None
    location: str | None = None
    telemedicine_available: bool | None = None
    name: str | None = None
    search: str | None = None
    sort_by: DoctorSortField | None = None


class AvailabilityResponse(BaseModel):
    """Open slots for a doctor on a date."""

    doctor_id: UUID
    date: str
    slots: list[str]
