"""Emergency triage and queue schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class SeverityLevel(str, Enum):
    """Severity tier derived from the emergency score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class QueueStatus(str, Enum):
    """Doctor review status of an emergency queue entry."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EmergencyTriageResponse(BaseModel):
    """Triage record stored alongside an emergency appointment."""

    id: UUID
    appointment_id: UUID
    symptoms: list[str]
    emergency_score: int
    severity_level: SeverityLevel
    patient_lat: float | None = None
    patient_lng: float | None = None
    distance_km: float | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class EmergencyQueueResponse(BaseModel):
    """Emergency queue entry."""

    id: UUID
    appointment_id: UUID
    status: QueueStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EmergencyDecisionRequest(BaseModel):
    """Doctor panel approve/reject payload."""

    appointment_id: UUID
