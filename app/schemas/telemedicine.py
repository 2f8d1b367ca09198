"""Telemedicine message schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class MessageSender(str, Enum):
    """Allowed telemedicine senders."""

    DOCTOR = "doctor"
    PATIENT = "patient"


class TelemedicineMessageCreate(BaseModel):
    """
    Schema for posting a chat message.

    The sender is kept as free text here so an unknown sender is reported as
    an InvalidSender domain error rather than a request validation failure.
    """

    appointment_id: UUID
    sender: str
    message: str = Field(..., min_length=1, max_length=5000)


class TelemedicineMessageResponse(BaseModel):
    """Telemedicine message response schema."""

    id: UUID
    appointment_id: UUID
    sender: MessageSender
    message: str
    created_at: datetime

    model_config = {"from_attributes": True}
