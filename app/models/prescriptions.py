"""Prescriptions table model."""

from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Table, Text, Uuid

from app.models.base import metadata, utc_now

# One current prescription per appointment; re-issuing overwrites it
prescriptions = Table(
    "prescriptions",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("doctor_id", Uuid, ForeignKey("doctors.id"), nullable=False),
    Column("medications", JSON, nullable=False),
    Column("notes", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utc_now),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    ),
)
