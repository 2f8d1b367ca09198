"""Emergency triage and queue tables."""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Uuid,
)

from app.models.base import metadata, utc_now

# Written once when an emergency booking is created
emergency_triage = Table(
    "emergency_triage",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("symptoms", JSON, nullable=False),
    Column("emergency_score", Integer, nullable=False),
    Column("severity_level", String(10), nullable=False),
    Column("patient_lat", Float, nullable=True),
    Column("patient_lng", Float, nullable=True),
    Column("distance_km", Float, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utc_now),
    CheckConstraint(
        "severity_level IN ('low', 'medium', 'high')",
        name="severity_level",
    ),
)

emergency_queue = Table(
    "emergency_queue",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("status", String(20), nullable=False, default="pending"),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utc_now),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    ),
    CheckConstraint(
        "status IN ('pending', 'approved', 'rejected')",
        name="status",
    ),
)
