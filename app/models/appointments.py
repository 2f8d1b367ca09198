"""Appointments table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    Uuid,
)

from app.models.base import metadata, utc_now

ACTIVE_SLOT_INDEX = "uq_appointments_active_slot"

appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Ownership / references
    Column("patient_id", String(100), nullable=False, index=True),
    Column(
        "doctor_id",
        Uuid,
        ForeignKey("doctors.id"),
        nullable=False,
        index=True,
    ),
    # Slot
    Column("appointment_date", Date, nullable=False),
    Column("time_slot", String(5), nullable=False),
    # Classification
    Column("appointment_type", String(20), nullable=False, default="normal"),
    Column("mode", String(20), nullable=False, default="clinic"),
    # Status management
    Column("status", String(20), nullable=False, default="scheduled"),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, default=utc_now),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    ),
    Column("cancelled_at", DateTime(timezone=True), nullable=True),
    Column("completed_at", DateTime(timezone=True), nullable=True),
    # Constraints
    CheckConstraint(
        "status IN ('scheduled', 'completed', 'cancelled')",
        name="status",
    ),
    CheckConstraint(
        "appointment_type IN ('normal', 'emergency')",
        name="appointment_type",
    ),
    CheckConstraint("mode IN ('clinic', 'telemedicine')", name="mode"),
)

# At most one live booking per doctor/date/slot; cancelled rows free the slot
Index(
    ACTIVE_SLOT_INDEX,
    appointments.c.doctor_id,
    appointments.c.appointment_date,
    appointments.c.time_slot,
    unique=True,
    postgresql_where=appointments.c.status != "cancelled",
    sqlite_where=appointments.c.status != "cancelled",
)
