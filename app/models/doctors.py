"""Doctor and weekly availability tables using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    Uuid,
)

from app.models.base import metadata, utc_now

doctors = Table(
    "doctors",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("name", String(200), nullable=False, index=True),
    Column("specialty", String(200), nullable=False, index=True),
    # Display and sort only
    Column("experience_years", Integer, nullable=False, default=0),
    Column("rating", Float, nullable=False, default=0.0),
    # Practice location
    Column("hospital", Text, nullable=True),
    Column("location", Text, nullable=False),
    Column("latitude", Float, nullable=True),
    Column("longitude", Float, nullable=True),
    Column("telemedicine_available", Boolean, nullable=False, default=False),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, default=utc_now),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    ),
)

# Recurring weekly schedule; day_of_week 0 = Sunday
doctor_availability = Table(
    "doctor_availability",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "doctor_id",
        Uuid,
        ForeignKey("doctors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("day_of_week", Integer, nullable=False),
    Column("start_time", String(5), nullable=False),
    Column("end_time", String(5), nullable=False),
    Column("is_available", Boolean, nullable=False, default=True),
    CheckConstraint("day_of_week BETWEEN 0 AND 6", name="day_of_week_range"),
)
