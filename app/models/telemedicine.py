"""Telemedicine chat messages table."""

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, Table, Text, Uuid

from app.models.base import metadata, utc_now

telemedicine_messages = Table(
    "telemedicine_messages",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("sender", String(10), nullable=False),
    Column("message", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utc_now),
    CheckConstraint("sender IN ('doctor', 'patient')", name="sender"),
)
