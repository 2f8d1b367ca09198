"""Appointment persistence."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.appointments import appointments
from app.schemas.appointments import AppointmentStatus


class AppointmentRepository:
    """
    Data access for the appointments table.

    Methods never commit; the calling service owns the transaction.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def find_by_id(self, appointment_id: UUID) -> dict | None:
        result = await self._db.execute(
            select(appointments).where(appointments.c.id == appointment_id)
        )
        row = result.mappings().first()
        return dict(row) if row else None

    async def find_conflict(
        self,
        doctor_id: UUID,
        appointment_date: date,
        time_slot: str,
        exclude_id: UUID | None = None,
    ) -> dict | None:
        """
        Find a live appointment already holding the slot.

        Args:
            doctor_id: Doctor ID
            appointment_date: Calendar date
            time_slot: "HH:MM" slot
            exclude_id: Appointment to ignore (the one being moved)

        Returns:
            The conflicting appointment or None
        """
        stmt = select(appointments).where(
            appointments.c.doctor_id == doctor_id,
            appointments.c.appointment_date == appointment_date,
            appointments.c.time_slot == time_slot,
            appointments.c.status != AppointmentStatus.CANCELLED.value,
        )
        if exclude_id is not None:
            stmt = stmt.where(appointments.c.id != exclude_id)

        result = await self._db.execute(stmt.limit(1))
        row = result.mappings().first()
        return dict(row) if row else None

    async def insert(self, values: dict[str, Any]) -> dict:
        result = await self._db.execute(
            insert(appointments).values(**values).returning(appointments)
        )
        return dict(result.mappings().one())

    async def update_if_status(
        self,
        appointment_id: UUID,
        allowed_statuses: set[AppointmentStatus],
        values: dict[str, Any],
    ) -> dict | None:
        """
        Update a row only while its status is one of ``allowed_statuses``.

        The status guard is part of the UPDATE so a concurrent transition
        makes this a no-op instead of overwriting it.

        Returns:
            Updated row, or None when the id is missing or the guard failed
        """
        stmt = (
            update(appointments)
            .where(
                appointments.c.id == appointment_id,
                appointments.c.status.in_([s.value for s in allowed_statuses]),
            )
            .values(**values)
            .returning(appointments)
        )
        result = await self._db.execute(stmt)
        row = result.mappings().first()
        return dict(row) if row else None

    async def find_by_patient(self, patient_id: str) -> list[dict]:
        stmt = (
            select(appointments)
            .where(appointments.c.patient_id == patient_id)
            .order_by(appointments.c.appointment_date.desc(), appointments.c.time_slot.desc())
        )
        result = await self._db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def find_by_doctor(self, doctor_id: UUID) -> list[dict]:
        stmt = (
            select(appointments)
            .where(appointments.c.doctor_id == doctor_id)
            .order_by(appointments.c.appointment_date.desc(), appointments.c.time_slot.desc())
        )
        result = await self._db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def find_on_date(self, doctor_id: UUID, appointment_date: date) -> list[dict]:
        """Live (non-cancelled) appointments of a doctor on a date."""
        stmt = (
            select(appointments)
            .where(
                appointments.c.doctor_id == doctor_id,
                appointments.c.appointment_date == appointment_date,
                appointments.c.status != AppointmentStatus.CANCELLED.value,
            )
            .order_by(appointments.c.time_slot)
        )
        result = await self._db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]
