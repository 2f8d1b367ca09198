"""Telemedicine message persistence."""

from uuid import UUID

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.telemedicine import telemedicine_messages


class TelemedicineRepository:
    """Append-only message log per appointment."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def insert(self, appointment_id: UUID, sender: str, message: str) -> dict:
        result = await self._db.execute(
            insert(telemedicine_messages)
            .values(appointment_id=appointment_id, sender=sender, message=message)
            .returning(telemedicine_messages)
        )
        return dict(result.mappings().one())

    async def find_by_appointment(self, appointment_id: UUID) -> list[dict]:
        """
        Messages in the order they were sent.

        Send order holds to timestamp resolution; messages sharing a created_at
        fall back to id order so repeated reads agree.
        """
        stmt = (
            select(telemedicine_messages)
            .where(telemedicine_messages.c.appointment_id == appointment_id)
            .order_by(telemedicine_messages.c.created_at.asc(), telemedicine_messages.c.id.asc())
        )
        result = await self._db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]
