"""Emergency triage and queue persistence."""

from collections.abc import Iterable
from typing import Any
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.emergency import emergency_queue, emergency_triage
from app.schemas.emergency import QueueStatus


class EmergencyRepository:
    """Keyed access to triage and queue rows; no cross-entity rules."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def insert_triage(self, values: dict[str, Any]) -> dict:
        result = await self._db.execute(
            insert(emergency_triage).values(**values).returning(emergency_triage)
        )
        return dict(result.mappings().one())

    async def find_triage(self, appointment_id: UUID) -> dict | None:
        result = await self._db.execute(
            select(emergency_triage).where(emergency_triage.c.appointment_id == appointment_id)
        )
        row = result.mappings().first()
        return dict(row) if row else None

    async def find_triage_many(self, appointment_ids: Iterable[UUID]) -> dict[UUID, dict]:
        ids = list(appointment_ids)
        if not ids:
            return {}
        result = await self._db.execute(
            select(emergency_triage).where(emergency_triage.c.appointment_id.in_(ids))
        )
        return {row["appointment_id"]: dict(row) for row in result.mappings().all()}

    async def insert_queue(self, appointment_id: UUID, status: QueueStatus) -> dict:
        result = await self._db.execute(
            insert(emergency_queue)
            .values(appointment_id=appointment_id, status=status.value)
            .returning(emergency_queue)
        )
        return dict(result.mappings().one())

    async def find_queue(self, appointment_id: UUID) -> dict | None:
        result = await self._db.execute(
            select(emergency_queue).where(emergency_queue.c.appointment_id == appointment_id)
        )
        row = result.mappings().first()
        return dict(row) if row else None

    async def find_queue_many(self, appointment_ids: Iterable[UUID]) -> dict[UUID, dict]:
        ids = list(appointment_ids)
        if not ids:
            return {}
        result = await self._db.execute(
            select(emergency_queue).where(emergency_queue.c.appointment_id.in_(ids))
        )
        return {row["appointment_id"]: dict(row) for row in result.mappings().all()}

    async def update_queue_status(self, appointment_id: UUID, status: QueueStatus) -> dict | None:
        result = await self._db.execute(
            update(emergency_queue)
            .where(emergency_queue.c.appointment_id == appointment_id)
            .values(status=status.value)
            .returning(emergency_queue)
        )
        row = result.mappings().first()
        return dict(row) if row else None
