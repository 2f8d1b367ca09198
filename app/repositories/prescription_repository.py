"""Prescription persistence."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import utc_now
from app.models.prescriptions import prescriptions


class PrescriptionRepository:
    """Keyed access to prescriptions."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def find_by_appointment(self, appointment_id: UUID) -> list[dict]:
        stmt = (
            select(prescriptions)
            .where(prescriptions.c.appointment_id == appointment_id)
            .order_by(prescriptions.c.created_at.desc())
        )
        result = await self._db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def find_by_appointments(self, appointment_ids: Iterable[UUID]) -> dict[UUID, list[dict]]:
        ids = list(appointment_ids)
        grouped: dict[UUID, list[dict]] = {appointment_id: [] for appointment_id in ids}
        if not ids:
            return grouped
        stmt = (
            select(prescriptions)
            .where(prescriptions.c.appointment_id.in_(ids))
            .order_by(prescriptions.c.created_at.desc())
        )
        result = await self._db.execute(stmt)
        for row in result.mappings().all():
            grouped[row["appointment_id"]].append(dict(row))
        return grouped

    def _insert(self) -> postgresql.Insert | sqlite.Insert:
        if self._db.get_bind().dialect.name == "sqlite":
            return sqlite.insert(prescriptions)
        return postgresql.insert(prescriptions)

    async def upsert(
        self,
        appointment_id: UUID,
        doctor_id: UUID,
        medications: list[str],
        notes: str | None,
    ) -> dict:
        """
        Insert the prescription of an appointment or overwrite its medications and notes.

        Runs as one statement on the unique appointment_id, so concurrent first
        issues for the same appointment converge on a single row.
        """
        now = utc_now()
        stmt = self._insert().values(
            appointment_id=appointment_id,
            doctor_id=doctor_id,
            medications=medications,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[prescriptions.c.appointment_id],
            set_={
                "medications": stmt.excluded.medications,
                "notes": stmt.excluded.notes,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(prescriptions)
        result = await self._db.execute(stmt)
        return dict(result.mappings().one())
