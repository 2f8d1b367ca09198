"""Doctor and weekly availability persistence."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.doctors import doctor_availability, doctors
from app.schemas.doctors import DoctorFilters, DoctorSortField


class DoctorRepository:
    """Read access to doctors and their weekly schedules."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def find_by_id(self, doctor_id: UUID) -> dict | None:
        """Return the doctor row or None."""
        result = await self._db.execute(select(doctors).where(doctors.c.id == doctor_id))
        row = result.mappings().first()
        return dict(row) if row else None

    async def find_by_ids(self, doctor_ids: Iterable[UUID]) -> dict[UUID, dict]:
        """Return doctors keyed by id."""
        ids = list(doctor_ids)
        if not ids:
            return {}
        result = await self._db.execute(select(doctors).where(doctors.c.id.in_(ids)))
        return {row["id"]: dict(row) for row in result.mappings().all()}

    async def find_availability(self, doctor_id: UUID) -> list[dict]:
        """Return all weekly availability rules of a doctor."""
        stmt = (
            select(doctor_availability)
            .where(doctor_availability.c.doctor_id == doctor_id)
            .order_by(doctor_availability.c.day_of_week, doctor_availability.c.start_time)
        )
        result = await self._db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def find_all(self, filters: DoctorFilters) -> list[dict]:
        """
        List doctors matching the filters.

        Args:
            filters: Exact/contains filters, free-text search and ordering

        Returns:
            Matching doctor rows
        """
        conditions: list = []

        if filters.specialty:
            conditions.append(doctors.c.specialty == filters.specialty)

        if filters.location:
            conditions.append(doctors.c.location.ilike(f"%{filters.location}%"))

        if filters.telemedicine_available is not None:
            conditions.append(doctors.c.telemedicine_available == filters.telemedicine_available)

        if filters.search:
            term = f"%{filters.search}%"
            conditions.append(
                or_(
                    doctors.c.name.ilike(term),
                    doctors.c.specialty.ilike(term),
                    doctors.c.location.ilike(term),
                )
            )
        elif filters.name:
            conditions.append(doctors.c.name.ilike(f"%{filters.name}%"))

        if filters.sort_by == DoctorSortField.RATING:
            order_by = [doctors.c.rating.desc(), doctors.c.name]
        elif filters.sort_by == DoctorSortField.EXPERIENCE:
            order_by = [doctors.c.experience_years.desc(), doctors.c.name]
        else:
            order_by = [doctors.c.created_at.desc(), doctors.c.name]

        stmt = select(doctors).where(*conditions).order_by(*order_by)
        result = await self._db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]
