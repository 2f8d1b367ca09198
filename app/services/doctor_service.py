"""Doctor service for business logic."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import DoctorNotFoundException
from app.core.redis_client import CacheManager
from app.repositories import AppointmentRepository, DoctorRepository
from app.schemas.doctors import (
    AvailabilityResponse,
    DoctorDetailResponse,
    DoctorFilters,
    DoctorResponse,
)
from app.utils.slots import day_of_week, open_slots


class DoctorService:
    """Service for doctor directory and availability operations."""

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    async def list_doctors(self, db: AsyncSession, filters: DoctorFilters) -> list[DoctorResponse]:
        """List doctors with filtering, search and sorting."""
        rows = await DoctorRepository(db).find_all(filters)
        return [DoctorResponse.model_validate(row) for row in rows]

    async def get_doctor(self, db: AsyncSession, doctor_id: UUID) -> DoctorDetailResponse:
        """
        Get a doctor with weekly availability, cached in Redis.

        Args:
            db: Database session
            doctor_id: Doctor ID

        Returns:
            Doctor details

        Raises:
            DoctorNotFoundException: If the doctor does not exist
        """
        if self.cache:
            cached = self.cache.get_json(CacheManager.doctor_key(doctor_id))
            if cached:
                return DoctorDetailResponse.model_validate(cached)

        repository = DoctorRepository(db)
        doctor = await repository.find_by_id(doctor_id)
        if not doctor:
            raise DoctorNotFoundException()

        doctor["availability"] = await repository.find_availability(doctor_id)
        detail = DoctorDetailResponse.model_validate(doctor)

        if self.cache:
            self.cache.set_json(
                CacheManager.doctor_key(doctor_id),
                detail.model_dump(mode="json"),
                ttl=settings.doctor_cache_ttl,
            )

        return detail

    async def get_doctor_availability(
        self,
        db: AsyncSession,
        doctor_id: UUID,
        on_date: date,
    ) -> AvailabilityResponse:
        """
        Open 30-minute slots for a doctor on a date.

        Every enabled weekly rule for the date's weekday contributes its
        slots; overlapping rules are merged. Slots held by non-cancelled
        appointments are removed. Never cached, bookings change too often.

        Raises:
            DoctorNotFoundException: If the doctor does not exist
        """
        doctors = DoctorRepository(db)
        if not await doctors.find_by_id(doctor_id):
            raise DoctorNotFoundException()

        weekday = day_of_week(on_date)
        windows = [
            (rule["start_time"], rule["end_time"])
            for rule in await doctors.find_availability(doctor_id)
            if rule["day_of_week"] == weekday and rule["is_available"]
        ]

        slots: list[str] = []
        if windows:
            booked = await AppointmentRepository(db).find_on_date(doctor_id, on_date)
            slots = open_slots(windows, (row["time_slot"] for row in booked))

        return AvailabilityResponse(doctor_id=doctor_id, date=on_date.isoformat(), slots=slots)
