"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.redis_client import CacheManager, get_redis_client
from app.database import get_db
from app.services.appointment_service import AppointmentService
from app.services.doctor_service import DoctorService
from app.services.emergency_service import EmergencyQueueService
from app.services.prescription_service import PrescriptionService
from app.services.telemedicine_service import TelemedicineService


def get_cache_manager() -> CacheManager | None:
    """Doctor cache, or None when caching is disabled."""
    if not settings.cache_enabled:
        return None
    return CacheManager(get_redis_client())


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
Cache = Annotated[CacheManager | None, Depends(get_cache_manager)]


def get_doctor_service(cache_manager: Cache) -> DoctorService:
    """Get doctor service instance."""
    return DoctorService(cache_manager=cache_manager)


def get_appointment_service(db: DatabaseSession) -> AppointmentService:
    return AppointmentService(db)


def get_emergency_queue_service(db: DatabaseSession) -> EmergencyQueueService:
    return EmergencyQueueService(db)


def get_prescription_service(db: DatabaseSession) -> PrescriptionService:
    return PrescriptionService(db)


def get_telemedicine_service(db: DatabaseSession) -> TelemedicineService:
    return TelemedicineService(db)


DoctorServiceDep = Annotated[DoctorService, Depends(get_doctor_service)]
AppointmentServiceDep = Annotated[AppointmentService, Depends(get_appointment_service)]
EmergencyQueueServiceDep = Annotated[EmergencyQueueService, Depends(get_emergency_queue_service)]
PrescriptionServiceDep = Annotated[PrescriptionService, Depends(get_prescription_service)]
TelemedicineServiceDep = Annotated[TelemedicineService, Depends(get_telemedicine_service)]
