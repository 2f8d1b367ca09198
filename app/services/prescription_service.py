"""Prescription service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppointmentNotFoundException, DoctorNotFoundException
from app.repositories import AppointmentRepository, DoctorRepository, PrescriptionRepository
from app.schemas.prescriptions import PrescriptionCreate, PrescriptionResponse

logger = structlog.get_logger(__name__)


class PrescriptionService:
    """Service for issuing prescriptions."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.appointments = AppointmentRepository(db)
        self.doctors = DoctorRepository(db)
        self.prescriptions = PrescriptionRepository(db)

    async def save_prescription(self, data: PrescriptionCreate) -> PrescriptionResponse:
        """
        Create the prescription of an appointment, or overwrite the current one.

        Args:
            data: Medications and notes for the appointment

        Returns:
            The stored prescription with its doctor

        Raises:
            AppointmentNotFoundException: If the appointment does not exist
            DoctorNotFoundException: If the prescribing doctor does not exist
        """
        if not await self.appointments.find_by_id(data.appointment_id):
            raise AppointmentNotFoundException()
        doctor = await self.doctors.find_by_id(data.doctor_id)
        if not doctor:
            raise DoctorNotFoundException()

        try:
            prescription = await self.prescriptions.upsert(
                appointment_id=data.appointment_id,
                doctor_id=data.doctor_id,
                medications=data.medications,
                notes=data.notes,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        if prescription["doctor_id"] != doctor["id"]:
            doctor = await self.doctors.find_by_id(prescription["doctor_id"])

        logger.info(
            "prescription_saved",
            appointment_id=str(data.appointment_id),
            medication_count=len(data.medications),
            replaced=prescription["updated_at"] != prescription["created_at"],
        )
        return PrescriptionResponse.model_validate({**prescription, "doctor": doctor})

    async def list_prescriptions(self, appointment_id: UUID) -> list[PrescriptionResponse]:
        """List prescriptions for an appointment, newest first, each with its doctor."""
        rows = await self.prescriptions.find_by_appointment(appointment_id)
        doctors = await self.doctors.find_by_ids({row["doctor_id"] for row in rows})
        return [
            PrescriptionResponse.model_validate({**row, "doctor": doctors.get(row["doctor_id"])})
            for row in rows
        ]
