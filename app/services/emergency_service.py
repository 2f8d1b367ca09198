"""Emergency queue review for the doctor panel."""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppointmentNotFoundException, NotInQueueException
from app.repositories import AppointmentRepository, EmergencyRepository
from app.schemas.emergency import EmergencyQueueResponse, QueueStatus

logger = structlog.get_logger(__name__)


class EmergencyQueueService:
    """
    Approve or reject queued emergencies.

    Queue status is independent of appointment status: rejecting an entry
    does not cancel the appointment.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.appointments = AppointmentRepository(db)
        self.emergency = EmergencyRepository(db)

    async def approve(self, appointment_id: UUID) -> EmergencyQueueResponse:
        """Approve the queue entry of an appointment."""
        return await self._set_status(appointment_id, QueueStatus.APPROVED)

    async def reject(self, appointment_id: UUID) -> EmergencyQueueResponse:
        """Reject the queue entry of an appointment."""
        return await self._set_status(appointment_id, QueueStatus.REJECTED)

    async def _set_status(
        self, appointment_id: UUID, status: QueueStatus
    ) -> EmergencyQueueResponse:
        if not await self.appointments.find_by_id(appointment_id):
            raise AppointmentNotFoundException()

        entry = await self.emergency.find_queue(appointment_id)
        if not entry:
            raise NotInQueueException()

        updated = await self.emergency.update_queue_status(appointment_id, status)
        await self.db.commit()

        logger.info(
            "emergency_queue_updated",
            appointment_id=str(appointment_id),
            previous_status=entry["status"],
            status=status.value,
        )
        return EmergencyQueueResponse.model_validate(updated)
