"""Telemedicine chat messages."""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppointmentNotFoundException, InvalidSenderException
from app.repositories import AppointmentRepository, TelemedicineRepository
from app.schemas.telemedicine import (
    MessageSender,
    TelemedicineMessageCreate,
    TelemedicineMessageResponse,
)

logger = structlog.get_logger(__name__)

VALID_SENDERS = {sender.value for sender in MessageSender}


class TelemedicineService:
    """Stores and returns per-appointment chat messages; clients poll for new ones."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.appointments = AppointmentRepository(db)
        self.messages = TelemedicineRepository(db)

    async def create_message(self, data: TelemedicineMessageCreate) -> TelemedicineMessageResponse:
        """
        Append a message to an appointment's conversation.

        Raises:
            AppointmentNotFoundException: If the appointment does not exist
            InvalidSenderException: If the sender is not doctor or patient
        """
        if not await self.appointments.find_by_id(data.appointment_id):
            raise AppointmentNotFoundException()

        if data.sender not in VALID_SENDERS:
            raise InvalidSenderException()

        message = await self.messages.insert(data.appointment_id, data.sender, data.message)
        await self.db.commit()

        logger.info(
            "telemedicine_message_created",
            appointment_id=str(data.appointment_id),
            sender=data.sender,
        )
        return TelemedicineMessageResponse.model_validate(message)

    async def list_messages(self, appointment_id: UUID) -> list[TelemedicineMessageResponse]:
        """Messages of an appointment in send order."""
        rows = await self.messages.find_by_appointment(appointment_id)
        return [TelemedicineMessageResponse.model_validate(row) for row in rows]
