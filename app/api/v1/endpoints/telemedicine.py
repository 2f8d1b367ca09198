"""Telemedicine chat endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import TelemedicineServiceDep
from app.schemas.telemedicine import TelemedicineMessageCreate, TelemedicineMessageResponse

router = APIRouter()


@router.post(
    "/messages",
    response_model=TelemedicineMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send message",
)
async def create_message(
    data: TelemedicineMessageCreate,
    service: TelemedicineServiceDep,
) -> TelemedicineMessageResponse:
    """Post a chat message from the doctor or the patient."""
    return await service.create_message(data)


@router.get(
    "/messages",
    response_model=list[TelemedicineMessageResponse],
    status_code=status.HTTP_200_OK,
    summary="List messages",
)
async def list_messages(
    service: TelemedicineServiceDep,
    appointment_id: UUID = Query(..., description="Appointment ID"),
) -> list[TelemedicineMessageResponse]:
    """
    Get the conversation of an appointment, oldest first.

    Clients poll this endpoint to pick up new messages.
    """
    return await service.list_messages(appointment_id)
