"""Appointment endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import AppointmentServiceDep
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentCreateResponse,
    AppointmentDetailResponse,
    AppointmentReschedule,
)

router = APIRouter()


@router.post(
    "/",
    response_model=AppointmentCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book appointment",
)
async def create_appointment(
    data: AppointmentCreate,
    service: AppointmentServiceDep,
) -> AppointmentCreateResponse:
    """
    Book a new appointment.

    Emergency bookings are scored from their symptoms: low scores are stored
    as normal appointments, medium scores are queued for doctor review and
    high scores are approved immediately.

    Args:
        data: Booking request
        service: Appointment service

    Returns:
        Created appointment with triage/queue data and the distance warning
    """
    return await service.create_appointment(data)


@router.get(
    "/",
    response_model=list[AppointmentDetailResponse],
    status_code=status.HTTP_200_OK,
    summary="List patient appointments",
)
async def list_appointments(
    service: AppointmentServiceDep,
    patient_id: str = Query(..., min_length=1, description="Patient identifier"),
) -> list[AppointmentDetailResponse]:
    """List a patient's appointments, latest first."""
    return await service.list_patient_appointments(patient_id)


@router.get(
    "/{appointment_id}",
    response_model=AppointmentDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get appointment by ID",
)
async def get_appointment(
    appointment_id: UUID,
    service: AppointmentServiceDep,
) -> AppointmentDetailResponse:
    """
    Get a specific appointment with triage, queue, prescriptions and messages.

    Raises:
        AppointmentNotFoundException: If appointment not found
    """
    return await service.get_appointment(appointment_id)


@router.patch(
    "/{appointment_id}/reschedule",
    response_model=AppointmentDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Reschedule appointment",
)
async def reschedule_appointment(
    appointment_id: UUID,
    data: AppointmentReschedule,
    service: AppointmentServiceDep,
) -> AppointmentDetailResponse:
    """Move a scheduled appointment to a new date and slot."""
    return await service.reschedule_appointment(appointment_id, data)


@router.delete(
    "/{appointment_id}",
    response_model=AppointmentDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Cancel appointment",
)
async def cancel_appointment(
    appointment_id: UUID,
    service: AppointmentServiceDep,
) -> AppointmentDetailResponse:
    """
    Cancel an appointment.

    The record is kept with status `cancelled` and its slot becomes bookable
    again.
    """
    return await service.cancel_appointment(appointment_id)
