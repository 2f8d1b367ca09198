"""Doctor panel endpoints: appointments, emergency queue, prescriptions."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import (
    AppointmentServiceDep,
    EmergencyQueueServiceDep,
    PrescriptionServiceDep,
)
from app.schemas.appointments import AppointmentDetailResponse
from app.schemas.emergency import EmergencyDecisionRequest, EmergencyQueueResponse
from app.schemas.prescriptions import PrescriptionCreate, PrescriptionResponse

router = APIRouter()


@router.get(
    "/appointments",
    response_model=list[AppointmentDetailResponse],
    status_code=status.HTTP_200_OK,
    summary="List doctor appointments",
)
async def list_doctor_appointments(
    service: AppointmentServiceDep,
    doctor_id: UUID = Query(..., description="Doctor ID"),
) -> list[AppointmentDetailResponse]:
    """List all appointments of a doctor with triage, queue and prescriptions."""
    return await service.list_doctor_appointments(doctor_id)


@router.patch(
    "/emergency/approve",
    response_model=EmergencyQueueResponse,
    status_code=status.HTTP_200_OK,
    summary="Approve emergency",
)
async def approve_emergency(
    data: EmergencyDecisionRequest,
    service: EmergencyQueueServiceDep,
) -> EmergencyQueueResponse:
    """Approve a queued emergency appointment."""
    return await service.approve(data.appointment_id)


@router.patch(
    "/emergency/reject",
    response_model=EmergencyQueueResponse,
    status_code=status.HTTP_200_OK,
    summary="Reject emergency",
)
async def reject_emergency(
    data: EmergencyDecisionRequest,
    service: EmergencyQueueServiceDep,
) -> EmergencyQueueResponse:
    """
    Reject a queued emergency appointment.

    The appointment itself stays scheduled.
    """
    return await service.reject(data.appointment_id)


@router.patch(
    "/appointments/{appointment_id}/complete",
    response_model=AppointmentDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Complete appointment",
)
async def complete_appointment(
    appointment_id: UUID,
    service: AppointmentServiceDep,
) -> AppointmentDetailResponse:
    """Mark an appointment as completed."""
    return await service.complete_appointment(appointment_id)


@router.post(
    "/prescriptions",
    response_model=PrescriptionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue prescription",
)
async def save_prescription(
    data: PrescriptionCreate,
    service: PrescriptionServiceDep,
) -> PrescriptionResponse:
    """
    Issue a prescription for an appointment.

    A second call for the same appointment replaces the medications and
    notes of the first.
    """
    return await service.save_prescription(data)


@router.get(
    "/prescriptions",
    response_model=list[PrescriptionResponse],
    status_code=status.HTTP_200_OK,
    summary="List prescriptions",
)
async def list_prescriptions(
    service: PrescriptionServiceDep,
    appointment_id: UUID = Query(..., description="Appointment ID"),
) -> list[PrescriptionResponse]:
    """List prescriptions of an appointment."""
    return await service.list_prescriptions(appointment_id)
