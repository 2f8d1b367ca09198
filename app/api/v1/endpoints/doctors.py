"""Doctor directory endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import DatabaseSession, DoctorServiceDep
from app.schemas.doctors import (
    AvailabilityResponse,
    DoctorDetailResponse,
    DoctorFilters,
    DoctorResponse,
    DoctorSortField,
)

router = APIRouter()


@router.get(
    "/",
    response_model=list[DoctorResponse],
    status_code=status.HTTP_200_OK,
    summary="List doctors",
)
async def list_doctors(
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
    specialty: str | None = Query(None, description="Exact specialty"),
    location: str | None = Query(None, description="Location contains"),
    telemedicine_available: bool | None = Query(None, description="Offers telemedicine"),
    name: str | None = Query(None, description="Name contains"),
    search: str | None = Query(None, description="Matches name, specialty or location"),
    sort_by: DoctorSortField | None = Query(None, description="rating or experience"),
) -> list[DoctorResponse]:
    """
    List doctors with optional filtering.

    - **specialty**: exact specialty match
    - **location**: substring match on location
    - **telemedicine_available**: only doctors offering telemedicine
    - **search**: substring match on name, specialty or location
    - **sort_by**: `rating` or `experience`, highest first
    """
    filters = DoctorFilters(
        specialty=specialty,
        location=location,
        telemedicine_available=telemedicine_available,
        name=name,
        search=search,
        sort_by=sort_by,
    )
    return await doctor_service.list_doctors(db, filters)


@router.get(
    "/{doctor_id}",
    response_model=DoctorDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get doctor by ID",
)
async def get_doctor(
    doctor_id: UUID,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
) -> DoctorDetailResponse:
    """Get a doctor with weekly availability rules."""
    return await doctor_service.get_doctor(db, doctor_id)


@router.get(
    "/{doctor_id}/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_200_OK,
    summary="Open slots on a date",
)
async def get_doctor_availability(
    doctor_id: UUID,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
    on_date: date = Query(..., alias="date", description="Date in YYYY-MM-DD format"),
) -> AvailabilityResponse:
    """
    Get the doctor's free 30-minute slots for a date.

    Args:
        doctor_id: Doctor ID
        db: Database session
        doctor_service: Doctor service
        on_date: Requested date

    Returns:
        Sorted "HH:MM" slots
    """
    return await doctor_service.get_doctor_availability(db, doctor_id, on_date)
