"""Tests for AppointmentService transactional behaviour."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import (
    AlreadyCancelledException,
    InvalidStateException,
    SlotConflictException,
)
from app.models import appointments, emergency_queue, emergency_triage, prescriptions
from app.repositories import AppointmentRepository, EmergencyRepository, PrescriptionRepository
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentStatus,
    AppointmentType,
)
from app.schemas.emergency import QueueStatus, SeverityLevel
from app.schemas.prescriptions import PrescriptionCreate
from app.services.appointment_service import AppointmentService, assess_emergency
from app.services.prescription_service import PrescriptionService
from conftest import MONDAY, PHILADELPHIA


def _booking(doctor: dict, **overrides) -> AppointmentCreate:
    values = {
        "patient_id": "patient-123",
        "doctor_id": doctor["id"],
        "appointment_date": MONDAY,
        "time_slot": "10:00",
        **overrides,
    }
    return AppointmentCreate(**values)


async def _count(db: AsyncSession, table) -> int:
    return (await db.execute(select(func.count()).select_from(table))).scalar_one()


@pytest.mark.asyncio
async def test_assess_emergency_high_and_far(test_doctor: dict):
    data = _booking(
        test_doctor,
        appointment_type="emergency",
        symptoms=["chest pain", "vomiting blood"],
        patient_lat=PHILADELPHIA[0],
        patient_lng=PHILADELPHIA[1],
    )
    assessment = assess_emergency(data, test_doctor)

    assert assessment.score == 6
    assert assessment.severity == SeverityLevel.HIGH
    assert assessment.final_type == AppointmentType.EMERGENCY
    assert assessment.queue_status == QueueStatus.APPROVED
    assert assessment.distance_warning is True


@pytest.mark.asyncio
async def test_assess_emergency_without_doctor_coordinates(test_doctor: dict):
    doctor = {**test_doctor, "latitude": None, "longitude": None}
    data = _booking(
        doctor,
        appointment_type="emergency",
        symptoms=["chest pain", "vomiting blood"],
        patient_lat=PHILADELPHIA[0],
        patient_lng=PHILADELPHIA[1],
    )
    assessment = assess_emergency(data, doctor)

    assert assessment.distance_km is None
    assert assessment.distance_warning is False


@pytest.mark.asyncio
async def test_assess_emergency_low_score_has_no_queue(test_doctor: dict):
    data = _booking(test_doctor, appointment_type="emergency", symptoms=["high fever"])
    assessment = assess_emergency(data, test_doctor)

    assert assessment.final_type == AppointmentType.NORMAL
    assert assessment.queue_status is None


@pytest.mark.asyncio
async def test_unique_index_reports_conflict(
    db_session: AsyncSession,
    test_doctor: dict,
    monkeypatch: pytest.MonkeyPatch,
):
    """Test a booking that slips past the pre-check is rejected by the index."""
    await db_session.execute(
        insert(appointments).values(
            patient_id="patient-456",
            doctor_id=test_doctor["id"],
            appointment_date=MONDAY,
            time_slot="10:00",
        )
    )
    await db_session.commit()

    # Simulate a concurrent booking that committed after our check
    monkeypatch.setattr(AppointmentRepository, "find_conflict", AsyncMock(return_value=None))

    service = AppointmentService(db_session)
    with pytest.raises(SlotConflictException):
        await service.create_appointment(_booking(test_doctor))

    assert await _count(db_session, appointments) == 1


@pytest.mark.asyncio
async def test_competing_prescriptions_converge_on_one_row(
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    test_doctor: dict,
):
    """Test a writer that saw no prescription still overwrites one saved meanwhile."""
    appointment_id = (
        await db_session.execute(
            insert(appointments)
            .values(
                patient_id="patient-123",
                doctor_id=test_doctor["id"],
                appointment_date=MONDAY,
                time_slot="10:00",
            )
            .returning(appointments.c.id)
        )
    ).scalar_one()
    await db_session.commit()

    def _issue(*medications: str) -> PrescriptionCreate:
        return PrescriptionCreate(
            appointment_id=appointment_id,
            doctor_id=test_doctor["id"],
            medications=list(medications),
        )

    async with session_factory() as first_writer, session_factory() as second_writer:
        assert await PrescriptionRepository(second_writer).find_by_appointment(appointment_id) == []

        first = await PrescriptionService(first_writer).save_prescription(
            _issue("Amoxicillin 500mg")
        )
        second = await PrescriptionService(second_writer).save_prescription(
            _issue("Ibuprofen 400mg")
        )

    assert second.id == first.id
    assert second.medications == ["Ibuprofen 400mg"]
    assert second.doctor is not None
    assert second.doctor.name == "Dr. Sarah Johnson"
    assert await _count(db_session, prescriptions) == 1


@pytest.mark.asyncio
async def test_failed_prescription_save_rolls_back(
    db_session: AsyncSession,
    test_doctor: dict,
    monkeypatch: pytest.MonkeyPatch,
):
    appointment_id = (
        await db_session.execute(
            insert(appointments)
            .values(
                patient_id="patient-123",
                doctor_id=test_doctor["id"],
                appointment_date=MONDAY,
                time_slot="10:00",
            )
            .returning(appointments.c.id)
        )
    ).scalar_one()
    await db_session.commit()
    monkeypatch.setattr(
        PrescriptionRepository, "upsert", AsyncMock(side_effect=RuntimeError("disk full"))
    )

    with pytest.raises(RuntimeError):
        await PrescriptionService(db_session).save_prescription(
            PrescriptionCreate(appointment_id=appointment_id, doctor_id=test_doctor["id"])
        )

    assert not db_session.in_transaction()
    assert await _count(db_session, prescriptions) == 0


@pytest.mark.asyncio
async def test_unique_index_ignores_cancelled_rows(db_session: AsyncSession, test_doctor: dict):
    await db_session.execute(
        insert(appointments).values(
            patient_id="patient-456",
            doctor_id=test_doctor["id"],
            appointment_date=MONDAY,
            time_slot="10:00",
            status=AppointmentStatus.CANCELLED.value,
        )
    )
    await db_session.commit()

    created = await AppointmentService(db_session).create_appointment(_booking(test_doctor))

    assert created.status == AppointmentStatus.SCHEDULED
    assert await _count(db_session, appointments) == 2


@pytest.mark.asyncio
async def test_reschedule_race_reports_conflict(
    db_session: AsyncSession,
    test_doctor: dict,
    monkeypatch: pytest.MonkeyPatch,
):
    service = AppointmentService(db_session)
    moving = await service.create_appointment(_booking(test_doctor))
    await service.create_appointment(_booking(test_doctor, time_slot="11:00"))

    monkeypatch.setattr(AppointmentRepository, "find_conflict", AsyncMock(return_value=None))

    with pytest.raises(SlotConflictException):
        await service.reschedule_appointment(
            moving.id,
            AppointmentReschedule(appointment_date=MONDAY, time_slot="11:00"),
        )

    current = await service.get_appointment(moving.id)
    assert current.time_slot == "10:00"


@pytest.mark.asyncio
async def test_emergency_booking_is_atomic(
    db_session: AsyncSession,
    test_doctor: dict,
    monkeypatch: pytest.MonkeyPatch,
):
    """Test a failed triage write leaves no appointment behind."""
    monkeypatch.setattr(
        EmergencyRepository,
        "insert_triage",
        AsyncMock(side_effect=RuntimeError("triage store unavailable")),
    )

    data = _booking(
        test_doctor,
        appointment_type="emergency",
        symptoms=["chest pain", "difficulty breathing"],
    )
    with pytest.raises(RuntimeError):
        await AppointmentService(db_session).create_appointment(data)

    assert await _count(db_session, appointments) == 0
    assert await _count(db_session, emergency_triage) == 0
    assert await _count(db_session, emergency_queue) == 0


@pytest.mark.asyncio
async def test_emergency_records_are_persisted(db_session: AsyncSession, test_doctor: dict):
    data = _booking(
        test_doctor,
        appointment_type="emergency",
        symptoms=["high fever", "accident/trauma"],
    )
    created = await AppointmentService(db_session).create_appointment(data)

    triage = (await db_session.execute(select(emergency_triage))).mappings().one()
    queue = (await db_session.execute(select(emergency_queue))).mappings().one()
    assert triage["appointment_id"] == created.id
    assert triage["emergency_score"] == 4
    assert triage["symptoms"] == ["high fever", "accident/trauma"]
    assert queue["status"] == QueueStatus.PENDING.value


@pytest.mark.asyncio
async def test_complete_is_idempotent(db_session: AsyncSession, test_doctor: dict):
    service = AppointmentService(db_session)
    created = await service.create_appointment(_booking(test_doctor))

    first = await service.complete_appointment(created.id)
    second = await service.complete_appointment(created.id)

    assert first.status == AppointmentStatus.COMPLETED
    assert second.status == AppointmentStatus.COMPLETED
    assert second.completed_at == first.completed_at


@pytest.mark.asyncio
async def test_complete_cancelled_appointment(db_session: AsyncSession, test_doctor: dict):
    service = AppointmentService(db_session)
    created = await service.create_appointment(_booking(test_doctor))
    await service.cancel_appointment(created.id)

    with pytest.raises(InvalidStateException) as exc_info:
        await service.complete_appointment(created.id)

    assert exc_info.value.status == AppointmentStatus.CANCELLED.value


@pytest.mark.asyncio
async def test_cancel_loses_race_to_cancel(
    db_session: AsyncSession,
    test_doctor: dict,
    monkeypatch: pytest.MonkeyPatch,
):
    """Test the guarded update reports a cancel that happened after the read."""
    service = AppointmentService(db_session)
    created = await service.create_appointment(_booking(test_doctor))
    stale = await service.appointments.find_by_id(created.id)

    await service.cancel_appointment(created.id)
    fresh = await service.appointments.find_by_id(created.id)

    # The second cancel reads a stale scheduled row, the update guard catches it
    monkeypatch.setattr(AppointmentRepository, "find_by_id", AsyncMock(side_effect=[stale, fresh]))
    with pytest.raises(AlreadyCancelledException):
        await service.cancel_appointment(created.id)
    monkeypatch.undo()

    current = await service.get_appointment(created.id)
    assert current.status == AppointmentStatus.CANCELLED


@pytest.mark.asyncio
async def test_cancel_already_cancelled(db_session: AsyncSession, test_doctor: dict):
    service = AppointmentService(db_session)
    created = await service.create_appointment(_booking(test_doctor))
    await service.cancel_appointment(created.id)

    with pytest.raises(AlreadyCancelledException):
        await service.cancel_appointment(created.id)


@pytest.mark.asyncio
async def test_doctor_listing_includes_related_records(
    db_session: AsyncSession,
    test_doctor: dict,
):
    service = AppointmentService(db_session)
    await service.create_appointment(_booking(test_doctor))
    await service.create_appointment(
        _booking(
            test_doctor,
            time_slot="11:00",
            appointment_type="emergency",
            symptoms=["chest pain"],
        )
    )

    listing = await service.list_doctor_appointments(test_doctor["id"])

    assert [item.time_slot for item in listing] == ["11:00", "10:00"]
    assert listing[0].emergency_queue.status == QueueStatus.PENDING
    assert listing[1].emergency_queue is None
    assert all(item.doctor.id == test_doctor["id"] for item in listing)
