"""Appointment lifecycle: booking, emergency triage, reschedule, cancel, complete."""

from dataclasses import dataclass
from datetime import date
from typing import NoReturn
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AlreadyCancelledException,
    AppointmentNotFoundException,
    DoctorNotFoundException,
    InvalidStateException,
    SlotConflictException,
)
from app.models.appointments import ACTIVE_SLOT_INDEX
from app.models.base import utc_now
from app.repositories import (
    AppointmentRepository,
    DoctorRepository,
    EmergencyRepository,
    PrescriptionRepository,
    TelemedicineRepository,
)
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentCreateResponse,
    AppointmentDetailResponse,
    AppointmentReschedule,
    AppointmentStatus,
    AppointmentType,
)
from app.schemas.emergency import QueueStatus, SeverityLevel
from app.utils.distance import distance_in_km, should_show_distance_warning
from app.utils.emergency import (
    calculate_emergency_score,
    get_severity_level,
    should_convert_to_normal,
)

logger = structlog.get_logger(__name__)

# SQLite reports the columns, PostgreSQL the index name
_SLOT_CONFLICT_MARKERS = (
    ACTIVE_SLOT_INDEX,
    "appointments.doctor_id, appointments.appointment_date, appointments.time_slot",
)


def is_slot_conflict(exc: IntegrityError) -> bool:
    """Whether an integrity error came from the live-slot unique index."""
    message = str(exc.orig) if exc.orig is not None else str(exc)
    return any(marker in message for marker in _SLOT_CONFLICT_MARKERS)


@dataclass
class EmergencyAssessment:
    """Outcome of scoring an emergency booking request."""

    score: int
    severity: SeverityLevel
    final_type: AppointmentType
    distance_km: float | None = None
    distance_warning: bool = False

    @property
    def queue_status(self) -> QueueStatus | None:
        """Initial queue status, or None when no queue entry is needed."""
        if self.severity == SeverityLevel.HIGH:
            return QueueStatus.APPROVED
        if self.severity == SeverityLevel.MEDIUM:
            return QueueStatus.PENDING
        return None


def assess_emergency(data: AppointmentCreate, doctor: dict) -> EmergencyAssessment:
    """
    Score the symptoms of an emergency request and evaluate distance.

    Args:
        data: Booking request with type emergency and a non-empty symptom list
        doctor: Target doctor row

    Returns:
        Score, severity, the (possibly downgraded) type and distance info
    """
    score = calculate_emergency_score(data.symptoms)
    severity = get_severity_level(score)
    final_type = (
        AppointmentType.NORMAL if should_convert_to_normal(score) else AppointmentType.EMERGENCY
    )

    assessment = EmergencyAssessment(score=score, severity=severity, final_type=final_type)

    coordinates = (data.patient_lat, data.patient_lng, doctor["latitude"], doctor["longitude"])
    if all(value is not None for value in coordinates):
        assessment.distance_km = distance_in_km(*coordinates)
        assessment.distance_warning = should_show_distance_warning(assessment.distance_km, score)

    return assessment


class AppointmentService:
    """Service for managing the appointment lifecycle."""

    def __init__(self, db: AsyncSession):
        """Initialize service and its repositories with a database session."""
        self.db = db
        self.appointments = AppointmentRepository(db)
        self.doctors = DoctorRepository(db)
        self.emergency = EmergencyRepository(db)
        self.prescriptions = PrescriptionRepository(db)
        self.messages = TelemedicineRepository(db)

    async def create_appointment(self, data: AppointmentCreate) -> AppointmentCreateResponse:
        """
        Book an appointment, triaging emergency requests.

        The appointment, its triage record and queue entry are written in one
        transaction. A concurrent booking of the same slot trips the partial
        unique index and is reported as a slot conflict.

        Args:
            data: Booking request

        Returns:
            Created appointment with related records and the distance warning

        Raises:
            DoctorNotFoundException: If the doctor does not exist
            SlotConflictException: If the slot is already booked
        """
        doctor = await self.doctors.find_by_id(data.doctor_id)
        if not doctor:
            raise DoctorNotFoundException()

        await self._ensure_slot_free(data.doctor_id, data.appointment_date, data.time_slot)

        is_triaged = data.appointment_type == AppointmentType.EMERGENCY and len(data.symptoms) > 0
        assessment = assess_emergency(data, doctor) if is_triaged else None
        final_type = assessment.final_type if assessment else data.appointment_type

        if assessment and assessment.final_type == AppointmentType.NORMAL:
            # No triage row is kept for downgraded requests; the log is the audit trail
            logger.info(
                "emergency_downgraded",
                patient_id=data.patient_id,
                doctor_id=str(data.doctor_id),
                emergency_score=assessment.score,
                severity_level=assessment.severity.value,
            )

        try:
            appointment = await self.appointments.insert(
                {
                    "patient_id": data.patient_id,
                    "doctor_id": data.doctor_id,
                    "appointment_date": data.appointment_date,
                    "time_slot": data.time_slot,
                    "appointment_type": final_type.value,
                    "mode": data.mode.value,
                    "status": AppointmentStatus.SCHEDULED.value,
                }
            )

            triage = None
            queue = None
            if assessment and assessment.final_type == AppointmentType.EMERGENCY:
                triage = await self.emergency.insert_triage(
                    {
                        "appointment_id": appointment["id"],
                        "symptoms": list(data.symptoms),
                        "emergency_score": assessment.score,
                        "severity_level": assessment.severity.value,
                        "patient_lat": data.patient_lat,
                        "patient_lng": data.patient_lng,
                        "distance_km": assessment.distance_km,
                    }
                )
                if assessment.queue_status is not None:
                    queue = await self.emergency.insert_queue(
                        appointment["id"], assessment.queue_status
                    )

            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if is_slot_conflict(e):
                logger.info(
                    "slot_conflict",
                    doctor_id=str(data.doctor_id),
                    appointment_date=data.appointment_date.isoformat(),
                    time_slot=data.time_slot,
                    detected_by="unique_index",
                )
                raise SlotConflictException() from e
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "appointment_created",
            appointment_id=str(appointment["id"]),
            doctor_id=str(data.doctor_id),
            appointment_type=final_type.value,
            mode=data.mode.value,
        )
        if queue:
            logger.info(
                "emergency_queued",
                appointment_id=str(appointment["id"]),
                severity_level=triage["severity_level"] if triage else None,
                queue_status=queue["status"],
            )

        return AppointmentCreateResponse.model_validate(
            {
                **appointment,
                "doctor": doctor,
                "emergency_triage": triage,
                "emergency_queue": queue,
                "distance_warning": assessment.distance_warning if assessment else False,
            }
        )

    async def get_appointment(self, appointment_id: UUID) -> AppointmentDetailResponse:
        """
        Get an appointment with triage, queue, prescriptions and messages.

        Raises:
            AppointmentNotFoundException: If the appointment does not exist
        """
        appointment = await self._get_or_404(appointment_id)
        return await self._build_detail(appointment, include_messages=True)

    async def list_patient_appointments(self, patient_id: str) -> list[AppointmentDetailResponse]:
        """List a patient's appointments, latest date first."""
        rows = await self.appointments.find_by_patient(patient_id)
        return await self._build_details(rows)

    async def list_doctor_appointments(self, doctor_id: UUID) -> list[AppointmentDetailResponse]:
        """List a doctor's appointments for the doctor panel, latest date first."""
        rows = await self.appointments.find_by_doctor(doctor_id)
        return await self._build_details(rows)

    async def reschedule_appointment(
        self,
        appointment_id: UUID,
        data: AppointmentReschedule,
    ) -> AppointmentDetailResponse:
        """
        Move a scheduled appointment to another date/slot.

        Args:
            appointment_id: Appointment ID
            data: New date and slot

        Returns:
            Updated appointment; status is unchanged

        Raises:
            AppointmentNotFoundException: If the appointment does not exist
            InvalidStateException: If the appointment is cancelled or completed
            SlotConflictException: If another appointment holds the new slot
        """
        current = await self._get_or_404(appointment_id)
        self._ensure_scheduled(current, "reschedule")

        await self._ensure_slot_free(
            current["doctor_id"],
            data.appointment_date,
            data.time_slot,
            exclude_id=appointment_id,
        )

        try:
            updated = await self.appointments.update_if_status(
                appointment_id,
                {AppointmentStatus.SCHEDULED},
                {"appointment_date": data.appointment_date, "time_slot": data.time_slot},
            )
            if updated is None:
                await self.db.rollback()
                await self._raise_transition_error(appointment_id, "reschedule")
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if is_slot_conflict(e):
                raise SlotConflictException() from e
            raise

        logger.info(
            "appointment_rescheduled",
            appointment_id=str(appointment_id),
            from_date=current["appointment_date"].isoformat(),
            from_slot=current["time_slot"],
            to_date=data.appointment_date.isoformat(),
            to_slot=data.time_slot,
        )
        return await self._build_detail(updated)

    async def cancel_appointment(self, appointment_id: UUID) -> AppointmentDetailResponse:
        """
        Cancel a scheduled appointment (soft, the record is kept).

        Raises:
            AppointmentNotFoundException: If the appointment does not exist
            AlreadyCancelledException: If it is already cancelled
            InvalidStateException: If it is completed
        """
        current = await self._get_or_404(appointment_id)
        if current["status"] == AppointmentStatus.CANCELLED.value:
            raise AlreadyCancelledException()
        self._ensure_scheduled(current, "cancel")

        updated = await self.appointments.update_if_status(
            appointment_id,
            {AppointmentStatus.SCHEDULED},
            {"status": AppointmentStatus.CANCELLED.value, "cancelled_at": utc_now()},
        )
        if updated is None:
            await self.db.rollback()
            await self._raise_transition_error(appointment_id, "cancel")
        await self.db.commit()

        logger.info("appointment_cancelled", appointment_id=str(appointment_id))
        return await self._build_detail(updated)

    async def complete_appointment(self, appointment_id: UUID) -> AppointmentDetailResponse:
        """
        Mark an appointment completed. Completing twice is allowed.

        Raises:
            AppointmentNotFoundException: If the appointment does not exist
            InvalidStateException: If it is cancelled
        """
        current = await self._get_or_404(appointment_id)
        if current["status"] == AppointmentStatus.CANCELLED.value:
            raise InvalidStateException("complete", AppointmentStatus.CANCELLED.value)

        updated = await self.appointments.update_if_status(
            appointment_id,
            {AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED},
            {
                "status": AppointmentStatus.COMPLETED.value,
                "completed_at": current["completed_at"] or utc_now(),
            },
        )
        if updated is None:
            await self.db.rollback()
            await self._raise_transition_error(appointment_id, "complete")
        await self.db.commit()

        logger.info("appointment_completed", appointment_id=str(appointment_id))
        return await self._build_detail(updated)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_or_404(self, appointment_id: UUID) -> dict:
        appointment = await self.appointments.find_by_id(appointment_id)
        if not appointment:
            raise AppointmentNotFoundException()
        return appointment

    async def _ensure_slot_free(
        self,
        doctor_id: UUID,
        appointment_date: date,
        time_slot: str,
        exclude_id: UUID | None = None,
    ) -> None:
        conflict = await self.appointments.find_conflict(
            doctor_id, appointment_date, time_slot, exclude_id=exclude_id
        )
        if conflict:
            logger.info(
                "slot_conflict",
                doctor_id=str(doctor_id),
                appointment_date=appointment_date.isoformat(),
                time_slot=time_slot,
                conflicting_appointment_id=str(conflict["id"]),
            )
            raise SlotConflictException()

    @staticmethod
    def _ensure_scheduled(appointment: dict, operation: str) -> None:
        status = appointment["status"]
        if status != AppointmentStatus.SCHEDULED.value:
            raise InvalidStateException(operation, status)

    async def _raise_transition_error(self, appointment_id: UUID, operation: str) -> NoReturn:
        """Re-read after a guarded update matched nothing and raise the reason."""
        current = await self._get_or_404(appointment_id)
        if operation == "cancel" and current["status"] == AppointmentStatus.CANCELLED.value:
            raise AlreadyCancelledException()
        raise InvalidStateException(operation, current["status"])

    async def _build_detail(
        self,
        appointment: dict,
        include_messages: bool = False,
    ) -> AppointmentDetailResponse:
        appointment_id = appointment["id"]
        detail = {
            **appointment,
            "doctor": await self.doctors.find_by_id(appointment["doctor_id"]),
            "emergency_triage": await self.emergency.find_triage(appointment_id),
            "emergency_queue": await self.emergency.find_queue(appointment_id),
            "prescriptions": await self.prescriptions.find_by_appointment(appointment_id),
        }
        if include_messages:
            detail["telemedicine_messages"] = await self.messages.find_by_appointment(
                appointment_id
            )
        return AppointmentDetailResponse.model_validate(detail)

    async def _build_details(self, rows: list[dict]) -> list[AppointmentDetailResponse]:
        if not rows:
            return []

        ids = [row["id"] for row in rows]
        doctors = await self.doctors.find_by_ids({row["doctor_id"] for row in rows})
        triage = await self.emergency.find_triage_many(ids)
        queue = await self.emergency.find_queue_many(ids)
        prescriptions = await self.prescriptions.find_by_appointments(ids)

        return [
            AppointmentDetailResponse.model_validate(
                {
                    **row,
                    "doctor": doctors.get(row["doctor_id"]),
                    "emergency_triage": triage.get(row["id"]),
                    "emergency_queue": queue.get(row["id"]),
                    "prescriptions": prescriptions.get(row["id"], []),
                }
            )
            for row in rows
        ]
