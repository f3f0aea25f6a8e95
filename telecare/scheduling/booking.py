import logging
from datetime import datetime, time as dt_time
from typing import Any, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from telecare import crud
from telecare.core import metrics
from telecare.core.exceptions import (
    AppointmentNotFound,
    BestEffortFailure,
    BookingValidationError,
    ConflictError,
    UpstreamUnavailable,
)
from telecare.models.appointment import Appointment
from telecare.models.booking_event import BookingEvent
from telecare.schemas.appointment import AppointmentCreate
from .availability import AvailabilityService, format_time, parse_time
from .locks import get_booking_lock

logger = logging.getLogger(__name__)

APPOINTMENT_CREATED = "appointment_created"
DEFAULT_DOCTOR_NAME = "Doctor"


class BookingOrchestrator:
    """Books a chosen slot and records the related bookkeeping.

    The appointment and its outbox event are committed together under a
    per-doctor lock, after availability has been re-checked. The
    patient-doctor assignment and the timeline event are written afterwards
    and never undo the appointment when they fail; the outbox event stays
    ``failed`` so ``process_pending_events`` can replay them.
    """

    def __init__(self, db: Session, availability: Optional[AvailabilityService] = None, lock=None, catalog=None):
        self.db = db
        self.availability = availability or AvailabilityService(db)
        self.lock = lock or get_booking_lock()
        self.catalog = catalog or crud.doctor

    # Booking
    def book_appointment(self, request: AppointmentCreate) -> Appointment:
        scheduled_time = self._validate(request)

        with self.lock.hold(request.doctor_id):
            doctor = self._get_doctor(request.doctor_id)
            if doctor is None or not doctor.is_active:
                raise BookingValidationError(f"Doctor {request.doctor_id} not found")

            self._ensure_slot_available(request, scheduled_time)
            appointment, event = self._persist(request, scheduled_time)

        logger.info(
            f"Booked appointment {appointment.id} for patient {appointment.patient_id} "
            f"with doctor {appointment.doctor_id} on {appointment.scheduled_date} at {scheduled_time}"
        )
        metrics.appointments_created_total.inc()

        self._run_side_effects(appointment, event, doctor)
        return appointment

    def _validate(self, request: AppointmentCreate) -> str:
        missing = [
            name
            for name in ("patient_id", "doctor_id", "scheduled_date", "scheduled_time")
            if getattr(request, name) in (None, "")
        ]
        if missing:
            raise BookingValidationError(f"Missing required fields: {', '.join(missing)}")
        if request.duration_minutes <= 0:
            raise BookingValidationError("duration_minutes must be positive")
        minutes = parse_time(request.scheduled_time)
        if minutes >= 24 * 60:
            raise BookingValidationError(f"Invalid time of day: {request.scheduled_time}")
        return format_time(minutes)

    def _get_doctor(self, doctor_id: int) -> Any:
        try:
            return self.catalog.get(self.db, doctor_id)
        except SQLAlchemyError as e:
            raise UpstreamUnavailable("Doctor catalog unavailable") from e

    def _ensure_slot_available(self, request: AppointmentCreate, scheduled_time: str) -> None:
        availability = self.availability.get_doctor_availability(
            request.doctor_id, request.scheduled_date, request.duration_minutes
        )
        slot = next((s for s in availability.slots if s.time == scheduled_time), None)
        if slot is None or not slot.available:
            metrics.booking_conflicts_total.inc()
            logger.warning(
                f"Slot {request.scheduled_date} {scheduled_time} is not available "
                f"for doctor {request.doctor_id}"
            )
            raise ConflictError("Selected time slot is not available")

    def _persist(self, request: AppointmentCreate, scheduled_time: str) -> Tuple[Appointment, BookingEvent]:
        try:
            appointment = crud.appointment.add_scheduled(
                self.db, obj_in=request, scheduled_time=scheduled_time
            )
            event = crud.booking_event.add_event(
                self.db,
                event_type=APPOINTMENT_CREATED,
                appointment_id=appointment.id,
                payload={
                    "patient_id": appointment.patient_id,
                    "doctor_id": appointment.doctor_id,
                    "ai_report_id": appointment.ai_report_id,
                    "scheduled_date": appointment.scheduled_date.isoformat(),
                    "scheduled_time": scheduled_time,
                },
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            metrics.booking_conflicts_total.inc()
            logger.warning(f"Concurrent booking detected for doctor {request.doctor_id}: {e.orig}")
            raise ConflictError("Selected time slot is not available") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error persisting appointment: {e}")
            raise UpstreamUnavailable("Appointment store unavailable") from e
        return appointment, event

    # Best-effort side effects
    def _run_side_effects(self, appointment: Appointment, event: BookingEvent, doctor: Any = None) -> List[BestEffortFailure]:
        failures = []
        for effect, writer in (
            ("assignment", self.create_patient_doctor_assignment),
            ("timeline", self.create_timeline_event),
        ):
            try:
                writer(appointment, doctor)
            except Exception as e:
                self.db.rollback()
                failure = e if isinstance(e, BestEffortFailure) else BestEffortFailure(effect, str(e))
                metrics.side_effect_failures_total.labels(effect=effect).inc()
                logger.error(f"Booking side effect '{effect}' failed for appointment {appointment.id}: {e}")
                failures.append(failure)

        try:
            if failures:
                reason = "; ".join(f"{f.effect}: {f.message}" for f in failures)
                crud.booking_event.mark_failed(self.db, event.id, reason)
            else:
                crud.booking_event.mark_processed(self.db, event.id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Could not update booking event {event.id}: {e}")
        return failures

    def create_patient_doctor_assignment(self, appointment: Appointment, doctor: Any = None):
        existing = crud.assignment.get_existing(
            self.db,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            ai_report_id=appointment.ai_report_id,
        )
        if existing:
            return existing
        try:
            return crud.assignment.create(
                self.db,
                patient_id=appointment.patient_id,
                doctor_id=appointment.doctor_id,
                ai_report_id=appointment.ai_report_id,
            )
        except IntegrityError:
            # Created concurrently
            self.db.rollback()
            logger.debug(f"Assignment already exists for appointment {appointment.id}")
            return None
        except SQLAlchemyError as e:
            raise BestEffortFailure("assignment", str(e)) from e

    def create_timeline_event(self, appointment: Appointment, doctor: Any = None):
        existing = crud.timeline_event.get_for_appointment(self.db, appointment.id)
        if existing:
            return existing

        if doctor is None:
            doctor = self.catalog.get(self.db, appointment.doctor_id)
        doctor_name = (getattr(doctor, "full_name", None) or DEFAULT_DOCTOR_NAME) if doctor else DEFAULT_DOCTOR_NAME
        specialty = getattr(doctor, "specialty", None) or ""

        mode = "Teleconsultation" if appointment.appointment_type == "teleconsultation" else "In-office"
        description = f"{mode} appointment with {doctor_name}"
        if specialty:
            description += f" ({specialty})"

        hours, minutes = divmod(parse_time(appointment.scheduled_time), 60)
        event_date = datetime.combine(appointment.scheduled_date, dt_time(hours, minutes))

        try:
            return crud.timeline_event.create_appointment_event(
                self.db,
                patient_id=appointment.patient_id,
                appointment_id=appointment.id,
                title=f"Consultation scheduled with {doctor_name}",
                description=description,
                event_date=event_date,
                ai_report_id=appointment.ai_report_id,
            )
        except SQLAlchemyError as e:
            raise BestEffortFailure("timeline", str(e)) from e

    def process_pending_events(self, limit: int = 100) -> int:
        """Replay side effects of pending or failed ``appointment_created`` events."""
        processed = 0
        for event in crud.booking_event.get_replayable_events(self.db, limit=limit):
            appointment = crud.appointment.get(self.db, event.appointment_id)
            if appointment is None:
                crud.booking_event.mark_failed(self.db, event.id, "appointment missing")
                continue
            if not self._run_side_effects(appointment, event):
                processed += 1
        logger.info(f"Replayed {processed} booking event(s)")
        return processed

    # Queries and follow-ups
    def get_appointment(self, appointment_id: int) -> Optional[Appointment]:
        return crud.appointment.get(self.db, appointment_id)

    def get_patient_appointments(self, patient_id: int) -> List[Appointment]:
        return crud.appointment.get_patient_appointments(self.db, patient_id=patient_id)

    def share_report_with_doctor(self, appointment_id: int, ai_report_id: str) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        if appointment is None:
            raise AppointmentNotFound(f"Appointment {appointment_id} not found")
        try:
            return crud.appointment.share_report(self.db, db_obj=appointment, ai_report_id=ai_report_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamUnavailable("Appointment store unavailable") from e
