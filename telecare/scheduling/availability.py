"""Bookable slot computation.

Times are "HH:MM" strings handled as integer minutes since midnight. Values
are never wrapped across midnight: ``add_minutes("23:30", 60)`` is ``"24:30"``.
Working hours are bounded to [0, 24] by configuration, so generated slots
never start on the next day.
"""

import logging
from datetime import date
from typing import Any, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from telecare import crud
from telecare.core.config import settings
from telecare.core.exceptions import BookingValidationError, UpstreamUnavailable
from telecare.models.appointment import ACTIVE_STATUSES
from telecare.schemas.availability import TimeSlot, DoctorAvailability

logger = logging.getLogger(__name__)

DEFAULT_APPOINTMENT_MINUTES = 30


def parse_time(value: str) -> int:
    """Parse "HH:MM" (seconds are ignored) into minutes since midnight."""
    if not isinstance(value, str):
        raise BookingValidationError(f"Invalid time value: {value!r}")
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise BookingValidationError(f"Invalid time format: {value!r}, expected HH:MM")
    hours, minutes = int(parts[0]), int(parts[1])
    if minutes >= 60:
        raise BookingValidationError(f"Invalid minutes in time: {value!r}")
    return hours * 60 + minutes


def format_time(total_minutes: int) -> str:
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def add_minutes(time: str, minutes: int) -> str:
    return format_time(parse_time(time) + minutes)


def generate_working_slots(
    day: date,
    slot_duration_minutes: int,
    day_start_hour: int = 9,
    day_end_hour: int = 18,
) -> List[TimeSlot]:
    """Every slot start in [day_start_hour:00, day_end_hour:00), all available.

    ``day`` does not influence the result; slots depend only on working hours.
    """
    if slot_duration_minutes <= 0:
        raise BookingValidationError("Slot duration must be a positive number of minutes")
    if not (0 <= day_start_hour < day_end_hour <= 24):
        raise BookingValidationError(
            f"Invalid working hours {day_start_hour}-{day_end_hour} for {day}"
        )
    start, end = day_start_hour * 60, day_end_hour * 60
    return [
        TimeSlot(time=format_time(minute), available=True)
        for minute in range(start, end, slot_duration_minutes)
    ]


def overlaps(start_a: int, duration_a: int, start_b: int, duration_b: int) -> bool:
    """Half-open interval intersection of [a, a+da) and [b, b+db)."""
    return start_a < start_b + duration_b and start_b < start_a + duration_a


def overlaps_three_case(slot_time: str, slot_duration: int, appointment_time: str, appointment_duration: int) -> bool:
    """Start-inside / end-inside / fully-containing formulation of ``overlaps``.

    Equivalent to ``overlaps`` for positive durations.
    """
    slot_time = add_minutes(slot_time, 0)
    appointment_time = add_minutes(appointment_time, 0)
    slot_end = add_minutes(slot_time, slot_duration)
    appointment_end = add_minutes(appointment_time, appointment_duration)
    return (
        (appointment_time <= slot_time < appointment_end)
        or (appointment_time < slot_end <= appointment_end)
        or (slot_time <= appointment_time and slot_end >= appointment_end)
    )


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def _blocking_intervals(existing_appointments: Iterable[Any]) -> List[tuple]:
    intervals = []
    for record in existing_appointments:
        status = _field(record, "status")
        if status is not None and status not in ACTIVE_STATUSES:
            continue
        start = parse_time(_field(record, "scheduled_time"))
        duration = _field(record, "duration_minutes") or DEFAULT_APPOINTMENT_MINUTES
        intervals.append((start, duration))
    return intervals


def mark_conflicts(
    slots: List[TimeSlot],
    existing_appointments: Iterable[Any],
    slot_duration_minutes: int,
) -> List[TimeSlot]:
    """Recompute slot availability against scheduled/confirmed appointments.

    Appointments may be ORM rows or mappings exposing ``scheduled_time``,
    ``duration_minutes`` and ``status``. Slots keep their order and none is
    removed.
    """
    intervals = _blocking_intervals(existing_appointments)
    result = []
    for slot in slots:
        start = parse_time(slot.time)
        taken = any(
            overlaps(start, slot_duration_minutes, appt_start, appt_duration)
            for appt_start, appt_duration in intervals
        )
        result.append(TimeSlot(time=slot.time, available=not taken))
    return result


class AvailabilityService:
    def __init__(self, db: Session, day_start_hour: Optional[int] = None, day_end_hour: Optional[int] = None):
        self.db = db
        self.day_start_hour = settings.DAY_START_HOUR if day_start_hour is None else day_start_hour
        self.day_end_hour = settings.DAY_END_HOUR if day_end_hour is None else day_end_hour

    def get_doctor_availability(
        self, doctor_id: int, day: date, duration_minutes: Optional[int] = None
    ) -> DoctorAvailability:
        duration = duration_minutes or settings.DEFAULT_SLOT_MINUTES
        try:
            existing = crud.appointment.get_active_for_doctor_on_date(
                self.db, doctor_id=doctor_id, day=day
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching appointments for doctor {doctor_id} on {day}: {e}")
            raise UpstreamUnavailable("Appointment store unavailable") from e

        slots = generate_working_slots(day, duration, self.day_start_hour, self.day_end_hour)
        slots = mark_conflicts(slots, existing, duration)
        return DoctorAvailability(
            doctor_id=doctor_id,
            date=day,
            duration_minutes=duration,
            slots=slots,
        )
