from datetime import datetime
from typing import Any, Dict, List
from sqlalchemy.orm import Session
from sqlalchemy import select, update

from telecare.models.booking_event import BookingEvent


def add_event(db: Session, *, event_type: str, appointment_id: int, payload: Dict[str, Any]) -> BookingEvent:
    """Stage an outbox event. The caller commits it with its appointment."""
    event = BookingEvent(
        event_type=event_type,
        appointment_id=appointment_id,
        payload=payload,
        status="pending",
        attempts=0,
    )
    db.add(event)
    db.flush()
    return event


def get_replayable_events(db: Session, limit: int = 100) -> List[BookingEvent]:
    stmt = (
        select(BookingEvent)
        .where(BookingEvent.status.in_(("pending", "failed")))
        .order_by(BookingEvent.created_at.asc(), BookingEvent.id.asc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars())


def mark_processed(db: Session, event_id: int) -> None:
    now = datetime.utcnow()
    db.execute(
        update(BookingEvent)
        .where(BookingEvent.id == event_id)
        .values(
            status="processed",
            attempts=BookingEvent.attempts + 1,
            last_error=None,
            processed_at=now,
        )
    )
    db.commit()


def mark_failed(db: Session, event_id: int, reason: str) -> None:
    db.execute(
        update(BookingEvent)
        .where(BookingEvent.id == event_id)
        .values(status="failed", attempts=BookingEvent.attempts + 1, last_error=reason)
    )
    db.commit()
