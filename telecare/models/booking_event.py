from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index
from telecare.db.base import Base
from datetime import datetime


class BookingEvent(Base):
    """Outbox row written in the same transaction as its appointment."""

    __tablename__ = "booking_events"

    id = Column(Integer, primary_key=True, index=True)
    event_type = Column(String, nullable=False)  # appointment_created
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=False, index=True)
    payload = Column(JSON, nullable=False, default=dict)
    status = Column(String, nullable=False, default="pending")  # pending, processed, failed
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    processed_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_booking_events_status_created", "status", "created_at"),
    )
