from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from telecare.db.base import Base
from datetime import datetime


class TimelineEvent(Base):
    __tablename__ = "timeline_events"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, nullable=False, index=True)
    event_type = Column(String, nullable=False)  # appointment
    event_title = Column(String, nullable=False)
    event_description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="active")
    related_appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True, index=True)
    related_ai_report_id = Column(String, nullable=True)
    event_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
