from sqlalchemy import Column, Integer, String, Date, DateTime, Float, Boolean, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from telecare.db.base import Base
from datetime import datetime

ACTIVE_STATUSES = ("scheduled", "confirmed")

_ACTIVE_PREDICATE = text("status IN ('scheduled', 'confirmed')")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    pre_analysis_id = Column(String, nullable=True)
    ai_report_id = Column(String, nullable=True)

    appointment_type = Column(String, nullable=False, default="teleconsultation")  # teleconsultation, in_person, follow_up, lab_exam
    status = Column(String, nullable=False, default="scheduled")  # scheduled, confirmed, in_progress, completed, cancelled, no_show

    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(String(5), nullable=False)  # HH:MM
    duration_minutes = Column(Integer, nullable=False, default=30)

    location_type = Column(String, nullable=True)  # clinic, hospital, home, online
    location_address = Column(String, nullable=True)

    price = Column(Float, nullable=True)
    payment_status = Column(String, nullable=False, default="pending")  # pending, paid, refunded, cancelled
    payment_method = Column(String, nullable=True)

    report_shared = Column(Boolean, nullable=False, default=False)
    report_shared_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    doctor = relationship("Doctor", foreign_keys=[doctor_id])

    __table_args__ = (
        Index("idx_appointments_doctor_date", "doctor_id", "scheduled_date"),
        # At most one active appointment per doctor slot start
        Index(
            "uq_appointments_doctor_slot_active",
            "doctor_id",
            "scheduled_date",
            "scheduled_time",
            unique=True,
            postgresql_where=_ACTIVE_PREDICATE,
            sqlite_where=_ACTIVE_PREDICATE,
        ),
    )
