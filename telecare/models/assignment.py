from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from telecare.db.base import Base
from datetime import datetime


class PatientDoctorAssignment(Base):
    __tablename__ = "patient_doctor_assignments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    assignment_type = Column(String, nullable=False, default="appointment")
    ai_report_id = Column(String, nullable=True)
    assigned_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint(
            "patient_id", "doctor_id", "assignment_type", "ai_report_id",
            name="uq_patient_doctor_assignment",
        ),
    )
