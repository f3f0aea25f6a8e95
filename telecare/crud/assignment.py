from typing import Optional
from sqlalchemy.orm import Session
from datetime import datetime

from telecare.models.assignment import PatientDoctorAssignment


class CRUDAssignment:
    def get_existing(
        self,
        db: Session,
        *,
        patient_id: int,
        doctor_id: int,
        ai_report_id: Optional[str],
        assignment_type: str = "appointment",
    ) -> Optional[PatientDoctorAssignment]:
        query = db.query(PatientDoctorAssignment).filter(
            PatientDoctorAssignment.patient_id == patient_id,
            PatientDoctorAssignment.doctor_id == doctor_id,
            PatientDoctorAssignment.assignment_type == assignment_type,
        )
        if ai_report_id is None:
            query = query.filter(PatientDoctorAssignment.ai_report_id.is_(None))
        else:
            query = query.filter(PatientDoctorAssignment.ai_report_id == ai_report_id)
        return query.first()

    def create(
        self,
        db: Session,
        *,
        patient_id: int,
        doctor_id: int,
        ai_report_id: Optional[str],
        assignment_type: str = "appointment",
    ) -> PatientDoctorAssignment:
        db_obj = PatientDoctorAssignment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            assignment_type=assignment_type,
            ai_report_id=ai_report_id,
            assigned_at=datetime.utcnow(),
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


assignment = CRUDAssignment()
