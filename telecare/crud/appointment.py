from typing import List, Optional
from sqlalchemy.orm import Session
from datetime import date, datetime

from telecare.crud.base import CRUDBase
from telecare.models.appointment import Appointment, ACTIVE_STATUSES
from telecare.schemas.appointment import AppointmentCreate, ShareReportRequest


class CRUDAppointment(CRUDBase[Appointment, AppointmentCreate, ShareReportRequest]):
    def get_active_for_doctor_on_date(
        self, db: Session, *, doctor_id: int, day: date
    ) -> List[Appointment]:
        return (
            db.query(self.model)
            .filter(
                Appointment.doctor_id == doctor_id,
                Appointment.scheduled_date == day,
                Appointment.status.in_(ACTIVE_STATUSES),
            )
            .order_by(Appointment.scheduled_time.asc())
            .all()
        )

    def get_patient_appointments(
        self, db: Session, *, patient_id: int, skip: int = 0, limit: int = 100
    ) -> List[Appointment]:
        return (
            db.query(self.model)
            .filter(Appointment.patient_id == patient_id)
            .order_by(Appointment.scheduled_date.asc(), Appointment.scheduled_time.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def add_scheduled(
        self, db: Session, *, obj_in: AppointmentCreate, scheduled_time: str
    ) -> Appointment:
        """Stage a new scheduled appointment. The caller owns the commit."""
        now = datetime.utcnow()
        location_type = obj_in.location_type or (
            "online" if obj_in.appointment_type == "teleconsultation" else "clinic"
        )
        db_obj = self.model(
            patient_id=obj_in.patient_id,
            doctor_id=obj_in.doctor_id,
            pre_analysis_id=obj_in.pre_analysis_id,
            ai_report_id=obj_in.ai_report_id,
            appointment_type=obj_in.appointment_type,
            status="scheduled",
            scheduled_date=obj_in.scheduled_date,
            scheduled_time=scheduled_time,
            duration_minutes=obj_in.duration_minutes,
            location_type=location_type,
            location_address=obj_in.location_address,
            price=obj_in.price,
            payment_status=obj_in.payment_status,
            payment_method=obj_in.payment_method,
            report_shared=bool(obj_in.ai_report_id),
            report_shared_at=now if obj_in.ai_report_id else None,
            created_at=now,
            updated_at=now,
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def share_report(
        self, db: Session, *, db_obj: Appointment, ai_report_id: str
    ) -> Appointment:
        return self.update(
            db,
            db_obj=db_obj,
            obj_in={
                "ai_report_id": ai_report_id,
                "report_shared": True,
                "report_shared_at": datetime.utcnow(),
            },
        )


appointment = CRUDAppointment(Appointment)
