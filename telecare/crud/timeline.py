from typing import Optional
from sqlalchemy.orm import Session
from datetime import datetime

from telecare.models.timeline_event import TimelineEvent


class CRUDTimelineEvent:
    def get_for_appointment(self, db: Session, appointment_id: int) -> Optional[TimelineEvent]:
        return (
            db.query(TimelineEvent)
            .filter(TimelineEvent.related_appointment_id == appointment_id)
            .first()
        )

    def create_appointment_event(
        self,
        db: Session,
        *,
        patient_id: int,
        appointment_id: int,
        title: str,
        description: str,
        event_date: datetime,
        ai_report_id: Optional[str] = None,
    ) -> TimelineEvent:
        db_obj = TimelineEvent(
            patient_id=patient_id,
            event_type="appointment",
            event_title=title,
            event_description=description,
            status="active",
            related_appointment_id=appointment_id,
            related_ai_report_id=ai_report_id,
            event_date=event_date,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


timeline_event = CRUDTimelineEvent()
