from typing import Literal, Optional
from datetime import date, datetime
from pydantic import BaseModel, model_validator

AppointmentType = Literal["teleconsultation", "in_person", "follow_up", "lab_exam"]
AppointmentStatus = Literal["scheduled", "confirmed", "in_progress", "completed", "cancelled", "no_show"]
LocationType = Literal["clinic", "hospital", "home", "online"]
PaymentStatus = Literal["pending", "paid", "refunded", "cancelled"]


class WorkflowContext(BaseModel):
    """Identifiers threaded explicitly between the analysis and booking steps."""

    patient_id: Optional[int] = None
    pre_analysis_id: Optional[str] = None
    ai_report_id: Optional[str] = None


# Properties to receive on booking. Required fields are checked by the
# orchestrator so that a missing field is a booking validation error.
class AppointmentCreate(BaseModel):
    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None
    pre_analysis_id: Optional[str] = None
    ai_report_id: Optional[str] = None
    appointment_type: AppointmentType = "teleconsultation"
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None  # HH:MM
    duration_minutes: int = 30
    location_type: Optional[LocationType] = None
    location_address: Optional[str] = None
    price: Optional[float] = None
    payment_status: PaymentStatus = "pending"
    payment_method: Optional[str] = None
    context: Optional[WorkflowContext] = None

    @model_validator(mode="after")
    def apply_context(self) -> "AppointmentCreate":
        if self.context is not None:
            if self.patient_id is None:
                self.patient_id = self.context.patient_id
            if self.pre_analysis_id is None:
                self.pre_analysis_id = self.context.pre_analysis_id
            if self.ai_report_id is None:
                self.ai_report_id = self.context.ai_report_id
        return self


class ShareReportRequest(BaseModel):
    ai_report_id: str


# Properties to return to client
class Appointment(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    pre_analysis_id: Optional[str] = None
    ai_report_id: Optional[str] = None
    appointment_type: str
    status: str
    scheduled_date: date
    scheduled_time: str
    duration_minutes: int
    location_type: Optional[str] = None
    location_address: Optional[str] = None
    price: Optional[float] = None
    payment_status: str
    payment_method: Optional[str] = None
    report_shared: bool
    report_shared_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
