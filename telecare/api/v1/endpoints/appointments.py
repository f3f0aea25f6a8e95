from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status

from telecare import schemas
from telecare.api import deps
from telecare.scheduling import BookingOrchestrator

router = APIRouter()


@router.post("/", response_model=schemas.Appointment, status_code=status.HTTP_201_CREATED)
def book_appointment(
    *,
    appointment_in: schemas.AppointmentCreate,
    orchestrator: BookingOrchestrator = Depends(deps.get_booking_orchestrator),
) -> Any:
    """
    Book a slot. Responds 409 when the slot was taken in the meantime.
    """
    return orchestrator.book_appointment(appointment_in)


@router.get("/", response_model=List[schemas.Appointment])
def read_patient_appointments(
    patient_id: int,
    orchestrator: BookingOrchestrator = Depends(deps.get_booking_orchestrator),
) -> Any:
    return orchestrator.get_patient_appointments(patient_id)


@router.get("/{appointment_id}", response_model=schemas.Appointment)
def read_appointment(
    appointment_id: int,
    orchestrator: BookingOrchestrator = Depends(deps.get_booking_orchestrator),
) -> Any:
    appointment = orchestrator.get_appointment(appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


@router.post("/{appointment_id}/share-report", response_model=schemas.Appointment)
def share_report(
    appointment_id: int,
    share_in: schemas.ShareReportRequest,
    orchestrator: BookingOrchestrator = Depends(deps.get_booking_orchestrator),
) -> Any:
    """Share an AI report with the doctor of an appointment."""
    return orchestrator.share_report_with_doctor(appointment_id, share_in.ai_report_id)
