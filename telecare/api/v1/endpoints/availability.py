from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from telecare.api import deps
from telecare.schemas.availability import DoctorAvailability
from telecare.scheduling import AvailabilityService

router = APIRouter()


@router.get("/{doctor_id}/availability", response_model=DoctorAvailability)
def get_doctor_availability(
    doctor_id: int,
    day: date = Query(..., alias="date"),
    duration_minutes: Optional[int] = Query(None, gt=0, le=24 * 60),
    service: AvailabilityService = Depends(deps.get_availability_service),
) -> Any:
    """Bookable slots of a doctor for one day."""
    return service.get_doctor_availability(doctor_id, day, duration_minutes)
