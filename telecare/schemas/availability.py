import datetime
from typing import List
from pydantic import BaseModel


class TimeSlot(BaseModel):
    time: str  # HH:MM
    available: bool = True


class DoctorAvailability(BaseModel):
    doctor_id: int
    date: datetime.date
    duration_minutes: int
    slots: List[TimeSlot]

    @property
    def available_times(self) -> List[str]:
        return [slot.time for slot in self.slots if slot.available]
