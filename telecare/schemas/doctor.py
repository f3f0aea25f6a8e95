from typing import List, Optional
from pydantic import BaseModel, field_validator


class DoctorPublic(BaseModel):
    id: int
    full_name: str
    specialty: str
    specialties: List[str] = []
    city: Optional[str] = None
    rating: Optional[float] = None
    total_reviews: int = 0
    consultation_price: Optional[float] = None
    teleconsultation_price: Optional[float] = None
    accepts_teleconsultation: bool = False
    is_verified: bool = False
    is_active: bool = True

    @field_validator("specialties", mode="before")
    @classmethod
    def default_specialties(cls, v):
        return v or []

    @field_validator("total_reviews", mode="before")
    @classmethod
    def default_total_reviews(cls, v):
        return v or 0

    @field_validator("accepts_teleconsultation", "is_verified", mode="before")
    @classmethod
    def default_flags(cls, v):
        return bool(v)

    class Config:
        from_attributes = True
