from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .doctor import DoctorPublic

Severity = Literal["low", "medium", "high"]


class DiagnosticReport(BaseModel):
    """AI diagnostic report as handed over by the analysis pipeline."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    primary_diagnosis: str = ""
    overall_severity: Severity = "medium"
    confidence_score: Optional[float] = Field(default=None, ge=0, le=100)

    @field_validator("primary_diagnosis", mode="before")
    @classmethod
    def blank_diagnosis(cls, v):
        return v or ""

    @field_validator("overall_severity", mode="before")
    @classmethod
    def default_severity(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return "medium"
        return v.strip().lower() if isinstance(v, str) else v


class PatientProfile(BaseModel):
    id: Optional[int] = None
    city: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None


class RecommendationFilters(BaseModel):
    city: Optional[str] = None
    max_distance_km: Optional[float] = None  # accepted, distance is not computed
    limit: int = Field(default=10, ge=1)
    min_score: Optional[int] = Field(default=None, ge=0, le=100)


class MatchCriteria(BaseModel):
    specialty_match: bool
    severity_match: bool
    availability_match: bool
    rating_match: bool


class RecommendationResult(BaseModel):
    doctor: DoctorPublic
    score: int = Field(ge=0, le=100)
    reason: str
    match_criteria: MatchCriteria


class RecommendationRequest(BaseModel):
    report: DiagnosticReport
    patient: Optional[PatientProfile] = None
    filters: Optional[RecommendationFilters] = None
