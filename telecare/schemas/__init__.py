from .doctor import DoctorPublic
from .availability import TimeSlot, DoctorAvailability
from .recommendation import (
    DiagnosticReport,
    PatientProfile,
    RecommendationFilters,
    MatchCriteria,
    RecommendationResult,
    RecommendationRequest,
)
from .appointment import Appointment, AppointmentCreate, ShareReportRequest, WorkflowContext
