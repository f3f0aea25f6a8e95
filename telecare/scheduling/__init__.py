"""Booking core: availability, recommendation and booking engines.

The pure functions in ``availability`` and ``recommendation`` have no side
effects and can be unit-tested independently of the services that read the
catalog and the appointment store.
"""

from .availability import (
    AvailabilityService,
    add_minutes,
    generate_working_slots,
    mark_conflicts,
)
from .recommendation import (
    RecommendationService,
    explain,
    map_diagnosis_to_specialties,
    match_criteria,
    recommend_doctors,
    score_doctor,
    sort_recommendations,
)
from .booking import BookingOrchestrator
