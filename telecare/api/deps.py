from fastapi import Depends
from sqlalchemy.orm import Session

from telecare.db.session import get_db
from telecare.scheduling import AvailabilityService, BookingOrchestrator, RecommendationService


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_recommendation_service(db: Session = Depends(get_db)) -> RecommendationService:
    return RecommendationService(db)


def get_booking_orchestrator(db: Session = Depends(get_db)) -> BookingOrchestrator:
    return BookingOrchestrator(db)
