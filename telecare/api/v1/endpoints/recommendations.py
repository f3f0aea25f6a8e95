from typing import Any, List, Literal

from fastapi import APIRouter, Depends

from telecare.api import deps
from telecare.schemas.recommendation import RecommendationRequest, RecommendationResult
from telecare.scheduling import RecommendationService, sort_recommendations

router = APIRouter()


@router.post("/", response_model=List[RecommendationResult])
def recommend_doctors(
    *,
    request_in: RecommendationRequest,
    sort_by: Literal["score", "rating", "price", "distance"] = "score",
    service: RecommendationService = Depends(deps.get_recommendation_service),
) -> Any:
    """
    Rank doctors for a diagnostic report.
    """
    results = service.recommend(request_in.report, request_in.patient, request_in.filters)
    return sort_recommendations(results, sort_by)
