"""Doctor recommendation against an AI diagnostic report.

The scoring functions are pure and accept anything exposing the catalog
attributes (``specialty``, ``specialties``, ``rating``, ``total_reviews``,
``consultation_price``, ``accepts_teleconsultation``, ``is_verified``), so ORM
rows and ``DoctorPublic`` schemas can be scored alike.

Score factors, each clamped to its maximum before summing:

    specialty      50   +40 match, +10 primary match, else +30 generalist
    severity       20   high: verified 15 / tele 5
                        medium: verified 10 / tele 10
                        low: tele 15
    rating         25   (rating / 5) * 20, +5 above 50 reviews
    accessibility  10   tele 5, verified 5
    price          10   [30, 80] -> 10, below -> 5, above -> 2

The total is rounded and clamped to [0, 100].
"""

import logging
import math
from typing import Any, Iterable, List, Optional

from sqlalchemy.orm import Session

from telecare import crud
from telecare.core import metrics
from telecare.core.config import settings
from telecare.schemas.doctor import DoctorPublic
from telecare.schemas.recommendation import (
    DiagnosticReport,
    MatchCriteria,
    PatientProfile,
    RecommendationFilters,
    RecommendationResult,
)
from .specialties import EMERGENCY, GENERAL_MEDICINE, is_generalist, lookup_specialties

logger = logging.getLogger(__name__)

SPECIALTY_MAX = 50
SEVERITY_MAX = 20
RATING_MAX = 25
ACCESSIBILITY_MAX = 10
PRICE_MAX = 10

REASONABLE_PRICE_RANGE = (30, 80)
MANY_REVIEWS_THRESHOLD = 50
EXCELLENT_RATING = 4.5
GOOD_RATING = 4.0

REASON_SEPARATOR = " • "
FALLBACK_REASON = "Recommended for your profile"

SORT_KEYS = ("score", "rating", "price", "distance")


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _severity(report: DiagnosticReport) -> str:
    return report.overall_severity or "medium"


def map_diagnosis_to_specialties(report: DiagnosticReport) -> List[str]:
    """Specialties to look for, highest priority first."""
    severity = _severity(report)
    specialties = lookup_specialties(report.primary_diagnosis)

    if specialties:
        # For urgent cases try specialists before general medicine
        if severity == "high" and GENERAL_MEDICINE in specialties:
            specialties = [s for s in specialties if s != GENERAL_MEDICINE] + [GENERAL_MEDICINE]
        return specialties

    if severity == "high":
        return [GENERAL_MEDICINE, EMERGENCY]
    return [GENERAL_MEDICINE]


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle.lower() in haystack.lower()


def specialty_matches(doctor: Any, recommended_specialties: List[str]) -> bool:
    secondary = getattr(doctor, "specialties", None) or []
    return any(
        _contains(doctor.specialty, wanted) or any(_contains(s, wanted) for s in secondary)
        for wanted in recommended_specialties
    )


def _specialty_points(doctor: Any, recommended_specialties: List[str]) -> float:
    if specialty_matches(doctor, recommended_specialties):
        points = 40
        if recommended_specialties and _contains(doctor.specialty, recommended_specialties[0]):
            points += 10
        return points
    if is_generalist(doctor.specialty):
        return 30
    return 0


def _severity_points(doctor: Any, severity: str) -> float:
    verified = bool(doctor.is_verified)
    tele = bool(doctor.accepts_teleconsultation)
    if severity == "high":
        return (15 if verified else 0) + (5 if tele else 0)
    if severity == "medium":
        return (10 if verified else 0) + (10 if tele else 0)
    return 15 if tele else 0


def _rating_points(doctor: Any) -> float:
    if not doctor.rating:
        return 0
    points = (doctor.rating / 5) * 20
    if (doctor.total_reviews or 0) > MANY_REVIEWS_THRESHOLD:
        points += 5
    return points


def _accessibility_points(doctor: Any) -> float:
    return (5 if doctor.accepts_teleconsultation else 0) + (5 if doctor.is_verified else 0)


def _price_points(doctor: Any) -> float:
    price = doctor.consultation_price
    if not price:
        return 0
    low, high = REASONABLE_PRICE_RANGE
    if low <= price <= high:
        return 10
    if price < low:
        return 5
    return 2


def score_doctor(doctor: Any, report: DiagnosticReport, recommended_specialties: List[str]) -> int:
    severity = _severity(report)
    total = (
        _clamp(_specialty_points(doctor, recommended_specialties), 0, SPECIALTY_MAX)
        + _clamp(_severity_points(doctor, severity), 0, SEVERITY_MAX)
        + _clamp(_rating_points(doctor), 0, RATING_MAX)
        + _clamp(_accessibility_points(doctor), 0, ACCESSIBILITY_MAX)
        + _clamp(_price_points(doctor), 0, PRICE_MAX)
    )
    return int(_clamp(round(total), 0, 100))


def explain(doctor: Any, report: DiagnosticReport, recommended_specialties: List[str], score: int) -> str:
    reasons = []
    severity = _severity(report)

    if any(_contains(doctor.specialty, wanted) for wanted in recommended_specialties):
        reasons.append(f"Specialist in {doctor.specialty} suited to your diagnosis")
    elif is_generalist(doctor.specialty):
        reasons.append("Versatile general practitioner")

    if severity == "high":
        reasons.append("Recommended for urgent care")
    elif severity == "low" and doctor.accepts_teleconsultation:
        reasons.append("Teleconsultation available for follow-up")

    if doctor.rating and doctor.rating >= EXCELLENT_RATING:
        reasons.append(f"Excellent rating ({doctor.rating:g}/5)")
    if doctor.is_verified:
        reasons.append("Verified doctor")

    return REASON_SEPARATOR.join(reasons) or FALLBACK_REASON


def match_criteria(doctor: Any, report: DiagnosticReport, recommended_specialties: List[str]) -> MatchCriteria:
    severity = _severity(report)
    severity_match = (
        (severity == "high" and bool(doctor.is_verified))
        or (severity == "low" and bool(doctor.accepts_teleconsultation))
        or severity == "medium"
    )
    return MatchCriteria(
        specialty_match=specialty_matches(doctor, recommended_specialties),
        severity_match=severity_match,
        # In-person consultation is always possible, so this never filters
        availability_match=True,
        rating_match=bool(doctor.rating) and doctor.rating >= GOOD_RATING,
    )


def recommend_doctors(
    candidates: Iterable[Any],
    report: DiagnosticReport,
    patient_context: Optional[PatientProfile] = None,
    filters: Optional[RecommendationFilters] = None,
    recommended_specialties: Optional[List[str]] = None,
) -> List[RecommendationResult]:
    """Score, rank (stable, descending) and truncate candidate doctors.

    ``patient_context`` is accepted for filtering by callers; it does not
    contribute to the score.
    """
    filters = filters or RecommendationFilters()
    specialties = recommended_specialties or map_diagnosis_to_specialties(report)

    results = []
    for doctor in candidates:
        score = score_doctor(doctor, report, specialties)
        if score <= 0:
            continue
        results.append(
            RecommendationResult(
                doctor=DoctorPublic.model_validate(doctor),
                score=score,
                reason=explain(doctor, report, specialties, score),
                match_criteria=match_criteria(doctor, report, specialties),
            )
        )

    results = sort_recommendations(results, "score")
    if filters.min_score is not None:
        results = filter_by_min_score(results, filters.min_score)
    return results[: filters.limit]


def filter_by_min_score(results: List[RecommendationResult], min_score: int = 50) -> List[RecommendationResult]:
    return [r for r in results if r.score >= min_score]


def sort_recommendations(results: List[RecommendationResult], key: str = "score") -> List[RecommendationResult]:
    if key == "score":
        return sorted(results, key=lambda r: -r.score)
    if key == "rating":
        return sorted(results, key=lambda r: -(r.doctor.rating or 0))
    if key == "price":
        return sorted(results, key=lambda r: r.doctor.consultation_price or math.inf)
    if key == "distance":
        # No coordinates in the catalog yet
        return list(results)
    raise ValueError(f"Unknown sort key {key!r}, expected one of {SORT_KEYS}")


class RecommendationService:
    def __init__(self, db: Session, catalog=None):
        self.db = db
        self.catalog = catalog or crud.doctor

    def recommend(
        self,
        report: DiagnosticReport,
        patient: Optional[PatientProfile] = None,
        filters: Optional[RecommendationFilters] = None,
    ) -> List[RecommendationResult]:
        """Catalog-backed recommendations.

        A failing catalog yields an empty list instead of an error, so callers
        cannot tell "no match" from "catalog unavailable".
        """
        metrics.recommendation_requests_total.inc()
        filters = filters or RecommendationFilters(limit=settings.RECOMMENDATION_LIMIT)
        specialties = map_diagnosis_to_specialties(report)
        city = filters.city or (patient.city if patient else None)

        try:
            candidates = self.catalog.search_doctors(
                self.db,
                specialty=specialties[0],
                city=city,
                min_rating=settings.RECOMMENDATION_MIN_RATING,
                accepts_teleconsultation=True if _severity(report) == "low" else None,
                limit=settings.RECOMMENDATION_CANDIDATE_LIMIT,
            )
        except Exception as e:
            metrics.recommendation_catalog_failures_total.inc()
            logger.error(f"Doctor catalog search failed, returning no recommendations: {e}")
            return []

        results = recommend_doctors(candidates, report, patient, filters, specialties)
        logger.info(
            f"Recommended {len(results)} doctor(s) for specialties {specialties} "
            f"(severity={_severity(report)})"
        )
        return results
