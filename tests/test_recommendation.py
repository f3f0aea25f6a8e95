import random
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from telecare.scheduling.recommendation import (
    RecommendationService,
    explain,
    filter_by_min_score,
    map_diagnosis_to_specialties,
    match_criteria,
    recommend_doctors,
    score_doctor,
    sort_recommendations,
)
from telecare.scheduling.specialties import DIAGNOSIS_SPECIALTY_MAP, lookup_specialties
from telecare.schemas.recommendation import (
    DiagnosticReport,
    PatientProfile,
    RecommendationFilters,
)


def report(diagnosis="", severity="medium"):
    return DiagnosticReport(primary_diagnosis=diagnosis, overall_severity=severity)


class TestSpecialtyMapping:
    def test_high_severity_pneumonia_puts_general_medicine_last(self):
        assert map_diagnosis_to_specialties(report("pneumonie", "high")) == ["Pneumology", "General Medicine"]

    def test_matching_is_case_insensitive_substring(self):
        assert map_diagnosis_to_specialties(report("Suspicion de PNEUMONIE basale")) == [
            "Pneumology",
            "General Medicine",
        ]

    def test_first_keyword_in_table_order_wins(self):
        # "fièvre" appears in the text too, but "bronchite" comes first in the table
        assert map_diagnosis_to_specialties(report("fièvre et bronchite")) == ["Pneumology", "General Medicine"]
        assert map_diagnosis_to_specialties(report("infection urinaire basse")) == ["Urology", "General Medicine"]
        assert map_diagnosis_to_specialties(report("infection virale")) == ["General Medicine"]

    def test_high_severity_keeps_specialists_without_general_medicine(self):
        assert map_diagnosis_to_specialties(report("arythmie", "high")) == ["Cardiology"]

    def test_high_severity_moves_general_medicine_behind_specialist(self):
        assert map_diagnosis_to_specialties(report("migraine chronique", "high")) == ["Neurology", "General Medicine"]

    def test_no_match_falls_back_to_general_medicine(self):
        assert map_diagnosis_to_specialties(report("état inconnu", "medium")) == ["General Medicine"]
        assert map_diagnosis_to_specialties(report("état inconnu", "low")) == ["General Medicine"]

    def test_no_match_with_high_severity_adds_emergency(self):
        assert map_diagnosis_to_specialties(report("état inconnu", "high")) == ["General Medicine", "Emergency"]

    def test_missing_severity_defaults_to_medium(self):
        assert DiagnosticReport(primary_diagnosis="x", overall_severity=None).overall_severity == "medium"
        assert DiagnosticReport(primary_diagnosis="x", overall_severity=" ").overall_severity == "medium"
        assert DiagnosticReport(primary_diagnosis="x", overall_severity="HIGH").overall_severity == "high"

    def test_lookup_returns_a_copy_of_the_table_entry(self):
        found = lookup_specialties("pneumonie")
        found.append("Mutated")
        assert dict(DIAGNOSIS_SPECIALTY_MAP)["pneumonie"] == ["Pneumology", "General Medicine"]


class TestScoring:
    def test_urgent_pneumology_case_is_capped_at_100(self, doctor_profile):
        doctor = doctor_profile(
            specialty="Pneumology",
            rating=4.8,
            total_reviews=60,
            consultation_price=60,
            accepts_teleconsultation=True,
            is_verified=True,
        )
        case = report("pneumonie", "high")
        specialties = map_diagnosis_to_specialties(case)

        assert score_doctor(doctor, case, specialties) == 100

    def test_generalist_without_keyword_match(self, doctor_profile):
        case = report("fatigue persistante", "medium")
        specialties = map_diagnosis_to_specialties(case)
        bare = doctor_profile(specialty="General Medicine")
        rated = doctor_profile(specialty="General Medicine", rating=4.0, is_verified=True)

        assert specialties == ["General Medicine"]
        assert score_doctor(bare, case, specialties) >= 30
        # 50 specialty + 10 verified + 16 rating + 5 verified
        assert score_doctor(rated, case, specialties) == 81

    def test_generalist_fallback_when_specialty_does_not_match(self, doctor_profile):
        case = report("arythmie", "low")
        doctor = doctor_profile(specialty="Médecine Générale")

        assert score_doctor(doctor, case, ["Cardiology"]) == 30

    def test_secondary_specialty_match_gets_no_primary_bonus(self, doctor_profile):
        case = report("asthme", "low")
        doctor = doctor_profile(specialty="Internal Medicine", specialties=["Pneumology"])

        assert score_doctor(doctor, case, ["Pneumology", "Allergology"]) == 40

    @pytest.mark.parametrize(
        "severity,verified,tele,expected",
        [
            ("high", True, False, 15 + 5),
            ("high", False, True, 5 + 5),
            ("medium", True, True, 20 + 10),
            ("medium", False, False, 0),
            ("low", True, False, 5),
            ("low", False, True, 15 + 5),
        ],
    )
    def test_severity_and_accessibility_points(self, doctor_profile, severity, verified, tele, expected):
        doctor = doctor_profile(specialty="Dermatology", is_verified=verified, accepts_teleconsultation=tele)

        assert score_doctor(doctor, report("x", severity), ["Cardiology"]) == expected

    @pytest.mark.parametrize(
        "price,expected",
        [(None, 0), (0, 0), (29.9, 5), (30, 10), (80, 10), (80.5, 2), (250, 2)],
    )
    def test_price_points(self, doctor_profile, price, expected):
        doctor = doctor_profile(specialty="Dermatology", consultation_price=price)

        assert score_doctor(doctor, report("x", "medium"), ["Cardiology"]) == expected

    def test_review_bonus_needs_more_than_fifty_reviews(self, doctor_profile):
        case = report("x", "medium")
        fifty = doctor_profile(specialty="Dermatology", rating=5, total_reviews=50)
        fifty_one = doctor_profile(specialty="Dermatology", rating=5, total_reviews=51)

        assert score_doctor(fifty, case, ["Cardiology"]) == 20
        assert score_doctor(fifty_one, case, ["Cardiology"]) == 25

    def test_score_is_an_integer_within_bounds_for_random_doctors(self, doctor_profile):
        rng = random.Random(42)
        specialties_pool = ["Pneumology", "General Medicine", "Cardiology", "Dermatology", "Pediatrics"]
        for _ in range(1000):
            doctor = doctor_profile(
                specialty=rng.choice(specialties_pool),
                specialties=rng.sample(specialties_pool, rng.randint(0, 2)),
                rating=rng.choice([None, 0, rng.uniform(0, 5), 5]),
                total_reviews=rng.randint(0, 500),
                consultation_price=rng.choice([None, rng.uniform(0, 300)]),
                accepts_teleconsultation=rng.random() < 0.5,
                is_verified=rng.random() < 0.5,
            )
            case = report(rng.choice(["pneumonie", "eczéma", "inconnu", ""]), rng.choice(["low", "medium", "high"]))

            score = score_doctor(doctor, case, map_diagnosis_to_specialties(case))

            assert isinstance(score, int)
            assert 0 <= score <= 100


class TestExplanation:
    def test_reason_lists_factors_in_priority_order(self, doctor_profile):
        doctor = doctor_profile(specialty="Pneumology", rating=4.8, is_verified=True)
        case = report("pneumonie", "high")

        reason = explain(doctor, case, map_diagnosis_to_specialties(case), 100)

        assert reason == (
            "Specialist in Pneumology suited to your diagnosis"
            " • Recommended for urgent care"
            " • Excellent rating (4.8/5)"
            " • Verified doctor"
        )

    def test_low_severity_mentions_teleconsultation(self, doctor_profile):
        doctor = doctor_profile(specialty="General Medicine", accepts_teleconsultation=True)

        reason = explain(doctor, report("douleur", "low"), ["Cardiology"], 45)

        assert reason == "Versatile general practitioner • Teleconsultation available for follow-up"

    def test_generic_reason_when_nothing_applies(self, doctor_profile):
        doctor = doctor_profile(specialty="Dermatology", rating=4.4)

        assert explain(doctor, report("x", "medium"), ["Cardiology"], 10) == "Recommended for your profile"


class TestMatchCriteria:
    def test_medium_severity_always_matches_and_availability_is_inert(self, doctor_profile):
        criteria = match_criteria(doctor_profile(specialty="Dermatology"), report("x", "medium"), ["Cardiology"])

        assert criteria.severity_match is True
        assert criteria.availability_match is True
        assert criteria.specialty_match is False
        assert criteria.rating_match is False

    def test_high_severity_requires_verification(self, doctor_profile):
        case = report("x", "high")

        assert match_criteria(doctor_profile(is_verified=True), case, []).severity_match is True
        assert match_criteria(doctor_profile(accepts_teleconsultation=True), case, []).severity_match is False

    def test_low_severity_requires_teleconsultation(self, doctor_profile):
        case = report("x", "low")

        assert match_criteria(doctor_profile(accepts_teleconsultation=True), case, []).severity_match is True
        assert match_criteria(doctor_profile(is_verified=True), case, []).severity_match is False

    @pytest.mark.parametrize("rating,expected", [(4.0, True), (4.9, True), (3.99, False), (None, False)])
    def test_rating_threshold(self, doctor_profile, rating, expected):
        assert match_criteria(doctor_profile(rating=rating), report(), []).rating_match is expected


class TestRanking:
    def test_results_sorted_by_score_with_stable_ties(self, doctor_profile):
        case = report("pneumonie", "medium")
        candidates = [
            doctor_profile(id=1, full_name="A", specialty="General Medicine"),
            doctor_profile(id=2, full_name="B", specialty="Pneumology", is_verified=True),
            doctor_profile(id=3, full_name="C", specialty="General Medicine"),
            doctor_profile(id=4, full_name="D", specialty="Pneumology", is_verified=True),
        ]

        results = recommend_doctors(candidates, case)

        assert [r.doctor.id for r in results] == [2, 4, 1, 3]
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_zero_scores_are_discarded_and_limit_applies(self, doctor_profile):
        case = report("pneumonie", "low")
        candidates = [doctor_profile(id=i, full_name=f"Dr {i}", specialty="Pneumology") for i in range(1, 6)]
        candidates.append(doctor_profile(id=99, full_name="Dr Zero", specialty="Dermatology"))

        results = recommend_doctors(candidates, case, filters=RecommendationFilters(limit=3))

        assert [r.doctor.id for r in results] == [1, 2, 3]

    def test_default_limit_is_ten(self, doctor_profile):
        candidates = [doctor_profile(id=i, full_name=f"Dr {i}") for i in range(1, 16)]

        assert len(recommend_doctors(candidates, report())) == 10

    def test_result_carries_reason_and_criteria(self, doctor_profile):
        doctor = doctor_profile(specialty="Pneumology", rating=4.8, total_reviews=60,
                                consultation_price=60, accepts_teleconsultation=True, is_verified=True)

        [result] = recommend_doctors([doctor], report("pneumonie", "high"))

        assert result.score == 100
        assert result.doctor.full_name == doctor.full_name
        assert result.match_criteria.specialty_match is True
        assert result.match_criteria.rating_match is True
        assert "Recommended for urgent care" in result.reason

    def test_min_score_filter(self, doctor_profile):
        candidates = [
            doctor_profile(id=1, full_name="A", specialty="General Medicine"),
            doctor_profile(id=2, full_name="B", specialty="Dermatology", is_verified=True),
        ]

        results = recommend_doctors(candidates, report(), filters=RecommendationFilters(min_score=50))

        assert [r.doctor.id for r in results] == [1]
        assert filter_by_min_score(recommend_doctors(candidates, report()), 0) == recommend_doctors(candidates, report())


class TestSorting:
    @pytest.fixture
    def results(self, doctor_profile):
        candidates = [
            doctor_profile(id=1, full_name="A", rating=None, consultation_price=90),
            doctor_profile(id=2, full_name="B", rating=4.9, consultation_price=None),
            doctor_profile(id=3, full_name="C", rating=3.5, consultation_price=40),
        ]
        return recommend_doctors(candidates, report())

    def test_price_ascending_with_missing_price_last(self, results):
        assert [r.doctor.id for r in sort_recommendations(results, "price")] == [3, 1, 2]

    def test_rating_descending_with_missing_rating_last(self, results):
        assert [r.doctor.id for r in sort_recommendations(results, "rating")] == [2, 3, 1]

    def test_distance_keeps_order(self, results):
        assert sort_recommendations(results, "distance") == results

    def test_sorting_does_not_mutate_input(self, results):
        before = [r.doctor.id for r in results]
        sort_recommendations(results, "price")
        assert [r.doctor.id for r in results] == before

    def test_unknown_key_is_rejected(self, results):
        with pytest.raises(ValueError):
            sort_recommendations(results, "popularity")


class TestRecommendationService:
    def test_queries_catalog_with_first_specialty(self, db, add_doctor):
        pneumologist = add_doctor()
        add_doctor(full_name="Dr. Low Rated", rating=3.2)
        add_doctor(full_name="Dr. Cardio", specialty="Cardiology")
        add_doctor(full_name="Dr. Sfax", city="Sfax")

        results = RecommendationService(db).recommend(
            report("pneumonie", "high"), PatientProfile(city="Tunis")
        )

        assert [r.doctor.id for r in results] == [pneumologist.id]
        assert results[0].score == 100

    def test_low_severity_restricts_to_teleconsultation(self, db, add_doctor):
        add_doctor(full_name="Dr. Office Only", accepts_teleconsultation=False)
        remote = add_doctor(full_name="Dr. Remote")

        results = RecommendationService(db).recommend(report("bronchite", "low"))

        assert [r.doctor.id for r in results] == [remote.id]

    def test_catalog_failure_degrades_to_empty_list(self, db):
        catalog = MagicMock()
        catalog.search_doctors.side_effect = OperationalError("SELECT", {}, Exception("timeout"))

        assert RecommendationService(db, catalog=catalog).recommend(report("pneumonie")) == []
