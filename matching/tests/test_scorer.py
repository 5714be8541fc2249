"""
Tests for the per-dimension fits and the weighted score.
"""

import pytest

from matching.logic import score
from matching.logic.dimension_scorers import (
    compute_fits,
    score_language,
    score_location,
    score_program,
    score_ranking,
    score_tuition,
    weighted_score,
)

from matching.tests.factories import make_criteria, make_university


# =============================================================================
# TUITION
# =============================================================================

def test_tuition_fit_uses_configured_budget():
    criteria = make_criteria({"modules": {"financials": {"filters": {"maxBudget": 20000}}}})

    fit = score_tuition(make_university(tuition_international=15000), criteria, catalog_max_tuition=60000)

    assert fit.fit == pytest.approx(0.25)


def test_tuition_fit_falls_back_to_catalog_max():
    criteria = make_criteria()

    fit = score_tuition(make_university(tuition_international=10000), criteria, catalog_max_tuition=40000)

    assert fit.fit == pytest.approx(0.75)


def test_tuition_budget_ignored_when_financials_disabled():
    criteria = make_criteria({"modules": {"financials": {"enabled": False, "filters": {"maxBudget": 20000}}}})

    fit = score_tuition(make_university(tuition_international=10000), criteria, catalog_max_tuition=40000)

    assert fit.fit == pytest.approx(0.75)


def test_tuition_fit_clamps_over_budget_to_zero():
    criteria = make_criteria({"modules": {"financials": {"filters": {"maxBudget": 20000}}}})

    fit = score_tuition(make_university(tuition_international=45000), criteria)

    assert fit.fit == 0.0


def test_unknown_tuition_is_neutral():
    fit = score_tuition(make_university(), make_criteria(), catalog_max_tuition=40000)

    assert fit.fit == 0.5


def test_cheaper_never_scores_worse():
    criteria = make_criteria({"modules": {"financials": {"filters": {"maxBudget": 30000}}}})
    tuitions = [0, 5000, 15000, 29999, 30000, 50000]

    fits = [score_tuition(make_university(tuition_international=t), criteria, 50000).fit for t in tuitions]

    assert fits == sorted(fits, reverse=True)


# =============================================================================
# LOCATION, RANKING, PROGRAM, LANGUAGE
# =============================================================================

def test_location_fit():
    criteria = make_criteria({"modules": {"lifestyle": {"filters": {"countries": ["Canada"]}}}})

    assert score_location(make_university(location_country="Canada"), criteria).fit == 1.0
    assert score_location(make_university(location_country="Germany"), criteria).fit == 0.0
    assert score_location(make_university(), criteria).fit == 0.5
    assert score_location(make_university(location_country="Canada"), make_criteria()).fit == 0.5


def test_location_matches_city_preference():
    criteria = make_criteria({"modules": {"lifestyle": {"filters": {"cities": ["Toronto"]}}}})

    fit = score_location(make_university(location_country="Canada", location_city="toronto"), criteria)

    assert fit.fit == 1.0


def test_location_neutral_when_lifestyle_disabled():
    criteria = make_criteria({"modules": {"lifestyle": {"enabled": False, "filters": {"countries": ["Canada"]}}}})

    assert score_location(make_university(location_country="Germany"), criteria).fit == 0.5


def test_ranking_fit_blends_visa_and_selectivity():
    criteria = make_criteria()

    best = score_ranking(make_university(post_study_work_visa_months=36, acceptance_rate=0), criteria)
    worst = score_ranking(make_university(post_study_work_visa_months=0, acceptance_rate=100), criteria)
    half_known = score_ranking(make_university(post_study_work_visa_months=36), criteria)

    assert best.fit == pytest.approx(1.0)
    assert worst.fit == pytest.approx(0.0)
    assert half_known.fit == pytest.approx(0.75)


def test_program_fit_is_fraction_of_matched_interests():
    criteria = make_criteria({"interests": ["Computer Science", "Fine Art"]})
    university = make_university(top_ranked_programs=["Computer Science and Engineering", "Law"])

    assert score_program(university, criteria).fit == pytest.approx(0.5)


def test_program_fit_edges():
    with_interests = make_criteria({"interests": ["Medicine"]})

    assert score_program(make_university(top_ranked_programs=["Law"]), with_interests).fit == 0.0
    assert score_program(make_university(top_ranked_programs=["Law"]), make_criteria()).fit == 0.5
    assert score_program(make_university(), with_interests).fit == 0.5


def test_language_fit():
    criteria = make_criteria({"modules": {"academics": {"filters": {"languages": ["English"]}}}})

    assert score_language(make_university(languages_of_instruction=["english", "French"]), criteria).fit == 1.0
    assert score_language(make_university(languages_of_instruction=["German"]), criteria).fit == 0.0
    assert score_language(make_university(languages_of_instruction=["German"]), make_criteria()).fit == 0.5


# =============================================================================
# WEIGHTED SCORE
# =============================================================================

def test_single_weight_isolates_that_dimension():
    """With only tuition weighted, the score is exactly the tuition fit."""
    criteria = make_criteria({
        "weights": {"tuition": 1.0, "location": 0.0, "ranking": 0.0, "program": 0.0, "language": 0.0},
        "modules": {"lifestyle": {"filters": {"countries": ["Canada"]}}},
    })
    university = make_university(tuition_international=12000, location_country="Germany", acceptance_rate=10)

    fits = compute_fits(university, criteria, catalog_max_tuition=48000)

    assert score(university, criteria, 48000) == fits["tuition"].fit
    assert fits["tuition"].fit == pytest.approx(0.75)


def test_zero_weights_fall_back_to_plain_mean():
    criteria = make_criteria({"weights": {d: 0 for d in ("tuition", "location", "ranking", "program", "language")}})
    university = make_university(tuition_international=0)

    fits = compute_fits(university, criteria, catalog_max_tuition=10000)

    assert weighted_score(fits) == pytest.approx(sum(f.fit for f in fits.values()) / 5)


@pytest.mark.parametrize("attrs", [
    {},
    {"tuition_international": 0, "post_study_work_visa_months": 120, "acceptance_rate": -5},
    {"tuition_international": 10 ** 9, "acceptance_rate": 400},
    {"avg_tuition_per_year": 1, "languages_of_instruction": ["English"], "top_ranked_programs": ["Physics"]},
])
def test_score_is_bounded(attrs):
    criteria = make_criteria({
        "interests": ["Physics", "Music"],
        "weights": {"tuition": 1, "location": 0.2, "ranking": 0.9, "program": 0.0, "language": 0.4},
        "modules": {
            "financials": {"filters": {"maxBudget": 25000}},
            "academics": {"filters": {"languages": ["English"]}},
        },
    })

    value = score(make_university(**attrs), criteria, catalog_max_tuition=50000)

    assert 0.0 <= value <= 1.0


def test_location_fit_with_country_codes():
    criteria = make_criteria({"modules": {"lifestyle": {"filters": {"countries": ["gb"]}}}})

    assert score_location(make_university(location_country="UK"), criteria).fit == 1.0
    assert score_location(make_university(location_country="IE"), criteria).fit == 0.0
