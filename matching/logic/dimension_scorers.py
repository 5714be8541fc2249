"""
Dimension Scorers

Individual fit functions for each weighted dimension.
Each scorer produces a normalized fit between 0.0 and 1.0.
Missing university data yields the neutral fit, never an error.
"""

from typing import Dict, List, Optional

from .contracts import Criteria, DimensionFit, UniversityRecord
from .constants import (
    FULL_FIT,
    NEUTRAL_FIT,
    NO_FIT,
    RANKING_VISA_SHARE,
    VISA_MONTHS_SCALE,
    Dimension,
    ModuleName,
)


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _fit(dimension: Dimension, fit: float, criteria: Criteria, detail: str) -> DimensionFit:
    return DimensionFit(
        dimension=dimension.value,
        fit=_clamp(fit),
        weight=criteria.weights.get(dimension),
        detail=detail,
    )


def _enabled_filters(criteria: Criteria, module: ModuleName):
    module_criteria = criteria.modules.get(module)
    return module_criteria.filters if module_criteria.enabled else None


def budget_ceiling(criteria: Criteria, catalog_max_tuition: Optional[float]) -> Optional[float]:
    """Configured budget when the financials module is on, else the catalog maximum."""
    filters = _enabled_filters(criteria, ModuleName.FINANCIALS)
    if filters is not None and filters.max_budget is not None and filters.max_budget > 0:
        return filters.max_budget
    return catalog_max_tuition


def score_tuition(
    university: UniversityRecord,
    criteria: Criteria,
    catalog_max_tuition: Optional[float] = None
) -> DimensionFit:
    """
    Cheaper is better, normalized against the budget ceiling.
    """
    tuition = university.tuition
    ceiling = budget_ceiling(criteria, catalog_max_tuition)

    if tuition is None or ceiling is None:
        return _fit(Dimension.TUITION, NEUTRAL_FIT, criteria, "tuition unknown")
    if ceiling <= 0:
        fit = FULL_FIT if tuition <= 0 else NO_FIT
    else:
        fit = 1.0 - _clamp(tuition / ceiling)

    return _fit(Dimension.TUITION, fit, criteria, f"tuition {tuition:.0f} against ceiling {ceiling:.0f}")


def score_location(university: UniversityRecord, criteria: Criteria) -> DimensionFit:
    """
    Full fit on a preferred country or city, neutral without a preference,
    zero on an explicit mismatch.
    """
    filters = _enabled_filters(criteria, ModuleName.LIFESTYLE)
    countries = {c.lower() for c in filters.countries} if filters is not None else set()
    cities = {c.lower() for c in filters.cities} if filters is not None else set()

    if not countries and not cities:
        return _fit(Dimension.LOCATION, NEUTRAL_FIT, criteria, "no location preference")

    country = (university.location_country or "").lower()
    city = (university.location_city or "").lower()

    if (country and country in countries) or (city and city in cities):
        return _fit(Dimension.LOCATION, FULL_FIT, criteria, "preferred location")
    if (countries and country) or (cities and city):
        return _fit(Dimension.LOCATION, NO_FIT, criteria, "outside preferred locations")
    return _fit(Dimension.LOCATION, NEUTRAL_FIT, criteria, "location unknown")


def score_ranking(university: UniversityRecord, criteria: Criteria) -> DimensionFit:
    """
    Prestige/outcomes proxy: post-study visa length blended with selectivity.
    """
    visa_months = university.post_study_work_visa_months
    acceptance = university.acceptance_rate

    visa_fit = NEUTRAL_FIT if visa_months is None else _clamp(visa_months / VISA_MONTHS_SCALE)
    selectivity_fit = NEUTRAL_FIT if acceptance is None else 1.0 - _clamp(acceptance / 100.0)

    fit = visa_fit * RANKING_VISA_SHARE + selectivity_fit * (1.0 - RANKING_VISA_SHARE)

    return _fit(
        Dimension.RANKING, fit, criteria,
        f"Visa: {visa_fit:.2f}, Selectivity: {selectivity_fit:.2f}"
    )


def score_program(university: UniversityRecord, criteria: Criteria) -> DimensionFit:
    """
    Fraction of the student's interests found among the university's
    top-ranked programs and interest tags.
    """
    if not criteria.interests:
        return _fit(Dimension.PROGRAM, NEUTRAL_FIT, criteria, "no interests given")

    offered = list(university.top_ranked_programs) + list(university.interests)
    if not offered:
        return _fit(Dimension.PROGRAM, NEUTRAL_FIT, criteria, "programs unknown")

    matched = matched_interests(criteria.interests, offered)
    fit = len(matched) / len(criteria.interests)

    return _fit(
        Dimension.PROGRAM, fit, criteria,
        f"Interests matched: {len(matched)}/{len(criteria.interests)}"
    )


def score_language(university: UniversityRecord, criteria: Criteria) -> DimensionFit:
    """
    Full fit when any language of instruction is one the student wants.
    """
    filters = _enabled_filters(criteria, ModuleName.ACADEMICS)
    wanted = {l.lower() for l in filters.languages} if filters is not None else set()

    if not wanted:
        return _fit(Dimension.LANGUAGE, NEUTRAL_FIT, criteria, "no language preference")
    taught = {l.lower() for l in university.languages_of_instruction}
    if not taught:
        return _fit(Dimension.LANGUAGE, NEUTRAL_FIT, criteria, "languages unknown")
    if wanted & taught:
        return _fit(Dimension.LANGUAGE, FULL_FIT, criteria, "language match")
    return _fit(Dimension.LANGUAGE, NO_FIT, criteria, "no shared language")


def compute_fits(
    university: UniversityRecord,
    criteria: Criteria,
    catalog_max_tuition: Optional[float] = None
) -> Dict[str, DimensionFit]:
    """All five dimension fits, keyed by dimension name in fixed order."""
    fits = [
        score_tuition(university, criteria, catalog_max_tuition),
        score_location(university, criteria),
        score_ranking(university, criteria),
        score_program(university, criteria),
        score_language(university, criteria),
    ]
    return {f.dimension: f for f in fits}


def weighted_score(fits: Dict[str, DimensionFit]) -> float:
    """
    Weighted mean of the fits. Weights are relative importances, so the
    sum is normalized by the total weight; all-zero weights fall back to
    the plain mean.
    """
    if not fits:
        return NEUTRAL_FIT
    total_weight = sum(f.weight for f in fits.values())
    if total_weight <= 0:
        return _clamp(sum(f.fit for f in fits.values()) / len(fits))
    return _clamp(sum(f.weight * f.fit for f in fits.values()) / total_weight)


def score(
    university: UniversityRecord,
    criteria: Criteria,
    catalog_max_tuition: Optional[float] = None
) -> float:
    """Continuous match score in [0, 1], independent of eligibility."""
    return weighted_score(compute_fits(university, criteria, catalog_max_tuition))


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _fuzzy_match(term1: str, term2: str) -> bool:
    """Simple fuzzy matching - checks if terms overlap significantly."""
    t1 = term1.lower().strip()
    t2 = term2.lower().strip()
    return bool(t1) and bool(t2) and (t1 in t2 or t2 in t1)


def matched_interests(interests: List[str], offered: List[str]) -> List[str]:
    """Interests (in the student's order) that match any offered program."""
    return [i for i in interests if any(_fuzzy_match(i, o) for o in offered)]
