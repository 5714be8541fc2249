"""
Ranker

Runs filter evaluation, scoring and explanation across the full candidate
set, then orders and truncates the results.

Ranking always happens over the complete assembled catalog so the ordering
and tie-breaks are global, never per page.
"""

from typing import Iterable, List, Optional, Tuple

from .contracts import Criteria, MatchResult, UniversityRecord
from .constants import DEFAULT_RESULT_CAP, SCORE_PRECISION
from .dimension_scorers import compute_fits, weighted_score
from .explanation_builder import explain
from .filter_evaluator import evaluate


def catalog_max_tuition(catalog: Iterable[UniversityRecord]) -> Optional[float]:
    """Highest known tuition in the catalog, or None when nothing is known."""
    known = [u.tuition for u in catalog if u.tuition is not None]
    return max(known) if known else None


def match_university(
    university: UniversityRecord,
    criteria: Criteria,
    max_tuition: Optional[float] = None
) -> MatchResult:
    """
    Full pipeline for one university: filter, score, explain.
    """
    filter_result = evaluate(university, criteria)
    fits = compute_fits(university, criteria, max_tuition)
    explanations = explain(university, criteria, filter_result, fits)

    return MatchResult(
        university_id=university.id,
        score=weighted_score(fits),
        eligible=filter_result.eligible,
        explanations=explanations,
        violations=filter_result.violations,
        fits=list(fits.values()),
        university=university,
    )


def score_catalog(criteria: Criteria, catalog: List[UniversityRecord]) -> List[MatchResult]:
    """Match every university in catalog order."""
    max_tuition = catalog_max_tuition(catalog)
    return [match_university(u, criteria, max_tuition) for u in catalog]


def _name_key(result: MatchResult) -> Tuple[str, str, str]:
    name = result.university.name or ""
    return (name.casefold(), name, result.university_id)


def eligible_sort_key(result: MatchResult):
    """Score descending, then name ascending, then id."""
    return (-round(result.score, SCORE_PRECISION),) + _name_key(result)


def near_miss_sort_key(result: MatchResult):
    """Fewest violations first, then as eligible results."""
    return (len(result.violations),) + eligible_sort_key(result)


def order_results(
    results: List[MatchResult],
    result_cap: int = DEFAULT_RESULT_CAP,
    include_near_misses: bool = False
) -> List[MatchResult]:
    """
    Partition into eligible/ineligible, sort, and truncate.

    Args:
        results: Matched universities in any order
        result_cap: Maximum number of results returned
        include_near_misses: Append ineligible universities after eligible ones

    Returns:
        Ordered, bounded list
    """
    cap = max(0, int(result_cap))
    eligible = sorted((r for r in results if r.eligible), key=eligible_sort_key)
    ordered = eligible
    if include_near_misses:
        ineligible = sorted((r for r in results if not r.eligible), key=near_miss_sort_key)
        ordered = eligible + ineligible
    return ordered[:cap]


def rank(
    criteria: Criteria,
    catalog: List[UniversityRecord],
    result_cap: Optional[int] = None,
    include_near_misses: bool = False
) -> List[MatchResult]:
    """
    Rank a catalog snapshot against criteria.

    Pure and deterministic: the same (criteria, catalog) always yields the
    same ordered output. An empty catalog yields an empty list.
    """
    if result_cap is None:
        result_cap = DEFAULT_RESULT_CAP
    if not catalog:
        return []
    return order_results(score_catalog(criteria, list(catalog)), result_cap, include_near_misses)
