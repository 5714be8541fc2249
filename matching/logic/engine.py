"""
Matching Engine

Main orchestrator that combines catalog access, filtering, scoring,
explanation and ranking into a single pipeline.
This is the primary entry point for generating matches.
"""

import logging
import time
import uuid
from typing import Any, List, Optional

from .adapter import CatalogAccessor
from .constants import DEFAULT_RESULT_CAP, ENGINE_VERSION, MAX_RESULT_CAP
from .contracts import Criteria, MatchOutput
from .ranker import order_results, score_catalog

logger = logging.getLogger(__name__)


def clamp_result_cap(result_cap: Optional[int]) -> int:
    if result_cap is None:
        return DEFAULT_RESULT_CAP
    return max(1, min(MAX_RESULT_CAP, int(result_cap)))


class MatchingEngine:
    """
    Matching engine over one catalog accessor.

    Pipeline flow:
    1. Catalog Fetch - Assemble every page of candidates
    2. Filter Evaluation - Hard constraints of enabled modules
    3. Scoring - Weighted dimension fits
    4. Explanation - Display lines per university
    5. Ranking - Sort, tie-break, truncate

    Holds no state between calls; a superseded request can simply be ignored.
    """

    def __init__(self, catalog: CatalogAccessor):
        self.catalog = catalog
        self.version = ENGINE_VERSION

    def match(
        self,
        criteria: Criteria,
        result_cap: Optional[int] = None,
        include_near_misses: bool = False,
        warnings: Optional[List[str]] = None
    ) -> MatchOutput:
        """
        Generate ranked matches for criteria.

        Args:
            criteria: Normalized criteria
            result_cap: Maximum results returned (default from config)
            include_near_misses: Also return ineligible universities after eligible ones
            warnings: Corrections applied while parsing the criteria

        Returns:
            MatchOutput with ranked results

        Raises:
            CatalogUnavailable: the catalog could not be read (no partial results)
        """
        start_time = time.perf_counter()
        cap = clamp_result_cap(result_cap)
        warnings = list(warnings or [])

        # Step 1: Assemble the full candidate set
        candidates = self.catalog.fetch_all()
        logger.info(f"📦 Candidates fetched: {len(candidates)}")

        if not candidates:
            logger.warning("⚠️ Catalog is empty")
            return MatchOutput(
                request_id=str(uuid.uuid4()),
                engine_version=self.version,
                warnings=warnings,
            )

        # Steps 2-4: Filter, score and explain every candidate
        matched = score_catalog(criteria, candidates)
        total_eligible = sum(1 for m in matched if m.eligible)
        logger.info(f"✅ Eligible candidates: {total_eligible}")

        # Step 5: Rank
        results = order_results(matched, cap, include_near_misses)

        processing_time = (time.perf_counter() - start_time) * 1000
        logger.info(f"✨ Matching complete: {len(results)} results ({processing_time:.2f}ms)")

        return MatchOutput(
            request_id=str(uuid.uuid4()),
            results=results,
            total_candidates_evaluated=len(candidates),
            total_eligible=total_eligible,
            total_returned=len(results),
            processing_time_ms=round(processing_time, 2),
            engine_version=self.version,
            warnings=warnings,
        )

    def match_from_dict(self, payload: Any, **kwargs) -> MatchOutput:
        """
        Generate matches from an untrusted criteria payload.

        Convenience method for API integration.
        """
        criteria, warnings = Criteria.parse(payload)
        for warning in warnings:
            logger.warning(f"Criteria corrected: {warning}")
        return self.match(criteria, warnings=warnings, **kwargs)


# Convenience function for simple usage
def get_matches(
    criteria: Criteria,
    catalog: CatalogAccessor,
    result_cap: Optional[int] = None
) -> MatchOutput:
    engine = MatchingEngine(catalog)
    return engine.match(criteria, result_cap=result_cap)
