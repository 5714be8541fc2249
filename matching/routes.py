"""
Matching API Routes

Exposes the matching engine and the read-only catalog via REST API.
Main endpoint: POST /matching
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db import get_session
from utils.crud_preferences import persisted_weights
from .logic.adapter import SqlCatalog
from .logic.constants import ENGINE_VERSION, MAX_RESULT_CAP
from .logic.contracts import Criteria, MatchResult
from .logic.engine import MatchingEngine, clamp_result_cap
from .logic.errors import CatalogUnavailable, InvalidCriteria
from .logic.module_status import all_statuses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matching", tags=["matching"])
universities_router = APIRouter(prefix="/universities", tags=["universities"])


def _parse_criteria(payload: Any):
    try:
        return Criteria.parse(payload)
    except InvalidCriteria as e:
        raise HTTPException(status_code=400, detail=str(e))


def _catalog_error(e: CatalogUnavailable, sequence: Optional[int] = None) -> JSONResponse:
    logger.error(f"❌ Catalog unavailable: {e}")
    return JSONResponse(
        status_code=503,
        content={"error": "No matches available: university catalog unavailable", "sequence": sequence, "results": []},
    )


# =============================================================================
# MATCHING
# =============================================================================

@router.post("", summary="Get university matches")
@router.post("/", summary="Get university matches", include_in_schema=False)
def get_matches(
    payload: Any = Body(default=None),
    limit: Optional[int] = Query(default=None, description=f"Result cap (1-{MAX_RESULT_CAP})"),
    near_misses: bool = Query(default=False, description="Append ineligible universities after eligible ones"),
    user_id: Optional[str] = Query(default=None, description="Merge this user's saved weights"),
    sequence: Optional[int] = Query(default=None, description="Client sequence number, echoed back"),
    db: Session = Depends(get_session),
):
    """
    Rank universities against the submitted criteria.

    **Request Body:** criteria object with `modules` (or module keys at the top
    level), `interests` and `weights`.

    **Response:**
    - `results`: ranked cards with a 0-100 score and explanation lines
    - `warnings`: corrections applied to the criteria
    """
    criteria, warnings = _parse_criteria(payload)
    for warning in warnings:
        logger.warning(f"Criteria corrected: {warning}")

    try:
        if user_id:
            try:
                persisted = persisted_weights(db, user_id)
            except SQLAlchemyError as e:
                logger.warning(f"⚠️ Could not load preferences for {user_id}: {e}")
                db.rollback()
                persisted = None
                warnings.append("Saved weights unavailable; using request weights")
            if persisted:
                criteria = criteria.with_persisted_weights(persisted)

        engine = MatchingEngine(SqlCatalog(db))
        output = engine.match(
            criteria,
            result_cap=clamp_result_cap(limit),
            include_near_misses=near_misses,
            warnings=warnings,
        )
    except CatalogUnavailable as e:
        db.rollback()
        return _catalog_error(e, sequence)
    except Exception as e:
        db.rollback()
        logger.exception("Matching route error")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return {
        "request_id": output.request_id,
        "sequence": sequence,
        "summary": {
            "total_evaluated": output.total_candidates_evaluated,
            "total_eligible": output.total_eligible,
            "total_returned": output.total_returned,
            "processing_time_ms": output.processing_time_ms,
        },
        "results": [serialize_result(r) for r in output.results],
        "warnings": output.warnings,
        "engine_version": output.engine_version,
    }


@router.post("/status", summary="Module tab status for criteria")
def get_module_status(payload: Any = Body(default=None)):
    criteria, warnings = _parse_criteria(payload)
    return {"modules": all_statuses(criteria), "warnings": warnings}


def serialize_result(result: MatchResult) -> Dict[str, Any]:
    """Convert MatchResult to a JSON-serializable card."""
    university = result.university
    return {
        "id": result.university_id,
        "slug": university.slug,
        "name": university.name,
        "score": result.percentage,
        "raw_score": round(result.score, 4),
        "eligible": result.eligible,
        "explanations": result.explanations,
        "fits": {f.dimension: round(f.fit, 3) for f in result.fits},
        "university": university.model_dump(),
    }


# =============================================================================
# CATALOG
# =============================================================================

@universities_router.get("", summary="List universities")
def list_universities(
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50),
    db: Session = Depends(get_session),
):
    try:
        records = SqlCatalog(db).fetch_page(offset, clamp_result_cap(limit))
    except CatalogUnavailable as e:
        db.rollback()
        return _catalog_error(e)
    return [r.model_dump() for r in records]


@universities_router.get("/{slug}", summary="Get one university")
def get_university(slug: str, db: Session = Depends(get_session)):
    try:
        record = SqlCatalog(db).get_by_slug(slug)
    except CatalogUnavailable as e:
        db.rollback()
        return _catalog_error(e)
    if record is None:
        raise HTTPException(status_code=404, detail="University not found")
    return record.model_dump()


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Matching engine health check")
def health_check():
    """Check if matching engine is operational."""
    return {"status": "ok", "engine": "matching", "version": ENGINE_VERSION}
