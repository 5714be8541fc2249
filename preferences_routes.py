"""
Preferences API Routes

Endpoints to save/update and fetch a user's persisted matching weights.
Table: user_preferences
"""

import logging
from fastapi import APIRouter, HTTPException, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Dict, Any

from db import get_session
from matching.logic.constants import DEFAULT_WEIGHTS, WEIGHT_COLUMNS
from utils.crud_preferences import get_preferences, upsert_preferences

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


# ─────────────────────────────────────────────
# GET /api/preferences/{user_id}
# ─────────────────────────────────────────────
@router.get("/{user_id}", summary="Fetch user weights")
def get_user_preferences(user_id: str, db: Session = Depends(get_session)):
    """
    Return saved weights for the given user_id.
    Falls back to the default weights with `saved: false` if none are stored.
    """
    try:
        prefs = get_preferences(db, user_id)
        if prefs is None:
            return {"user_id": user_id, "saved": False, "weights": dict(DEFAULT_WEIGHTS)}
        return {"saved": True, **prefs.to_dict()}

    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Could not read preferences for {user_id}: {e}")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": f"Database error: {str(e)}"},
        )


# ─────────────────────────────────────────────
# POST /api/preferences
# ─────────────────────────────────────────────
@router.post("", summary="Create or update user weights")
def save_user_preferences(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_session)):
    """
    Create or update the weights row for a user.
    Accepts `weight_tuition`-style keys or a nested `weights` object; missing
    weights are stored as 0.5 and out-of-range values are clamped.
    """
    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(status_code=400, detail="user_id is required")

    nested = payload.get("weights") if isinstance(payload.get("weights"), dict) else {}
    weights = {column: payload[column] for column in WEIGHT_COLUMNS if column in payload}
    for column, dimension in WEIGHT_COLUMNS.items():
        if dimension in nested:
            weights.setdefault(column, nested[dimension])

    try:
        prefs = upsert_preferences(db, str(user_id), weights)
        db.commit()
        saved = prefs.to_dict()
        logger.info(f"✅ Saved preferences for {user_id}")
        return {"status": "ok", "message": "Preferences saved", **saved}

    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Could not save preferences for {user_id}: {e}")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": f"Database error: {str(e)}"},
        )
