"""
Saved Matches API Routes

Endpoints to save, list, check and unsave universities from a user's matches.
Table: saved_matches (one row per user and university)
"""

import logging
from fastapi import APIRouter, HTTPException, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Dict, Any

from db import get_session
from utils.crud_saved_matches import get_saved_match, list_saved_matches, save_match, unsave_match

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/saved-matches", tags=["saved-matches"])


def _db_error(db: Session, action: str, e: SQLAlchemyError) -> JSONResponse:
    db.rollback()
    logger.error(f"❌ Failed to {action}: {e}")
    return JSONResponse(status_code=500, content={"error": f"Failed to {action}"})


# ─────────────────────────────────────────────
# GET /api/saved-matches/{user_id}
# ─────────────────────────────────────────────
@router.get("/{user_id}", summary="List saved matches")
def get_saved_matches(user_id: str, db: Session = Depends(get_session)):
    """Saved universities for the user, newest first."""
    try:
        return [saved.to_dict() for saved in list_saved_matches(db, user_id)]
    except SQLAlchemyError as e:
        return _db_error(db, "list saved matches", e)


# ─────────────────────────────────────────────
# GET /api/saved-matches/{user_id}/check/{university_id}
# ─────────────────────────────────────────────
@router.get("/{user_id}/check/{university_id}", summary="Check if a university is saved")
def check_saved_match(user_id: str, university_id: str, db: Session = Depends(get_session)):
    try:
        saved = get_saved_match(db, user_id, university_id)
    except SQLAlchemyError as e:
        return _db_error(db, "check saved match", e)
    return {"saved": saved is not None, "id": saved.id if saved else None}


# ─────────────────────────────────────────────
# POST /api/saved-matches
# ─────────────────────────────────────────────
@router.post("", summary="Save a university")
def create_saved_match(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_session)):
    """
    Save a university for a user. Saving the same university again only
    replaces its note.
    """
    user_id = payload.get("user_id")
    university_id = payload.get("university_id")
    if not user_id:
        raise HTTPException(status_code=400, detail="user_id is required")
    if not university_id:
        raise HTTPException(status_code=400, detail="university_id is required")

    try:
        saved = save_match(db, str(user_id), str(university_id), payload.get("note"))
        db.commit()
        logger.info(f"✅ Saved {university_id} for {user_id}")
        return saved.to_dict()
    except SQLAlchemyError as e:
        return _db_error(db, "save match", e)


# ─────────────────────────────────────────────
# DELETE /api/saved-matches/{user_id}/{university_id}
# ─────────────────────────────────────────────
@router.delete("/{user_id}/{university_id}", summary="Unsave a university")
def delete_saved_match(user_id: str, university_id: str, db: Session = Depends(get_session)):
    try:
        removed = unsave_match(db, user_id, university_id)
        db.commit()
    except SQLAlchemyError as e:
        return _db_error(db, "unsave match", e)
    return {"success": True, "removed": removed}
