from typing import Any, Dict
from sqlalchemy.orm import Session
from sqlalchemy import select
from matching.models import UserPreferences
from matching.logic.constants import DEFAULT_WEIGHT, WEIGHT_COLUMNS
from matching.logic.contracts import to_number

def _clamp_weight(value: Any) -> float:
    number = to_number(value)
    if number is None:
        return DEFAULT_WEIGHT
    return max(0.0, min(1.0, number))

def get_preferences(db: Session, user_id: str) -> UserPreferences | None:
    return db.execute(select(UserPreferences).where(UserPreferences.user_id == user_id)).scalar_one_or_none()

def upsert_preferences(db: Session, user_id: str, weights: Dict[str, Any]) -> UserPreferences:
    prefs = get_preferences(db, user_id)
    if prefs is None:
        prefs = UserPreferences(user_id=user_id)
        db.add(prefs)
    for column in WEIGHT_COLUMNS:
        setattr(prefs, column, _clamp_weight(weights.get(column, DEFAULT_WEIGHT)))
    db.flush()
    return prefs

def persisted_weights(db: Session, user_id: str) -> Dict[str, float] | None:
    prefs = get_preferences(db, user_id)
    return prefs.weights() if prefs else None
