from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select, delete
from matching.models import SavedMatch

def list_saved_matches(db: Session, user_id: str) -> List[SavedMatch]:
    stmt = (
        select(SavedMatch)
        .where(SavedMatch.user_id == user_id)
        .order_by(SavedMatch.created_at.desc(), SavedMatch.id.desc())
    )
    return list(db.execute(stmt).scalars())

def get_saved_match(db: Session, user_id: str, university_id: str) -> SavedMatch | None:
    stmt = select(SavedMatch).where(SavedMatch.user_id == user_id, SavedMatch.university_id == university_id)
    return db.execute(stmt).scalar_one_or_none()

def save_match(db: Session, user_id: str, university_id: str, note: str | None = None) -> SavedMatch:
    saved = get_saved_match(db, user_id, university_id)
    if saved is None:
        saved = SavedMatch(user_id=user_id, university_id=university_id)
        db.add(saved)
    saved.note = note or None
    db.flush()
    return saved

def unsave_match(db: Session, user_id: str, university_id: str) -> bool:
    result = db.execute(
        delete(SavedMatch).where(SavedMatch.user_id == user_id, SavedMatch.university_id == university_id)
    )
    return result.rowcount > 0
