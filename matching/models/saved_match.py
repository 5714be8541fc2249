from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, UniqueConstraint

from .base import Base


class SavedMatch(Base):
    __tablename__ = "saved_matches"
    __table_args__ = (
        UniqueConstraint("user_id", "university_id", name="uq_saved_matches_user_university"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    university_id = Column(String, nullable=False)
    note = Column(Text)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "university_id": self.university_id,
            "note": self.note,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
