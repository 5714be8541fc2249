from datetime import datetime
from sqlalchemy import Column, String, Float, DateTime

from .base import Base


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    user_id = Column(String(64), primary_key=True)
    weight_tuition = Column(Float, nullable=False, default=0.5)
    weight_location = Column(Float, nullable=False, default=0.5)
    weight_ranking = Column(Float, nullable=False, default=0.5)
    weight_program = Column(Float, nullable=False, default=0.5)
    weight_language = Column(Float, nullable=False, default=0.5)
    updated_at = Column(DateTime(timezone=False), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def weights(self) -> dict:
        return {
            "tuition": self.weight_tuition,
            "location": self.weight_location,
            "ranking": self.weight_ranking,
            "program": self.weight_program,
            "language": self.weight_language,
        }

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "weight_tuition": self.weight_tuition,
            "weight_location": self.weight_location,
            "weight_ranking": self.weight_ranking,
            "weight_program": self.weight_program,
            "weight_language": self.weight_language,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
