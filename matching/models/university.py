from sqlalchemy import Column, Integer, String, Text, Float, Boolean, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Session

from .base import Base

JSONList = JSON().with_variant(JSONB(), "postgresql")


class University(Base):
    __tablename__ = "universities"
    __table_args__ = {"extend_existing": True}

    # Identity
    id = Column(String, primary_key=True)
    slug = Column(String, unique=True, index=True)
    name = Column(String, nullable=False)

    # Display
    description = Column(Text)
    image_url = Column(String)
    ranking_world = Column(Integer)
    interests = Column(JSONList)

    # Academics
    degree_levels_offered = Column(JSONList)
    languages_of_instruction = Column(JSONList)
    research_activity_level = Column(String)
    top_ranked_programs = Column(JSONList)
    study_abroad_opportunities = Column(Boolean)

    # Financials
    tuition_international = Column(Float)
    avg_tuition_per_year = Column(Float)
    cost_of_living_est = Column(Float)
    scholarships_international = Column(Boolean)
    need_blind_admission = Column(Boolean)

    # Lifestyle
    location_country = Column(String, index=True)
    location_city = Column(String)
    campus_setting = Column(String)
    climate_zone = Column(String)

    # Admissions
    acceptance_rate = Column(Float)
    standardized_test_policy = Column(String)
    sat_score_25th_percentile = Column(Integer)
    sat_score_75th_percentile = Column(Integer)
    min_gpa_requirement = Column(Float)

    # Demographics
    total_enrollment = Column(Integer)
    percentage_international = Column(Float)

    # Future outcomes
    post_study_work_visa_months = Column(Integer)
    internship_placement_support = Column(Integer)
    alumni_network_strength = Column(Integer)
    graduation_rate_6yr = Column(Float)
    employment_rate_6mo = Column(Float)

    @classmethod
    def upsert(cls, db: Session, entry: dict):
        columns = {c.name for c in cls.__table__.columns}
        values = {k: v for k, v in entry.items() if k in columns and k != "id"}
        obj = db.get(cls, str(entry["id"]))
        if obj:
            for key, value in values.items():
                setattr(obj, key, value)
        else:
            values["id"] = str(entry["id"])
            obj = cls(**values)
            db.add(obj)
        return obj

    def to_dict(self) -> dict:
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}
