"""
Shared fixtures for the matching tests.
"""

import os

# tests run against a throwaway in-memory database
os.environ["DATABASE_URL"] = "sqlite://"

import pytest

from db import Base, engine, get_db
from matching.models import University, UserPreferences, SavedMatch  # noqa: F401  registers tables


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    try:
        with get_db() as session:
            yield session
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def tables():
    """Schema only; the code under test opens its own sessions."""
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)
