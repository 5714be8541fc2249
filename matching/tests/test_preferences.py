"""
Tests for persisted user weights.
"""

from matching.models import UserPreferences
from utils.crud_preferences import get_preferences, persisted_weights, upsert_preferences


def test_missing_user_has_no_preferences(db):
    assert get_preferences(db, "nobody") is None
    assert persisted_weights(db, "nobody") is None


def test_upsert_defaults_and_clamps(db):
    prefs = upsert_preferences(db, "student-1", {"weight_tuition": 1.7, "weight_location": "0.25", "weight_ranking": "?"})

    assert prefs.weights() == {
        "tuition": 1.0, "location": 0.25, "ranking": 0.5, "program": 0.5, "language": 0.5,
    }


def test_upsert_overwrites_single_row(db):
    upsert_preferences(db, "student-1", {"weight_tuition": 0.1})
    upsert_preferences(db, "student-1", {"weight_tuition": 0.9, "weight_program": 0.0})

    assert db.query(UserPreferences).count() == 1
    assert persisted_weights(db, "student-1") == {
        "tuition": 0.9, "location": 0.5, "ranking": 0.5, "program": 0.0, "language": 0.5,
    }
