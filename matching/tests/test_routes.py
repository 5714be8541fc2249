"""
Tests for the HTTP endpoints.
"""

import inspect

import pytest
from fastapi.testclient import TestClient

from db import Base, engine, get_db, get_session
from main import app
from matching.logic import CatalogUnavailable, SqlCatalog
from matching.models import University
from utils.crud_preferences import persisted_weights

UNIVERSITIES = [
    {"id": "a", "slug": "university-a", "name": "University A", "tuition_international": 15000,
     "location_country": "Canada", "languages_of_instruction": ["English"]},
    {"id": "b", "slug": "university-b", "name": "University B", "tuition_international": 30000,
     "location_country": "Germany", "languages_of_instruction": ["German"]},
]

BUDGET_CRITERIA = {"modules": {"financials": {"enabled": True, "filters": {"maxBudget": 20000}}}}


@pytest.fixture
def client():
    Base.metadata.create_all(bind=engine)
    with get_db() as db:
        for entry in UNIVERSITIES:
            University.upsert(db, entry)
    try:
        yield TestClient(app)
    finally:
        Base.metadata.drop_all(bind=engine)


# =============================================================================
# MATCHING
# =============================================================================

def test_match_returns_eligible_cards(client):
    response = client.post("/matching?sequence=7", json=BUDGET_CRITERIA)

    assert response.status_code == 200
    body = response.json()
    assert body["sequence"] == 7
    assert body["summary"]["total_evaluated"] == 2
    assert [r["id"] for r in body["results"]] == ["a"]
    card = body["results"][0]
    assert card["slug"] == "university-a"
    assert isinstance(card["score"], int) and 0 <= card["score"] <= 100
    assert "✅ Within budget ($15,000/yr)" in card["explanations"]
    assert card["university"]["location_country"] == "Canada"


def test_match_with_near_misses_and_limit(client):
    near = client.post("/matching?near_misses=true", json=BUDGET_CRITERIA).json()
    capped = client.post("/matching?near_misses=true&limit=1", json=BUDGET_CRITERIA).json()

    assert [(r["id"], r["eligible"]) for r in near["results"]] == [("a", True), ("b", False)]
    assert [r["id"] for r in capped["results"]] == ["a"]


def test_match_reports_corrections(client):
    body = client.post("/matching", json={"weights": {"tuition": 4}}).json()

    assert body["warnings"] == ["Weight 'tuition' clamped from 4 to 1"]
    assert len(body["results"]) == 2


def test_non_object_criteria_is_bad_request(client):
    response = client.post("/matching", json=["not", "criteria"])

    assert response.status_code == 400


def test_catalog_failure_is_service_unavailable(client, monkeypatch):
    def offline(self, offset, limit):
        raise CatalogUnavailable("storage offline")

    monkeypatch.setattr(SqlCatalog, "fetch_rows", offline)

    response = client.post("/matching?sequence=3", json={})

    assert response.status_code == 503
    assert response.json()["results"] == []
    assert response.json()["sequence"] == 3


def test_saved_weights_merge_under_request_weights(client):
    saved = client.post("/api/preferences", json={
        "user_id": "student-1",
        "weight_tuition": 1.0, "weight_location": 0, "weight_ranking": 0, "weight_program": 0, "weight_language": 0,
    })
    assert saved.status_code == 200

    only_saved = client.post("/matching?user_id=student-1", json=BUDGET_CRITERIA).json()
    overridden = client.post(
        "/matching?user_id=student-1",
        json={**BUDGET_CRITERIA, "weights": {"tuition": 0.0, "location": 1.0}},
    ).json()

    # tuition fit of 15000 against a 20000 budget
    assert only_saved["results"][0]["score"] == 25
    # location carries alone and there is no location preference
    assert overridden["results"][0]["score"] == 50


def test_module_status_endpoint(client):
    body = client.post("/matching/status", json={"modules": {"future": {"enabled": False}}}).json()

    assert body["modules"]["future"]["status"] == "disabled"
    assert body["modules"]["academics"]["status"] == "default"


def test_health(client):
    assert client.get("/matching/health").json()["status"] == "ok"
    assert client.get("/health").json() == {"status": "ok"}


# =============================================================================
# CATALOG
# =============================================================================

def test_list_universities(client):
    body = client.get("/universities?offset=1&limit=5").json()

    assert [u["id"] for u in body] == ["b"]


def test_get_university_by_slug(client):
    assert client.get("/universities/university-a").json()["name"] == "University A"
    assert client.get("/universities/a").json()["slug"] == "university-a"
    assert client.get("/universities/missing").status_code == 404


# =============================================================================
# PREFERENCES
# =============================================================================

def test_preferences_default_when_unsaved(client):
    body = client.get("/api/preferences/nobody").json()

    assert body["saved"] is False
    assert body["weights"]["tuition"] == 0.5


def test_preferences_round_trip_nested_weights(client):
    client.post("/api/preferences", json={"user_id": "student-2", "weights": {"program": 0.8}})

    body = client.get("/api/preferences/student-2").json()

    assert body["saved"] is True
    assert body["weight_program"] == 0.8
    assert body["weight_tuition"] == 0.5


def test_preferences_require_user_id(client):
    assert client.post("/api/preferences", json={"weight_tuition": 1}).status_code == 400


# =============================================================================
# SAVED MATCHES
# =============================================================================

def test_saved_matches_lifecycle(client):
    saved = client.post("/api/saved-matches", json={"user_id": "student-1", "university_id": "a", "note": "visit"})
    assert saved.status_code == 200
    assert saved.json()["university_id"] == "a"

    check = client.get("/api/saved-matches/student-1/check/a").json()
    assert check == {"saved": True, "id": saved.json()["id"]}
    assert [s["university_id"] for s in client.get("/api/saved-matches/student-1").json()] == ["a"]

    assert client.delete("/api/saved-matches/student-1/a").json() == {"success": True, "removed": True}
    assert client.get("/api/saved-matches/student-1/check/a").json() == {"saved": False, "id": None}


def test_saved_match_requires_ids(client):
    assert client.post("/api/saved-matches", json={"user_id": "student-1"}).status_code == 400
    assert client.post("/api/saved-matches", json={"university_id": "a"}).status_code == 400


# =============================================================================
# SESSION DEPENDENCY
# =============================================================================

def test_session_dependency_is_a_plain_generator():
    assert inspect.isgeneratorfunction(get_session)


def test_session_dependency_commits_between_requests(client):
    client.post("/api/preferences", json={"user_id": "student-3", "weight_ranking": 0.9})

    with get_db() as db:
        assert persisted_weights(db, "student-3")["ranking"] == 0.9
