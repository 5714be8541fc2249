"""
Tests for the matching engine and the catalog accessors it reads from.
"""

import pytest

from matching.logic import CatalogAccessor, CatalogUnavailable, MatchingEngine, StaticCatalog, get_matches
from matching.logic.adapter import normalize_row, normalize_rows
from matching.logic.constants import DEFAULT_RESULT_CAP, MAX_RESULT_CAP
from matching.logic.engine import clamp_result_cap

from matching.tests.factories import make_criteria


class BrokenCatalog(CatalogAccessor):
    """Fails on the second page, after the first one was read."""

    def fetch_rows(self, offset, limit):
        if offset > 0:
            raise CatalogUnavailable("storage offline")
        return [{"id": f"u{i}", "name": f"U{i}"} for i in range(limit)]


def _rows(count):
    return [
        {"id": f"u{i}", "name": f"University {i}", "tuition_international": 40000 - i * 1000}
        for i in range(count)
    ]


# =============================================================================
# ENGINE
# =============================================================================

def test_engine_reads_every_page_before_ranking():
    """Cheapest university sits on the last page but still ranks first."""
    catalog = StaticCatalog(_rows(7), page_size=3)

    output = MatchingEngine(catalog).match(make_criteria({"weights": {"tuition": 1.0}}))

    assert output.total_candidates_evaluated == 7
    assert output.total_eligible == 7
    assert output.total_returned == 7
    assert output.results[0].university_id == "u6"


def test_empty_catalog_is_not_an_error():
    output = MatchingEngine(StaticCatalog([])).match(make_criteria())

    assert output.results == []
    assert output.total_candidates_evaluated == 0


def test_catalog_failure_propagates_without_partial_results():
    with pytest.raises(CatalogUnavailable):
        MatchingEngine(BrokenCatalog(page_size=2)).match(make_criteria())


def test_result_cap_applied():
    output = get_matches(make_criteria(), StaticCatalog(_rows(20)), result_cap=5)

    assert output.total_returned == 5
    assert output.total_candidates_evaluated == 20


def test_match_from_dict_reports_corrections():
    output = MatchingEngine(StaticCatalog(_rows(2))).match_from_dict(
        {"weights": {"tuition": 3}, "modules": {"sports": {}}}
    )

    assert len(output.results) == 2
    assert any("clamped" in w for w in output.warnings)
    assert any("sports" in w for w in output.warnings)


def test_clamp_result_cap():
    assert clamp_result_cap(None) == DEFAULT_RESULT_CAP
    assert clamp_result_cap(0) == 1
    assert clamp_result_cap(-4) == 1
    assert clamp_result_cap(MAX_RESULT_CAP + 1) == MAX_RESULT_CAP


# =============================================================================
# CATALOG ROWS
# =============================================================================

def test_normalize_row_is_tolerant():
    record = normalize_row({
        "id": 12,
        "name": "  Example University ",
        "country": "CA",
        "tuition_international": "$21,500",
        "acceptance_rate": "not published",
        "languages": "English, French",
        "scholarships_international": "yes",
    })

    assert record.id == "12"
    assert record.name == "Example University"
    assert record.location_country == "Canada"
    assert record.tuition_international == 21500
    assert record.acceptance_rate is None
    assert record.languages_of_instruction == ["English", "French"]
    assert record.scholarships_international is True


def test_rows_without_identity_are_skipped():
    records = normalize_rows([{"id": "a", "name": "A"}, {"name": "No id"}, "garbage", None])

    assert [r.id for r in records] == ["a"]


def test_static_catalog_pages():
    catalog = StaticCatalog(_rows(5), page_size=2)

    assert [r.id for r in catalog.fetch_page(2)] == ["u2", "u3"]
    assert len(catalog.fetch_all()) == 5


def test_country_code_rows_match_country_code_filters():
    catalog = StaticCatalog([{"id": "u1", "name": "State University", "location_country": "US"}])
    criteria = make_criteria({"modules": {"lifestyle": {"filters": {"countries": ["US"]}}}})

    output = MatchingEngine(catalog).match(criteria)

    assert [r.university_id for r in output.results] == ["u1"]
    assert "✅ Located in United States" in output.results[0].explanations
