"""
Catalog Adapter for the Matching Engine

Reads university rows from the catalog store and transforms them into
UniversityRecord objects for the engine.

This is a pure READ + TRANSFORM layer:
- NO scoring logic
- NO ranking
- NO DB writes
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .constants import CATALOG_PAGE_SIZE
from .contracts import UniversityRecord, country_name
from .errors import CatalogUnavailable
from ..models import University

logger = logging.getLogger(__name__)


# Older column names -> current attribute names
ROW_ALIASES = {
    "country": "location_country",
    "city": "location_city",
    "climate": "climate_zone",
    "min_gpa": "min_gpa_requirement",
    "degree_levels": "degree_levels_offered",
    "languages": "languages_of_instruction",
}


def apply_row_aliases(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a raw row with older column names renamed and country codes expanded."""
    row: Dict[str, Any] = dict(raw)
    for old, new in ROW_ALIASES.items():
        if old in row and row.get(new) is None:
            row[new] = row.pop(old)
    if row.get("location_country"):
        row["location_country"] = country_name(row["location_country"])
    return row


def normalize_row(raw: Any) -> Optional[UniversityRecord]:
    """
    Convert one raw catalog row into a UniversityRecord.

    Returns None for rows that have no usable identity; every other
    malformed value becomes unknown.
    """
    if isinstance(raw, UniversityRecord):
        return raw
    if not isinstance(raw, dict):
        logger.warning(f"Skipping catalog row of type {type(raw).__name__}")
        return None

    row = apply_row_aliases(raw)

    try:
        return UniversityRecord.model_validate(row)
    except ValidationError as e:
        logger.warning(f"Skipping catalog row {row.get('id') or row.get('name')!r}: {e.error_count()} invalid field(s)")
        return None


def normalize_rows(rows: Iterable[Any]) -> List[UniversityRecord]:
    records = []
    for raw in rows:
        record = normalize_row(raw)
        if record is not None:
            records.append(record)
    return records


class CatalogAccessor(ABC):
    """
    Read-only provider of candidate universities.

    Subclasses fetch raw rows one page at a time; ``fetch_all`` accumulates
    pages until a short page so ranking can happen over the full set.
    """

    def __init__(self, page_size: int = CATALOG_PAGE_SIZE):
        self.page_size = max(1, int(page_size))

    @abstractmethod
    def fetch_rows(self, offset: int, limit: int) -> List[Any]:
        """Raw rows for one page. Raises CatalogUnavailable on failure."""

    def fetch_page(self, offset: int = 0, limit: Optional[int] = None) -> List[UniversityRecord]:
        return normalize_rows(self.fetch_rows(offset, limit or self.page_size))

    def fetch_all(self) -> List[UniversityRecord]:
        records: List[UniversityRecord] = []
        offset = 0
        while True:
            rows = self.fetch_rows(offset, self.page_size)
            records.extend(normalize_rows(rows))
            if len(rows) < self.page_size:
                break
            offset += self.page_size
        return records


class StaticCatalog(CatalogAccessor):
    """In-memory catalog over a list of dicts or records."""

    def __init__(self, rows: Iterable[Any] = (), page_size: int = CATALOG_PAGE_SIZE):
        super().__init__(page_size)
        self.rows = list(rows)

    def fetch_rows(self, offset: int, limit: int) -> List[Any]:
        return self.rows[offset:offset + limit]


class SqlCatalog(CatalogAccessor):
    """Catalog backed by the ``universities`` table."""

    def __init__(self, db: Session, page_size: int = CATALOG_PAGE_SIZE):
        super().__init__(page_size)
        self.db = db

    def fetch_rows(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        try:
            rows = (
                self.db.query(University)
                .order_by(University.id)
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"❌ Catalog query failed at offset {offset}: {e}")
            raise CatalogUnavailable(cause=e) from e
        return [row.to_dict() for row in rows]

    def get_by_slug(self, slug: str) -> Optional[UniversityRecord]:
        try:
            row = self.db.query(University).filter(University.slug == slug).first()
            if row is None:
                row = self.db.get(University, slug)
        except SQLAlchemyError as e:
            logger.error(f"❌ Catalog lookup failed for {slug!r}: {e}")
            raise CatalogUnavailable(cause=e) from e
        return normalize_row(row.to_dict()) if row is not None else None
