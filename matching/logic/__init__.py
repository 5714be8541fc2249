"""
Matching Logic Module

Provides the deterministic matching engine for university discovery.
"""

from .contracts import (
    Criteria,
    Weights,
    UniversityRecord,
    FilterResult,
    ConstraintCheck,
    DimensionFit,
    MatchResult,
    MatchOutput,
)
from .engine import MatchingEngine, get_matches
from .ranker import rank
from .filter_evaluator import evaluate
from .dimension_scorers import score
from .explanation_builder import explain
from .adapter import CatalogAccessor, StaticCatalog, SqlCatalog
from .sequencer import MatchSequencer
from .errors import MatchingError, CatalogUnavailable, InvalidCriteria
from .constants import ModuleName, Dimension

__all__ = [
    # Main engine
    "MatchingEngine",
    "get_matches",
    "rank",
    "evaluate",
    "score",
    "explain",

    # Catalog
    "CatalogAccessor",
    "StaticCatalog",
    "SqlCatalog",

    # Contracts
    "Criteria",
    "Weights",
    "UniversityRecord",
    "FilterResult",
    "ConstraintCheck",
    "DimensionFit",
    "MatchResult",
    "MatchOutput",

    # Sequencing
    "MatchSequencer",

    # Errors
    "MatchingError",
    "CatalogUnavailable",
    "InvalidCriteria",

    # Enums
    "ModuleName",
    "Dimension",
]
