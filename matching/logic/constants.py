"""
Matching Engine Constants

Defines module names, weight dimensions, fit thresholds and result limits
used by the matching engine. All values are deterministic.
"""

import os
from enum import Enum
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv()


# =============================================================================
# MODULES & DIMENSIONS
# =============================================================================

class ModuleName(str, Enum):
    """Closed set of toggleable criteria modules."""
    ACADEMICS = "academics"
    FINANCIALS = "financials"
    LIFESTYLE = "lifestyle"
    ADMISSIONS = "admissions"
    DEMOGRAPHICS = "demographics"
    FUTURE = "future"


class Dimension(str, Enum):
    """Weighted scoring axes."""
    TUITION = "tuition"
    LOCATION = "location"
    RANKING = "ranking"
    PROGRAM = "program"
    LANGUAGE = "language"


MODULE_ORDER: List[ModuleName] = list(ModuleName)
DIMENSION_ORDER: List[Dimension] = list(Dimension)

# =============================================================================
# WEIGHTS
# =============================================================================

DEFAULT_WEIGHT = 0.5

DEFAULT_WEIGHTS: Dict[str, float] = {d.value: DEFAULT_WEIGHT for d in Dimension}

# Flat persisted column name -> dimension
WEIGHT_COLUMNS: Dict[str, str] = {f"weight_{d.value}": d.value for d in Dimension}

# =============================================================================
# FIT VALUES
# =============================================================================

NEUTRAL_FIT = 0.5
FULL_FIT = 1.0
NO_FIT = 0.0

# Dimensions at or above this fit are called out as highlights
HIGHLIGHT_FIT_THRESHOLD = 0.75

# Post-study visa length treated as the top of the ranking scale
VISA_MONTHS_SCALE = 36

# Share of the ranking fit taken by visa strength (rest is selectivity)
RANKING_VISA_SHARE = 0.5

# Scores closer than this are treated as ties
SCORE_PRECISION = 9

# Values that mean "no preference" in set filters coming from the UI
ANY_SENTINELS = {"any", "all", ""}

# Country code to name mapping, applied to catalog rows and country filters alike
COUNTRY_CODE_MAP: Dict[str, str] = {
    "AU": "Australia",
    "CA": "Canada",
    "DE": "Germany",
    "GB": "United Kingdom",
    "UK": "United Kingdom",
    "IE": "Ireland",
    "US": "United States",
    "USA": "United States",
    "NZ": "New Zealand",
    "SG": "Singapore",
    "NL": "Netherlands",
    "FR": "France",
}

# =============================================================================
# RESULT LIMITS
# =============================================================================

DEFAULT_RESULT_CAP = int(os.getenv("MATCH_RESULT_CAP", "50"))
MAX_RESULT_CAP = int(os.getenv("MATCH_RESULT_CAP_MAX", "200"))
CATALOG_PAGE_SIZE = int(os.getenv("CATALOG_PAGE_SIZE", "500"))

NEUTRAL_EXPLANATION = "Matched your core criteria"

ENGINE_VERSION = "1.0.0"
