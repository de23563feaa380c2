"""
Centralized key and column definitions for offer projection data.

This module defines the canonical firm identifiers and the column names used
by comparison tables, parameter tables and deal tables, so that readers,
engines and reports agree on one spelling.
"""

from enum import Enum
from typing import List


class CanonicalFirm(str, Enum):
    """Closed enumeration of comparable recruiting destinations.

    Member order is the canonical ordering used for tables and tie-breaks.
    """

    MORGAN_STANLEY = "morganStanley"
    MERRILL_LYNCH = "merrillLynch"
    UBS_WEALTH = "ubsWealth"
    AMERIPRISE = "ameriprise"
    FINET = "finet"
    INDEPENDENT = "independent"
    GOLDMAN = "goldman"
    JPM = "jpm"
    RBC = "rbc"
    RAYMOND_JAMES = "raymondJames"
    ROCKEFELLER = "rockefeller"
    SANCTUARY = "sanctuary"
    WELLS_FARGO = "wellsFargo"
    TRU = "tru"

    def __str__(self) -> str:
        return self.value


class ParameterColumns(str, Enum):
    """Column definitions for the sparse firm parameter table."""

    FIRM = "firm"
    PARAM_NAME = "param_name"
    PARAM_VALUE = "param_value"
    NOTES = "notes"


class DealColumns(str, Enum):
    """Column definitions for the sparse firm deal table."""

    FIRM = "firm"
    UPFRONT_MIN = "upfront_min"
    UPFRONT_MAX = "upfront_max"
    BACKEND_MIN = "backend_min"
    BACKEND_MAX = "backend_max"
    TOTAL_DEAL_MIN = "total_deal_min"
    TOTAL_DEAL_MAX = "total_deal_max"
    NOTES = "notes"


class ComparisonColumns(str, Enum):
    """Column definitions for comparison and ranking reports."""

    YEAR = "year"
    FIRM = "firm"
    DISPLAY_NAME = "display_name"
    TOTAL = "total"
    GUARANTEED_UPFRONT = "guaranteed_upfront"
    SELECTED = "selected"
    RANK = "rank"


# Pseudo-firm under which engine-wide parameters live in the parameter table
GLOBAL_FIRM = "Global"

# Parameter names read from the GLOBAL_FIRM rows
PARAM_YEARS_TO_DISPLAY = "yearsToDisplay"
PARAM_CURRENT_GRID_PAYOUT = "currentGridPayout"
PARAM_NEW_GRID_PAYOUT = "newGridPayout"
PARAM_ANNUAL_GROWTH_RATE = "annualGrowthRate"
PARAM_BACKEND_GROWTH_PCT = "backendGrowthPct"
PARAM_BACKEND_ASSETS_PCT = "backendAssetsPct"
PARAM_BACKEND_SERVICE_PCT = "backendServicePct"

# Per-firm parameter names produced by the external store
PARAM_FIRM_TYPE = "firmType"
PARAM_DEAL_LENGTH = "dealLength"
PARAM_HURDLES = "hurdles"
PARAM_GRID = "grid"
PARAM_DEFERRED_MATCH = "deferredMatch"


def canonical_firm_keys() -> List[str]:
    """Return the canonical firm keys in canonical order."""
    return [firm.value for firm in CanonicalFirm]


PARAMETER_COLS: List[str] = [col.value for col in ParameterColumns]
DEAL_COLS: List[str] = [col.value for col in DealColumns]
