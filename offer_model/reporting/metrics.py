# offer_model/reporting/metrics.py
"""
Functions to turn an OfferResult into report tables and summaries.
"""

import logging
from typing import Any, Dict

import pandas as pd

from offer_model.firms.normalizer import display_name
from offer_model.models import OfferResult
from offer_model.schema.columns import CanonicalFirm, ComparisonColumns, canonical_firm_keys
from offer_model.utils.numeric import safe_value

logger = logging.getLogger(__name__)

YEAR = ComparisonColumns.YEAR.value
FIRM = ComparisonColumns.FIRM.value
DISPLAY_NAME = ComparisonColumns.DISPLAY_NAME.value
TOTAL = ComparisonColumns.TOTAL.value
GUARANTEED_UPFRONT = ComparisonColumns.GUARANTEED_UPFRONT.value
SELECTED = ComparisonColumns.SELECTED.value
RANK = ComparisonColumns.RANK.value


def format_millions(value: Any, decimals: int = 2) -> str:
    """Format a value in millions for display, e.g. ``2.27`` -> ``"$2.27M"``."""
    number = safe_value(value, 0.0)
    sign = "-" if number < 0 else ""
    return f"{sign}${abs(number):,.{decimals}f}M"


def comparison_frame(result: OfferResult) -> pd.DataFrame:
    """
    Year-by-firm comparison table.

    Returns:
        DataFrame indexed by ``year`` with one column per canonical firm
        (canonical order), values in millions.
    """
    rows = result.comparison_data
    if not rows:
        logger.warning("Offer result has no projected years. Returning empty comparison.")
        return pd.DataFrame(columns=canonical_firm_keys()).rename_axis(YEAR)

    df = pd.DataFrame(rows).set_index(YEAR)
    return df[canonical_firm_keys()]


def totals_frame(result: OfferResult) -> pd.DataFrame:
    """
    One row per canonical firm with its total, guaranteed upfront and
    whether it was selected. Selected firms are ranked by total (1 = best);
    unselected firms have no rank.
    """
    selected = set(result.selected_firms)
    df = pd.DataFrame(
        {
            FIRM: [firm.value for firm in CanonicalFirm],
            DISPLAY_NAME: [display_name(firm) for firm in CanonicalFirm],
            TOTAL: [result.totals.get(firm, 0.0) for firm in CanonicalFirm],
            GUARANTEED_UPFRONT: [result.guaranteed_upfront.get(firm, 0.0) for firm in CanonicalFirm],
            SELECTED: [firm in selected for firm in CanonicalFirm],
        }
    )

    ranks = df.loc[df[SELECTED], TOTAL].rank(ascending=False, method="min")
    df[RANK] = ranks.reindex(df.index).astype("Int64")
    return df


def summarize(result: OfferResult) -> Dict[str, Any]:
    """Flat dictionary of headline figures, suitable for logging or CLI output."""
    metrics = result.metrics
    return {
        "best_deal": metrics.total_deal.value,
        "best_firm": display_name(result.best_firm) if result.best_firm else None,
        "change_pct": metrics.total_deal.change,
        "is_up": metrics.total_deal.is_up,
        "recruiting_revenue": metrics.recruiting_revenue.value,
        "stay_vs_move_delta": metrics.total_comp_delta.value,
        "years": len(result.years),
        "selected_firms": [display_name(firm) for firm in result.selected_firms],
        "has_premium": result.has_premium,
    }
