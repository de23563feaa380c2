# offer_model/engines/aggregation.py
"""
Aggregation & ranking: per-firm totals, the headline best offer, the
stay-vs-move delta and the summary metrics.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np

from offer_model.config.models import DEFAULT_CONFIG, GlobalParameters
from offer_model.models import (
    BackendBreakdown,
    DeltaMetric,
    OfferMetrics,
    OfferResult,
    TrendMetric,
    YearlyOffer,
)
from offer_model.schema.columns import CanonicalFirm
from offer_model.state.history import BestDealHistory
from offer_model.utils.numeric import is_valid_number, round_half_up, safe_value, valid_positive

logger = logging.getLogger(__name__)

MILLION = 1_000_000

# Best-offer fallback chain
UPFRONT_FALLBACK_MULTIPLE = 3
DEFAULT_BEST_DEAL = 3.5

# Firms whose guaranteed upfront backs the best deal when no selected total is usable
UPFRONT_FALLBACK_FIRMS = (
    CanonicalFirm.MORGAN_STANLEY,
    CanonicalFirm.MERRILL_LYNCH,
    CanonicalFirm.UBS_WEALTH,
    CanonicalFirm.AMERIPRISE,
    CanonicalFirm.FINET,
)

# Stay-vs-move is always measured over ten years, independent of the display horizon
STAY_VS_MOVE_YEARS = 10

# Preserved literal shown next to the recruiting revenue figure
RECRUITING_REVENUE_CHANGE = 5

TOTAL_DEAL_DESCRIPTION = "Based on your current book size and business composition"
RECRUITING_REVENUE_DESCRIPTION = (
    "Your trailing 12-month revenue used for recruiting calculations"
)
TOTAL_COMP_DELTA_DESCRIPTION = (
    "10-year increased earnings from moving vs. staying at current firm"
)


def firm_totals(
    series: Mapping[CanonicalFirm, Sequence[YearlyOffer]]
) -> Dict[CanonicalFirm, float]:
    """Sum each firm's series; non-finite yearly values count as 0."""
    totals = {}
    for firm in CanonicalFirm:
        offers = series.get(firm, ())
        totals[firm] = float(sum(safe_value(offer.value, 0.0) for offer in offers))
    return totals


def select_best_deal(
    totals: Mapping[CanonicalFirm, float],
    selected_firms: Iterable[CanonicalFirm],
    guaranteed_upfront: Mapping[CanonicalFirm, float],
) -> Tuple[float, Optional[CanonicalFirm]]:
    """
    Pick the headline offer.

    Tier 1 is the best valid total among selected firms. Tier 2 is the best
    valid guaranteed upfront among ``UPFRONT_FALLBACK_FIRMS`` times three.
    Tier 3 is a flat 3.5M.

    Returns:
        (best deal in millions, firm that produced it or None for tiers 2/3)
    """
    chosen = set(selected_firms)
    selected = [firm for firm in CanonicalFirm if firm in chosen]
    candidates = [(totals.get(firm), firm) for firm in selected]
    candidates = [(value, firm) for value, firm in candidates if valid_positive([value])]
    if candidates:
        best_value = max(value for value, _ in candidates)
        best_firm = next(firm for value, firm in candidates if value == best_value)
        return float(best_value), best_firm

    upfront_multiples = valid_positive(
        guaranteed_upfront[firm] * UPFRONT_FALLBACK_MULTIPLE
        for firm in UPFRONT_FALLBACK_FIRMS
        if is_valid_number(guaranteed_upfront.get(firm))
    )
    if upfront_multiples:
        logger.info("No valid selected-firm totals; best deal from guaranteed upfront x3")
        return max(upfront_multiples), None

    logger.info(f"No valid totals or upfronts; best deal defaults to {DEFAULT_BEST_DEAL}M")
    return DEFAULT_BEST_DEAL, None


def stay_vs_move_delta(
    best_deal: float, revenue: float, global_parameters: GlobalParameters
) -> float:
    """Best offer minus ten years of income at the current grid, in millions."""
    years = np.arange(STAY_VS_MOVE_YEARS)
    baseline = float(
        np.sum(
            revenue
            * np.power(1 + global_parameters.annual_growth_rate, years)
            * global_parameters.current_grid_payout
        )
    )
    delta = (best_deal * MILLION - baseline) / MILLION
    return safe_value(delta, 0.0)


def percent_change(current: float, previous: Optional[float]) -> int:
    if previous is None or not is_valid_number(previous) or previous <= 0:
        return 0
    return round_half_up((current - previous) / previous * 100)


def _read_history(history: BestDealHistory) -> Optional[float]:
    try:
        return history.get()
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Previous best deal unavailable: {e}")
        return None


def _write_history(history: BestDealHistory, value: float) -> None:
    try:
        history.set(value)
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Could not store best deal {value:.4f}: {e}")


def aggregate(
    series: Mapping[CanonicalFirm, Sequence[YearlyOffer]],
    selected_firms: Iterable[CanonicalFirm],
    previous_best_deal: Optional[float] = None,
    *,
    guaranteed_upfront: Mapping[CanonicalFirm, float],
    revenue: float,
    global_parameters: Optional[GlobalParameters] = None,
    history: Optional[BestDealHistory] = None,
    has_premium: bool = False,
) -> OfferResult:
    """
    Build the OfferResult from projected series.

    ``previous_best_deal`` takes precedence over ``history`` for reading;
    when ``history`` is given the new best deal is written back to it.
    """
    settings = global_parameters or DEFAULT_CONFIG.global_parameters
    chosen = set(selected_firms)
    selected = tuple(firm for firm in CanonicalFirm if firm in chosen)
    revenue = safe_value(revenue, 0.0)

    totals = firm_totals(series)
    best_deal, best_firm = select_best_deal(totals, selected, guaranteed_upfront)

    if previous_best_deal is None and history is not None:
        previous_best_deal = _read_history(history)
    # change and history both use the best deal after fallback, never the raw selected max
    change = percent_change(best_deal, previous_best_deal)

    if history is not None:
        _write_history(history, best_deal)

    metrics = OfferMetrics(
        total_deal=TrendMetric(
            value=best_deal,
            change=change,
            is_up=change >= 0,
            description=TOTAL_DEAL_DESCRIPTION,
        ),
        recruiting_revenue=TrendMetric(
            value=revenue,
            change=RECRUITING_REVENUE_CHANGE,
            is_up=True,
            description=RECRUITING_REVENUE_DESCRIPTION,
        ),
        total_comp_delta=DeltaMetric(
            value=stay_vs_move_delta(best_deal, revenue, settings),
            description=TOTAL_COMP_DELTA_DESCRIPTION,
        ),
    )

    breakdown = BackendBreakdown(
        growth=settings.backend_growth_pct,
        assets=settings.backend_assets_pct,
        length_of_service=settings.backend_service_pct,
    )

    frozen_series: Dict[CanonicalFirm, Tuple[YearlyOffer, ...]] = {
        firm: tuple(series.get(firm, ())) for firm in CanonicalFirm
    }
    upfront: Dict[CanonicalFirm, float] = {
        firm: safe_value(guaranteed_upfront.get(firm), 0.0) for firm in CanonicalFirm
    }

    return OfferResult(
        metrics=metrics,
        series=MappingProxyType(frozen_series),
        guaranteed_upfront=MappingProxyType(upfront),
        backend_breakdown=breakdown,
        totals=MappingProxyType(totals),
        best_firm=best_firm,
        selected_firms=selected,
        has_premium=has_premium,
    )
