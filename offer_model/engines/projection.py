# offer_model/engines/projection.py
"""
Multi-year compensation projection per firm.

Year 1 pays the guaranteed upfront plus grid, year 2 pays the backend plus
grid, and from year 3 on only the grid is paid (the recruiting deal has fully
amortised). Every canonical firm gets a series; unselected firms are all
zero so callers always receive a fixed-width table.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from offer_model.config.models import DEFAULT_CONFIG, GlobalParameters
from offer_model.data.resolvers import resolve_deal, resolve_parameter
from offer_model.firms.normalizer import normalize
from offer_model.firms.registry import FIRM_TERMS, FirmTerms, get_firm_terms
from offer_model.models import AdvisorProfile, FirmDeal, YearlyOffer
from offer_model.rules.adjustments import Adjustments, compute_adjustments
from offer_model.schema.columns import (
    GLOBAL_FIRM,
    PARAM_ANNUAL_GROWTH_RATE,
    PARAM_BACKEND_ASSETS_PCT,
    PARAM_BACKEND_GROWTH_PCT,
    PARAM_BACKEND_SERVICE_PCT,
    PARAM_CURRENT_GRID_PAYOUT,
    PARAM_NEW_GRID_PAYOUT,
    PARAM_YEARS_TO_DISPLAY,
    CanonicalFirm,
)
from offer_model.utils.numeric import round_half_up, safe_value

logger = logging.getLogger(__name__)

MILLION = 1_000_000
MIN_HORIZON_YEARS = 1
MAX_HORIZON_YEARS = 10


def resolve_global_parameters(
    parameters: Optional[Sequence[Any]],
    defaults: Optional[GlobalParameters] = None,
) -> GlobalParameters:
    """Read engine-wide parameters from the ``Global`` rows of the table.

    Missing rows fall back to ``defaults`` (the engine configuration).
    """
    defaults = defaults or DEFAULT_CONFIG.global_parameters

    def lookup(name: str, default: float) -> float:
        return resolve_parameter(parameters, GLOBAL_FIRM, name, default)

    years = round_half_up(lookup(PARAM_YEARS_TO_DISPLAY, defaults.years_to_display))
    if years < MIN_HORIZON_YEARS:
        logger.warning(f"yearsToDisplay resolved to {years}; using {MIN_HORIZON_YEARS}")
        years = MIN_HORIZON_YEARS
    elif years > MAX_HORIZON_YEARS:
        logger.warning(f"yearsToDisplay resolved to {years}; using {MAX_HORIZON_YEARS}")
        years = MAX_HORIZON_YEARS

    return defaults.model_copy(
        update={
            "years_to_display": years,
            "current_grid_payout": lookup(PARAM_CURRENT_GRID_PAYOUT, defaults.current_grid_payout),
            "new_grid_payout": lookup(PARAM_NEW_GRID_PAYOUT, defaults.new_grid_payout),
            "annual_growth_rate": lookup(PARAM_ANNUAL_GROWTH_RATE, defaults.annual_growth_rate),
            "backend_growth_pct": lookup(PARAM_BACKEND_GROWTH_PCT, defaults.backend_growth_pct),
            "backend_assets_pct": lookup(PARAM_BACKEND_ASSETS_PCT, defaults.backend_assets_pct),
            "backend_service_pct": lookup(PARAM_BACKEND_SERVICE_PCT, defaults.backend_service_pct),
        }
    )


def resolve_firm_deals(
    deals: Optional[Sequence[Any]],
    firm_terms: Optional[Mapping[CanonicalFirm, FirmTerms]] = None,
) -> Dict[CanonicalFirm, Optional[FirmDeal]]:
    """Resolve one deal row (or None) for every canonical firm."""
    terms = firm_terms if firm_terms is not None else FIRM_TERMS
    return {firm: resolve_deal(deals, firm) for firm in terms}


def upfront_payment(
    profile: AdvisorProfile,
    deal: Optional[FirmDeal],
    adjustments: Adjustments,
    terms: FirmTerms,
) -> float:
    """Guaranteed upfront for one firm, in millions."""
    revenue_m = profile.revenue_millions
    if terms.upfront_override_ratio is not None:
        return terms.upfront_override_ratio * revenue_m
    if deal is not None:
        return deal.upfront_midpoint * adjustments.upfront_multiplier * revenue_m
    logger.debug(
        f"No deal for {terms.firm}; upfront fallback {terms.fallback_upfront_ratio:.2f}x revenue"
    )
    return terms.fallback_upfront_ratio * revenue_m


def backend_payment(
    profile: AdvisorProfile,
    deal: Optional[FirmDeal],
    adjustments: Adjustments,
    terms: FirmTerms,
) -> float:
    """Year-2 backend for one firm, in millions."""
    revenue_m = profile.revenue_millions
    if deal is not None:
        return deal.backend_midpoint * adjustments.backend_multiplier * revenue_m
    return terms.fallback_backend_ratio * revenue_m


def compute_guaranteed_upfront(
    profile: AdvisorProfile,
    deals: Optional[Sequence[Any]] = None,
    adjustments: Optional[Adjustments] = None,
    firm_terms: Optional[Mapping[CanonicalFirm, FirmTerms]] = None,
) -> Dict[CanonicalFirm, float]:
    """Guaranteed upfront for every canonical firm, regardless of selection."""
    adjustments = adjustments or compute_adjustments(profile)
    resolved = resolve_firm_deals(deals, firm_terms)
    upfront = {}
    for firm in CanonicalFirm:
        terms = get_firm_terms(firm, firm_terms)
        upfront[firm] = safe_value(
            upfront_payment(profile, resolved.get(firm), adjustments, terms), 0.0
        )
    return upfront


def _selected_set(firms: Optional[Iterable[Any]]) -> set:
    chosen = set()
    for firm in firms or ():
        canonical = normalize(firm)
        if canonical is not None:
            chosen.add(canonical)
    return chosen


def project(
    profile: AdvisorProfile,
    firms: Optional[Iterable[Any]],
    parameters: Optional[Sequence[Any]] = None,
    deals: Optional[Sequence[Any]] = None,
    horizon_years: Optional[int] = None,
    adjustments: Optional[Adjustments] = None,
    global_parameters: Optional[GlobalParameters] = None,
    firm_terms: Optional[Mapping[CanonicalFirm, FirmTerms]] = None,
) -> Dict[CanonicalFirm, List[YearlyOffer]]:
    """
    Project yearly compensation for every canonical firm.

    Args:
        profile: The advisor's book of business.
        firms: Selected firms (canonical or raw names). Others are zeroed.
        parameters: Sparse parameter table; ``Global`` rows set growth and payout.
        deals: Sparse deal table.
        horizon_years: Years to project; defaults to the resolved ``yearsToDisplay``.
        adjustments: Precomputed adjustments; computed from ``profile`` if omitted.
        global_parameters: Already resolved global parameters.
        firm_terms: Firm terms table; defaults to the built-in table.

    Returns:
        Mapping of each canonical firm to its list of YearlyOffer, year 1 first.
    """
    settings = global_parameters or resolve_global_parameters(parameters)
    horizon = int(horizon_years or settings.years_to_display)
    horizon = min(MAX_HORIZON_YEARS, max(MIN_HORIZON_YEARS, horizon))
    adjustments = adjustments or compute_adjustments(profile)
    selected = _selected_set(firms)
    resolved = resolve_firm_deals(deals, firm_terms)

    years = np.arange(1, horizon + 1)
    revenue_by_year = profile.revenue * np.power(1 + settings.annual_growth_rate, years - 1)

    series: Dict[CanonicalFirm, List[YearlyOffer]] = {}
    for firm in CanonicalFirm:
        if firm not in selected:
            series[firm] = [YearlyOffer(int(y), firm, 0.0) for y in years]
            continue

        terms = get_firm_terms(firm, firm_terms)
        deal = resolved.get(firm)
        values = revenue_by_year * terms.payout_ratio(settings.new_grid_payout) / MILLION
        values[0] += upfront_payment(profile, deal, adjustments, terms)
        if horizon >= 2:
            values[1] += backend_payment(profile, deal, adjustments, terms)

        series[firm] = [
            YearlyOffer(int(y), firm, safe_value(v, 0.0)) for y, v in zip(years, values)
        ]
        logger.debug(
            f"{firm}: year 1 {series[firm][0].value:.4f}M, "
            f"{horizon}-year total {float(np.nansum(values)):.4f}M"
        )

    return series
