# offer_model/engines/calculator.py
"""
Entry point tying the engine together: normalize, resolve, adjust, project,
aggregate.
"""

import logging
import time
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from offer_model.config.models import DEFAULT_CONFIG, EngineConfig
from offer_model.engines.aggregation import aggregate
from offer_model.engines.projection import (
    compute_guaranteed_upfront,
    project,
    resolve_global_parameters,
)
from offer_model.firms.normalizer import normalize_selection
from offer_model.logging_config import PERFORMANCE_LOGGER, PROJECTION_LOGGER
from offer_model.models import AdvisorProfile, OfferResult
from offer_model.rules.adjustments import compute_adjustments
from offer_model.state.history import BestDealHistory

logger = logging.getLogger(__name__)
proj_logger = logging.getLogger(PROJECTION_LOGGER)
perf_logger = logging.getLogger(PERFORMANCE_LOGGER)


def calculate_offers(
    profile: Union[AdvisorProfile, Mapping[str, Any]],
    firm_parameters: Optional[Sequence[Any]] = None,
    firm_deals: Optional[Sequence[Any]] = None,
    selected_firms: Optional[Iterable[Any]] = None,
    has_premium: bool = False,
    previous_best_deal: Optional[float] = None,
    history: Optional[BestDealHistory] = None,
    config: Optional[EngineConfig] = None,
) -> OfferResult:
    """
    Compute every firm's projected offer for one advisor.

    Args:
        profile: AdvisorProfile or a mapping that validates into one.
        firm_parameters: Sparse parameter rows (FirmParameter or raw mappings).
        firm_deals: Sparse deal rows (FirmDeal or raw mappings).
        selected_firms: Raw or canonical firm names to compare; unmapped names are dropped.
        has_premium: When False, only the fee-based tier adjustment can apply.
        previous_best_deal: Last reported best deal, for the percent change.
        history: Optional get/set store for the previous best deal.
        config: Engine configuration; parameter-table values override it.

    Returns:
        OfferResult with a series for every canonical firm.
    """
    start_time = time.time()
    config = config or DEFAULT_CONFIG

    if not isinstance(profile, AdvisorProfile):
        profile = AdvisorProfile.model_validate(dict(profile or {}))
    if not has_premium:
        profile = profile.without_premium_attributes()

    selection = normalize_selection(selected_firms or ())
    settings = resolve_global_parameters(firm_parameters, config.global_parameters)
    firm_terms = config.resolved_firm_terms()
    adjustments = compute_adjustments(profile)
    logger.debug(
        f"Adjustments: upfront {adjustments.upfront_pct:+.2%}, "
        f"backend {adjustments.backend_pct:+.2%} from {list(adjustments.applied)}"
    )

    upfront = compute_guaranteed_upfront(profile, firm_deals, adjustments, firm_terms)
    series = project(
        profile,
        selection,
        parameters=firm_parameters,
        deals=firm_deals,
        horizon_years=settings.years_to_display,
        adjustments=adjustments,
        global_parameters=settings,
        firm_terms=firm_terms,
    )

    result = aggregate(
        series,
        selection,
        previous_best_deal,
        guaranteed_upfront=upfront,
        revenue=profile.revenue,
        global_parameters=settings,
        history=history,
        has_premium=has_premium,
    )

    best = result.metrics.total_deal
    proj_logger.info(
        f"Projected {len(selection)} selected firm(s) over {settings.years_to_display} years: "
        f"best deal {best.value:.2f}M ({result.best_firm or 'fallback'}), "
        f"change {best.change:+d}%, stay-vs-move {result.metrics.total_comp_delta.value:.2f}M"
    )
    perf_logger.info(f"calculate_offers completed in {time.time() - start_time:.4f} seconds")
    return result
