# offer_model/rules/adjustments.py
"""
Derives upfront/backend percentage adjustments from an advisor's business mix.

The rules form an additive stack evaluated in a fixed order. Each rule returns
an (upfront, backend) delta; the deltas are summed, never compounded, and the
totals are applied elsewhere as ``(1 + upfront_pct)`` / ``(1 + backend_pct)``.
The combined result is deliberately left unclamped.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Tuple

from offer_model.models import AdvisorProfile

logger = logging.getLogger(__name__)

# Fee-based tiers (percent of book)
FEE_BASED_HIGH_THRESHOLD = 85
FEE_BASED_LOW_THRESHOLD = 65
FEE_BASED_HIGH_UPFRONT = 0.05
FEE_BASED_HIGH_BACKEND = 0.10
FEE_BASED_LOW_UPFRONT = -0.05
FEE_BASED_LOW_BACKEND = -0.05

BANKING_UPFRONT = 0.02
INTERNATIONAL_BASE_UPFRONT = 0.03
INTERNATIONAL_MULTI_COUNTRY_UPFRONT = 0.02
INTERNATIONAL_MULTI_COUNTRY_MIN = 3  # strictly more than this many countries
INTERNATIONAL_DIVERSITY_UPFRONT = 0.02
LENDING_UPFRONT = 0.02
SMA_UPFRONT = 0.02
HOUSEHOLDS_THRESHOLD = 100
HOUSEHOLDS_BACKEND = 0.03
DEFERRED_COMP_UPFRONT = -0.03
ON_A_DEAL_UPFRONT = -0.05
ON_A_DEAL_BACKEND = -0.05

Delta = Tuple[float, float]


@dataclass(frozen=True)
class Adjustments:
    """Summed adjustment percentages and the rules that contributed."""

    upfront_pct: float = 0.0
    backend_pct: float = 0.0
    applied: Tuple[str, ...] = ()

    @property
    def upfront_multiplier(self) -> float:
        return 1 + self.upfront_pct

    @property
    def backend_multiplier(self) -> float:
        return 1 + self.backend_pct


NO_ADJUSTMENTS = Adjustments()


def fee_based_tier(profile: AdvisorProfile) -> Delta:
    if profile.fee_based_percentage >= FEE_BASED_HIGH_THRESHOLD:
        return FEE_BASED_HIGH_UPFRONT, FEE_BASED_HIGH_BACKEND
    if profile.fee_based_percentage < FEE_BASED_LOW_THRESHOLD:
        return FEE_BASED_LOW_UPFRONT, FEE_BASED_LOW_BACKEND
    return 0.0, 0.0


def banking(profile: AdvisorProfile) -> Delta:
    return (BANKING_UPFRONT, 0.0) if profile.banking else (0.0, 0.0)


def international(profile: AdvisorProfile) -> Delta:
    if not profile.international:
        return 0.0, 0.0
    upfront = INTERNATIONAL_BASE_UPFRONT
    if len(profile.international_countries) > INTERNATIONAL_MULTI_COUNTRY_MIN:
        upfront += INTERNATIONAL_MULTI_COUNTRY_UPFRONT
    upfront += INTERNATIONAL_DIVERSITY_UPFRONT
    return upfront, 0.0


def lending(profile: AdvisorProfile) -> Delta:
    return (LENDING_UPFRONT, 0.0) if profile.lending else (0.0, 0.0)


def sma_usage(profile: AdvisorProfile) -> Delta:
    return (SMA_UPFRONT, 0.0) if profile.smas else (0.0, 0.0)


def household_count(profile: AdvisorProfile) -> Delta:
    return (0.0, HOUSEHOLDS_BACKEND) if profile.households > HOUSEHOLDS_THRESHOLD else (0.0, 0.0)


def deferred_comp(profile: AdvisorProfile) -> Delta:
    return (DEFERRED_COMP_UPFRONT, 0.0) if profile.deferred_comp else (0.0, 0.0)


def on_a_deal(profile: AdvisorProfile) -> Delta:
    return (ON_A_DEAL_UPFRONT, ON_A_DEAL_BACKEND) if profile.on_a_deal else (0.0, 0.0)


# Evaluation order
RULES: List[Tuple[str, Callable[[AdvisorProfile], Delta]]] = [
    ("fee_based_tier", fee_based_tier),
    ("banking", banking),
    ("international", international),
    ("lending", lending),
    ("sma_usage", sma_usage),
    ("household_count", household_count),
    ("deferred_comp", deferred_comp),
    ("on_a_deal", on_a_deal),
]


def compute_adjustments(profile: AdvisorProfile) -> Adjustments:
    """Sum every rule's delta for ``profile``."""
    upfront_pct = 0.0
    backend_pct = 0.0
    applied = []
    for name, rule in RULES:
        upfront, backend = rule(profile)
        if upfront or backend:
            applied.append(name)
            logger.debug(f"Adjustment rule '{name}': upfront {upfront:+.2%}, backend {backend:+.2%}")
        upfront_pct += upfront
        backend_pct += backend

    return Adjustments(
        upfront_pct=upfront_pct, backend_pct=backend_pct, applied=tuple(applied)
    )
