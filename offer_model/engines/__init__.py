from .aggregation import aggregate, firm_totals, select_best_deal, stay_vs_move_delta
from .calculator import calculate_offers
from .projection import compute_guaranteed_upfront, project, resolve_global_parameters

__all__ = [
    "aggregate",
    "calculate_offers",
    "compute_guaranteed_upfront",
    "firm_totals",
    "project",
    "resolve_global_parameters",
    "select_best_deal",
    "stay_vs_move_delta",
]
