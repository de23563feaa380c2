from .adjustments import NO_ADJUSTMENTS, RULES, Adjustments, compute_adjustments

__all__ = ["Adjustments", "NO_ADJUSTMENTS", "RULES", "compute_adjustments"]
