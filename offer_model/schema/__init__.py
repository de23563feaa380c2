from .columns import (
    DEAL_COLS,
    GLOBAL_FIRM,
    PARAMETER_COLS,
    CanonicalFirm,
    ComparisonColumns,
    DealColumns,
    ParameterColumns,
    canonical_firm_keys,
)

__all__ = [
    "CanonicalFirm",
    "ComparisonColumns",
    "DealColumns",
    "ParameterColumns",
    "DEAL_COLS",
    "PARAMETER_COLS",
    "GLOBAL_FIRM",
    "canonical_firm_keys",
]
