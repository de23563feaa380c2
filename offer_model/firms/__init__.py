__all__ = [
    "FirmTerms",
    "ConfigError",
    "FIRM_TERMS",
    "VARIANT_TABLE",
    "apply_overrides",
    "get_firm_terms",
    "normalize",
    "normalize_selection",
    "display_name",
]

from .normalizer import display_name, normalize, normalize_selection
from .registry import (
    FIRM_TERMS,
    VARIANT_TABLE,
    ConfigError,
    FirmTerms,
    apply_overrides,
    get_firm_terms,
)
