# offer_model/utils/numeric.py
"""
Numeric coercion shared by the data model, resolvers and engines.

Values arriving from forms and external tables can be strings with thousands
separators, currency symbols, None, booleans or NaN. Everything here turns
those into plain floats or reports that no usable number exists.
"""

import math
from typing import Any, Iterable, List, Optional

import numpy as np

_STRIP_CHARS = (",", "$", "%", " ", "_")


def parse_number(value: Any) -> Optional[float]:
    """Parse ``value`` into a finite float, or return None if impossible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        cleaned = value.strip()
        for ch in _STRIP_CHARS:
            cleaned = cleaned.replace(ch, "")
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Parse-and-default: return ``value`` as a finite float or ``default``."""
    number = parse_number(value)
    return default if number is None else number


def is_valid_number(value: Any) -> bool:
    """True for finite real numbers (bools excluded)."""
    return parse_number(value) is not None and not isinstance(value, str)


def valid_positive(values: Iterable[Any]) -> List[float]:
    """Keep only finite, strictly positive numbers."""
    kept = []
    for value in values:
        if is_valid_number(value) and float(value) > 0:
            kept.append(float(value))
    return kept


def safe_value(value: Any, fallback: float) -> float:
    """Return ``value`` when it is a finite number, else ``fallback``."""
    return float(value) if is_valid_number(value) else fallback


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))
