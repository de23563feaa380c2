from .numeric import (
    coerce_number,
    is_valid_number,
    parse_number,
    round_half_up,
    safe_value,
    valid_positive,
)

__all__ = [
    "coerce_number",
    "is_valid_number",
    "parse_number",
    "round_half_up",
    "safe_value",
    "valid_positive",
]
