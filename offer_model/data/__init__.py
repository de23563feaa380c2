from .readers import (
    DataReadError,
    deals_from_records,
    parameters_from_records,
    read_deal_table,
    read_parameter_table,
    read_profile,
)
from .resolvers import candidate_names, resolve_deal, resolve_parameter

__all__ = [
    "DataReadError",
    "candidate_names",
    "deals_from_records",
    "parameters_from_records",
    "read_deal_table",
    "read_parameter_table",
    "read_profile",
    "resolve_deal",
    "resolve_parameter",
]
