# offer_model/data/resolvers.py
"""
Lookups against the sparse external parameter and deal tables.

Both resolvers expand the requested firm into its known spellings using the
shared variant table, then scan the table row by row. Malformed rows are
skipped; a failed lookup returns the caller's default and never raises.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence, Union

from offer_model.firms.normalizer import clean_name, normalize
from offer_model.firms.registry import FIRM_TERMS
from offer_model.models import FirmDeal, FirmParameter
from offer_model.schema.columns import PARAM_FIRM_TYPE, CanonicalFirm

logger = logging.getLogger(__name__)

FirmRef = Union[str, CanonicalFirm]


def _independent_firm_names(table: Optional[Iterable[Any]]) -> List[str]:
    """Firms tagged as independent by their ``firmType`` notes."""
    names: List[str] = []
    for row in table or ():
        param = FirmParameter.from_record(row)
        if param is None or param.param_name.strip().lower() != PARAM_FIRM_TYPE.lower():
            continue
        if "independent" in param.notes.lower():
            name = clean_name(param.firm)
            if name and name not in names:
                names.append(name)
    return names


def candidate_names(firm: FirmRef, table: Optional[Iterable[Any]] = None) -> List[str]:
    """Spellings to try, in priority order, for ``firm``.

    Unmapped names (e.g. the ``Global`` pseudo-firm) are tried verbatim.
    """
    canonical = normalize(firm)
    if canonical is None:
        name = clean_name(firm)
        return [name] if name else []

    names = list(FIRM_TERMS[canonical].lookup_names)
    if canonical is CanonicalFirm.INDEPENDENT:
        names.extend(n for n in _independent_firm_names(table) if n not in names)
    return names


def resolve_parameter(
    table: Optional[Sequence[Any]],
    firm: FirmRef,
    param_name: str,
    default: float,
) -> float:
    """Return ``param_name`` for ``firm`` from ``table``, or ``default``.

    Candidates are tried in priority order; within a candidate the first row
    in table order with a numeric value wins.
    """
    if not table or not isinstance(param_name, str):
        return default

    wanted = param_name.strip().lower()
    rows = [FirmParameter.from_record(row) for row in table]
    for candidate in candidate_names(firm, table):
        for param in rows:
            if param is None:
                continue
            if clean_name(param.firm) != candidate:
                continue
            if param.param_name.strip().lower() != wanted:
                continue
            if param.param_value is None:
                logger.debug(
                    f"Skipping non-numeric value for {param.firm}/{param.param_name}"
                )
                continue
            return param.param_value

    logger.debug(f"No '{param_name}' parameter for {firm}; using default {default}")
    return default


def resolve_deal(table: Optional[Sequence[Any]], firm: FirmRef) -> Optional[FirmDeal]:
    """Return the deal row for ``firm`` or None.

    Firms with widened match tokens fall back to the first row whose firm
    name contains any token.
    """
    if not table:
        return None

    deals = [FirmDeal.from_record(row) for row in table]
    for candidate in candidate_names(firm):
        for deal in deals:
            if deal is not None and clean_name(deal.firm) == candidate:
                return deal

    canonical = normalize(firm)
    if canonical is not None:
        tokens = FIRM_TERMS[canonical].widened_match_tokens
        for deal in deals:
            if deal is None:
                continue
            name = clean_name(deal.firm)
            if any(token in name for token in tokens):
                logger.info(f"Deal for {canonical} resolved by widened match on '{deal.firm}'")
                return deal

    return None
