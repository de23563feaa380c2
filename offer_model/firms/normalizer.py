# offer_model/firms/normalizer.py
"""
Maps raw firm-name strings to canonical firm keys.

Exact variant match first, then substring containment in either direction
against the canonical display names (canonical order, first hit wins).
"""

import logging
from typing import Any, Iterable, Optional, Tuple

from offer_model.firms.registry import FIRM_TERMS, VARIANT_TABLE
from offer_model.schema.columns import CanonicalFirm

logger = logging.getLogger(__name__)


def clean_name(raw_name: Any) -> str:
    """Lower-case and trim; anything that is not a string cleans to ''."""
    if not isinstance(raw_name, str):
        return ""
    return raw_name.strip().lower()


def normalize(raw_name: Any) -> Optional[CanonicalFirm]:
    """Return the canonical firm for ``raw_name`` or None if unmapped.

    Accepts a CanonicalFirm unchanged. Never raises.
    """
    if isinstance(raw_name, CanonicalFirm):
        return raw_name
    name = clean_name(raw_name)
    if not name:
        return None

    firm = VARIANT_TABLE.get(name)
    if firm is not None:
        return firm

    for terms in FIRM_TERMS.values():
        display = terms.display_name.lower()
        if display in name or name in display:
            logger.debug(f"Firm '{raw_name}' matched {terms.firm} by containment")
            return terms.firm

    return None


def normalize_selection(raw_names: Optional[Iterable[Any]]) -> Tuple[CanonicalFirm, ...]:
    """Normalize a caller's firm selection.

    Returns the distinct canonical firms in canonical order. Unmapped names
    are dropped with a warning.
    """
    if not raw_names:
        return ()
    if isinstance(raw_names, str):
        raw_names = [raw_names]

    chosen = set()
    for raw in raw_names:
        firm = normalize(raw)
        if firm is None:
            logger.warning(f"Ignoring unrecognised firm selection: {raw!r}")
            continue
        chosen.add(firm)
    return tuple(firm for firm in CanonicalFirm if firm in chosen)


def display_name(firm: CanonicalFirm) -> str:
    return FIRM_TERMS[firm].display_name
