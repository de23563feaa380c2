"""
Firm terms table: one row per canonical firm.

Every per-firm business constant lives here, and the same variant lists
drive name normalization, parameter lookups and deal lookups.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Mapping, Optional, Tuple

from offer_model.schema.columns import CanonicalFirm


class ConfigError(Exception):
    """Exception raised for errors in the firm terms table."""
    pass


@dataclass(frozen=True)
class FirmTerms:
    """Projection constants for one canonical firm.

    Args:
        firm: Canonical identifier
        display_name: Human-readable name, also used for containment matching
        variants: Lower-case spellings seen in external data and selections
        grid_payout_ratio: Firm-specific payout ratio; None uses the global new grid payout
        fallback_upfront_ratio: Upfront multiple of revenue when no deal resolves
        fallback_backend_ratio: Backend multiple of revenue when no deal resolves
        upfront_override_ratio: When set, replaces the upfront whether or not a deal resolves
        widened_match_tokens: Substrings accepted by the deal resolver as a last resort
    """
    firm: CanonicalFirm
    display_name: str
    variants: Tuple[str, ...]
    grid_payout_ratio: Optional[float]
    fallback_upfront_ratio: float
    fallback_backend_ratio: float
    upfront_override_ratio: Optional[float] = None
    widened_match_tokens: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(
            self, "variants", tuple(v.strip().lower() for v in self.variants if v.strip())
        )
        assert self.fallback_upfront_ratio >= 0, (
            f"{self.firm}: fallback_upfront_ratio must not be negative"
        )
        assert self.fallback_backend_ratio >= 0, (
            f"{self.firm}: fallback_backend_ratio must not be negative"
        )

    @property
    def lookup_names(self) -> Tuple[str, ...]:
        """Display name first, then variants, without duplicates."""
        names = [self.display_name.strip().lower()]
        names.extend(v for v in self.variants if v not in names)
        return tuple(names)

    def payout_ratio(self, global_ratio: float) -> float:
        return global_ratio if self.grid_payout_ratio is None else self.grid_payout_ratio


# Business defaults; preserved as literals for output compatibility.
FIRM_TERMS: Dict[CanonicalFirm, FirmTerms] = {
    CanonicalFirm.MORGAN_STANLEY: FirmTerms(
        firm=CanonicalFirm.MORGAN_STANLEY,
        display_name="Morgan Stanley",
        variants=("morgan stanley", "ms"),
        grid_payout_ratio=None,
        fallback_upfront_ratio=1.60,
        fallback_backend_ratio=0.30,
        widened_match_tokens=("morgan", "ms"),
    ),
    CanonicalFirm.MERRILL_LYNCH: FirmTerms(
        firm=CanonicalFirm.MERRILL_LYNCH,
        display_name="Merrill Lynch",
        variants=("merrill lynch", "merrill", "ml"),
        grid_payout_ratio=None,
        fallback_upfront_ratio=1.70,
        fallback_backend_ratio=0.0,
    ),
    CanonicalFirm.UBS_WEALTH: FirmTerms(
        firm=CanonicalFirm.UBS_WEALTH,
        display_name="UBS Wealth",
        variants=("ubs wealth", "ubs", "ubs financial", "ubs wealth management"),
        grid_payout_ratio=None,
        fallback_upfront_ratio=1.85,
        fallback_backend_ratio=0.0,
    ),
    CanonicalFirm.AMERIPRISE: FirmTerms(
        firm=CanonicalFirm.AMERIPRISE,
        display_name="Ameriprise",
        variants=("ameriprise", "ameriprise financial"),
        grid_payout_ratio=0.75,
        fallback_upfront_ratio=1.20,
        fallback_backend_ratio=0.30,
    ),
    CanonicalFirm.FINET: FirmTerms(
        firm=CanonicalFirm.FINET,
        display_name="Finet",
        variants=("finet",),
        grid_payout_ratio=0.85,
        fallback_upfront_ratio=0.40,
        fallback_backend_ratio=0.25,
    ),
    CanonicalFirm.INDEPENDENT: FirmTerms(
        firm=CanonicalFirm.INDEPENDENT,
        display_name="Independent",
        variants=("independent", "lpl financial", "lpl", "linsco"),
        grid_payout_ratio=0.80,
        fallback_upfront_ratio=0.25,
        fallback_backend_ratio=0.0,
    ),
    CanonicalFirm.GOLDMAN: FirmTerms(
        firm=CanonicalFirm.GOLDMAN,
        display_name="Goldman Sachs",
        variants=("goldman sachs", "goldman", "goldman sachs - custody", "gs"),
        grid_payout_ratio=0.50,
        fallback_upfront_ratio=1.90,
        fallback_backend_ratio=0.30,
    ),
    CanonicalFirm.JPM: FirmTerms(
        firm=CanonicalFirm.JPM,
        display_name="J.P. Morgan",
        variants=("j.p. morgan", "jpm", "jpmorgan", "jp morgan"),
        grid_payout_ratio=0.48,
        fallback_upfront_ratio=1.80,
        fallback_backend_ratio=0.0,
    ),
    CanonicalFirm.RBC: FirmTerms(
        firm=CanonicalFirm.RBC,
        display_name="RBC",
        variants=("rbc", "rbc wealth"),
        grid_payout_ratio=0.55,
        fallback_upfront_ratio=1.50,
        fallback_backend_ratio=0.30,
    ),
    # Edward Jones and Stifel are bucketed with Raymond James as regionals
    CanonicalFirm.RAYMOND_JAMES: FirmTerms(
        firm=CanonicalFirm.RAYMOND_JAMES,
        display_name="Raymond James",
        variants=("raymond james", "rj", "edward jones", "ed jones", "stifel"),
        grid_payout_ratio=0.55,
        fallback_upfront_ratio=1.00,
        fallback_backend_ratio=0.30,
    ),
    CanonicalFirm.ROCKEFELLER: FirmTerms(
        firm=CanonicalFirm.ROCKEFELLER,
        display_name="Rockefeller",
        variants=("rockefeller", "rock"),
        grid_payout_ratio=0.50,
        fallback_upfront_ratio=1.60,
        fallback_backend_ratio=0.30,
    ),
    CanonicalFirm.SANCTUARY: FirmTerms(
        firm=CanonicalFirm.SANCTUARY,
        display_name="Sanctuary",
        variants=("sanctuary", "sanctuary wealth"),
        grid_payout_ratio=0.60,
        fallback_upfront_ratio=0.60,
        fallback_backend_ratio=0.30,
        upfront_override_ratio=0.60,
    ),
    CanonicalFirm.WELLS_FARGO: FirmTerms(
        firm=CanonicalFirm.WELLS_FARGO,
        display_name="Wells Fargo",
        variants=("wells fargo", "wells", "wf"),
        grid_payout_ratio=0.50,
        fallback_upfront_ratio=1.50,
        fallback_backend_ratio=0.30,
    ),
    CanonicalFirm.TRU: FirmTerms(
        firm=CanonicalFirm.TRU,
        display_name="Truist",
        variants=("truist", "tru"),
        grid_payout_ratio=0.45,
        fallback_upfront_ratio=0.60,
        fallback_backend_ratio=0.30,
        upfront_override_ratio=0.60,
    ),
}


def build_variant_table(terms: Iterable[FirmTerms]) -> Dict[str, CanonicalFirm]:
    """Map every known lower-case spelling to its canonical firm.

    Raises:
        ConfigError: if one spelling is claimed by two firms.
    """
    table: Dict[str, CanonicalFirm] = {}
    for entry in terms:
        spellings = set(entry.lookup_names) | {entry.firm.value.lower()}
        for spelling in spellings:
            owner = table.get(spelling)
            if owner is not None and owner != entry.firm:
                raise ConfigError(
                    f"Firm name variant '{spelling}' maps to both {owner} and {entry.firm}"
                )
            table[spelling] = entry.firm
    return table


VARIANT_TABLE: Dict[str, CanonicalFirm] = build_variant_table(FIRM_TERMS.values())


def get_firm_terms(
    firm: CanonicalFirm, firm_terms: Optional[Mapping[CanonicalFirm, FirmTerms]] = None
) -> FirmTerms:
    terms = firm_terms if firm_terms is not None else FIRM_TERMS
    return terms.get(firm, FIRM_TERMS[firm])


def apply_overrides(
    overrides: Mapping[CanonicalFirm, Mapping[str, Optional[float]]],
    base: Optional[Mapping[CanonicalFirm, FirmTerms]] = None,
) -> Dict[CanonicalFirm, FirmTerms]:
    """Return a new terms table with numeric fields replaced per firm.

    Names and variants are never overridable so the variant table stays valid.
    """
    allowed = {
        "grid_payout_ratio",
        "fallback_upfront_ratio",
        "fallback_backend_ratio",
        "upfront_override_ratio",
    }
    merged = dict(base if base is not None else FIRM_TERMS)
    for firm, fields in overrides.items():
        unknown = set(fields) - allowed
        if unknown:
            raise ConfigError(f"Unsupported firm term override(s) for {firm}: {sorted(unknown)}")
        merged[firm] = replace(merged[firm], **dict(fields))
    return merged
