# offer_model/models.py
"""
Data model for the offer projection engine.

``AdvisorProfile`` is a pydantic model so collaborator payloads (camelCase,
stringly-typed form values) validate directly into a clean, immutable input.
The table rows and the result types are frozen dataclasses.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from offer_model.schema.columns import CanonicalFirm
from offer_model.utils.numeric import coerce_number, parse_number

logger = logging.getLogger(__name__)

_TRUTHY = {"true", "yes", "y", "1", "on"}


def _record_get(record: Any, *names: str) -> Any:
    """Fetch the first present attribute/key among ``names`` from a row."""
    if record is None:
        return None
    for name in names:
        if isinstance(record, Mapping):
            if name in record and record[name] is not None:
                return record[name]
        else:
            value = getattr(record, name, None)
            if value is not None:
                return value
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# --- Input profile ---


class AdvisorProfile(BaseModel):
    """An advisor's book of business plus business-mix attributes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    aum: float = Field(0.0, description="Assets under management (dollars)")
    revenue: float = Field(0.0, description="Trailing 12-month revenue (dollars)")
    fee_based_percentage: float = Field(0.0, alias="feeBasedPercentage")
    city: str = ""
    state: str = ""
    current_firm: Optional[str] = Field(None, alias="currentFirm")

    # Premium-only business-mix attributes
    deferred_comp: bool = Field(False, alias="deferredComp")
    on_a_deal: bool = Field(False, alias="onADeal")
    banking: bool = False
    international: bool = False
    international_countries: Tuple[str, ...] = Field(
        default_factory=tuple, alias="internationalCountries"
    )
    lending: bool = False
    smas: bool = False
    households: int = 0

    @field_validator("aum", "revenue", "fee_based_percentage", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("households", mode="before")
    @classmethod
    def _coerce_households(cls, value: Any) -> int:
        return int(coerce_number(value))

    @field_validator(
        "deferred_comp", "on_a_deal", "banking", "international", "lending", "smas",
        mode="before",
    )
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    @field_validator("city", "state", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value).strip()

    @field_validator("current_firm", mode="before")
    @classmethod
    def _coerce_current_firm(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return _as_text(value).strip() or None

    @field_validator("international_countries", mode="before")
    @classmethod
    def _coerce_countries(cls, value: Any) -> Tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        try:
            items = list(value)
        except TypeError:
            return ()
        return tuple(_as_text(item).strip() for item in items if _as_text(item).strip())

    def without_premium_attributes(self) -> "AdvisorProfile":
        """Copy with every business-mix attribute reset to neutral."""
        return self.model_copy(
            update={
                "deferred_comp": False,
                "on_a_deal": False,
                "banking": False,
                "international": False,
                "international_countries": (),
                "lending": False,
                "smas": False,
                "households": 0,
            }
        )

    @property
    def revenue_millions(self) -> float:
        return self.revenue / 1_000_000


# --- External table rows ---


@dataclass(frozen=True)
class FirmParameter:
    """One sparse numeric fact about one firm from the external store.

    ``param_value`` is None when the source value was not numeric.
    """

    firm: str
    param_name: str
    param_value: Optional[float]
    notes: str = ""

    @classmethod
    def from_record(cls, record: Any) -> Optional["FirmParameter"]:
        """Build from a mapping or object, including an existing row.

        Returns None when firm or name is unusable.
        """
        firm = _record_get(record, "firm", "Firm", "firm_name", "Firm Name")
        name = _record_get(record, "param_name", "paramName", "Parameter", "name")
        if not isinstance(firm, str) or not isinstance(name, str):
            return None
        if not firm.strip() or not name.strip():
            return None
        return cls(
            firm=firm,
            param_name=name,
            param_value=parse_number(
                _record_get(record, "param_value", "paramValue", "value", "Value")
            ),
            notes=_as_text(_record_get(record, "notes", "Notes")),
        )


@dataclass(frozen=True)
class FirmDeal:
    """A firm's recruiting-deal ranges, expressed as multiples of revenue."""

    firm: str
    upfront_min: float = 0.0
    upfront_max: float = 0.0
    backend_min: float = 0.0
    backend_max: float = 0.0
    total_deal_min: float = 0.0
    total_deal_max: float = 0.0
    notes: str = ""

    @property
    def upfront_midpoint(self) -> float:
        return (self.upfront_min + self.upfront_max) / 2

    @property
    def backend_midpoint(self) -> float:
        return (self.backend_min + self.backend_max) / 2

    @classmethod
    def from_record(cls, record: Any) -> Optional["FirmDeal"]:
        """Build from a mapping or object, including an existing row; numeric gaps become 0."""
        firm = _record_get(record, "firm", "Firm", "firm_name", "Firm Name")
        if not isinstance(firm, str) or not firm.strip():
            return None
        return cls(
            firm=firm,
            upfront_min=coerce_number(_record_get(record, "upfront_min", "upfrontMin")),
            upfront_max=coerce_number(_record_get(record, "upfront_max", "upfrontMax")),
            backend_min=coerce_number(_record_get(record, "backend_min", "backendMin")),
            backend_max=coerce_number(_record_get(record, "backend_max", "backendMax")),
            total_deal_min=coerce_number(
                _record_get(record, "total_deal_min", "totalDealMin")
            ),
            total_deal_max=coerce_number(
                _record_get(record, "total_deal_max", "totalDealMax")
            ),
            notes=_as_text(_record_get(record, "notes", "Notes")),
        )


# --- Results ---


@dataclass(frozen=True)
class YearlyOffer:
    """Projected compensation for one firm in one year, in millions."""

    year: int
    firm: CanonicalFirm
    value: float


@dataclass(frozen=True)
class TrendMetric:
    value: float
    change: int
    is_up: bool
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "change": self.change,
            "isUp": self.is_up,
            "description": self.description,
        }


@dataclass(frozen=True)
class DeltaMetric:
    value: float
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "description": self.description}


@dataclass(frozen=True)
class OfferMetrics:
    total_deal: TrendMetric
    recruiting_revenue: TrendMetric
    total_comp_delta: DeltaMetric

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalDeal": self.total_deal.to_dict(),
            "recruitingRevenue": self.recruiting_revenue.to_dict(),
            "totalCompDelta": self.total_comp_delta.to_dict(),
        }


@dataclass(frozen=True)
class BackendBreakdown:
    """Percent of the backend attributable to growth, assets and tenure."""

    growth: float
    assets: float
    length_of_service: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "growth": self.growth,
            "assets": self.assets,
            "lengthOfService": self.length_of_service,
        }


@dataclass(frozen=True)
class OfferResult:
    """Complete output of one engine invocation."""

    metrics: OfferMetrics
    series: Mapping[CanonicalFirm, Tuple[YearlyOffer, ...]]
    guaranteed_upfront: Mapping[CanonicalFirm, float]
    backend_breakdown: BackendBreakdown
    totals: Mapping[CanonicalFirm, float] = field(default_factory=dict)
    best_firm: Optional[CanonicalFirm] = None
    selected_firms: Tuple[CanonicalFirm, ...] = ()
    has_premium: bool = False

    @property
    def years(self) -> List[int]:
        first = next(iter(self.series.values()), ())
        return [offer.year for offer in first]

    @property
    def comparison_data(self) -> List[Dict[str, float]]:
        """One row per year with every canonical firm as a column."""
        rows = []
        for index, year in enumerate(self.years):
            row: Dict[str, float] = {"year": year}
            for firm in CanonicalFirm:
                offers = self.series.get(firm, ())
                row[firm.value] = offers[index].value if index < len(offers) else 0.0
            rows.append(row)
        return rows

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready camelCase representation."""
        return {
            "metrics": self.metrics.to_dict(),
            "comparisonData": self.comparison_data,
            "guaranteedUpfront": {
                firm.value: self.guaranteed_upfront.get(firm, 0.0) for firm in CanonicalFirm
            },
            "backendBreakdown": self.backend_breakdown.to_dict(),
            "totals": {firm.value: self.totals.get(firm, 0.0) for firm in CanonicalFirm},
            "bestFirm": self.best_firm.value if self.best_firm else None,
            "selectedFirms": [firm.value for firm in self.selected_firms],
            "hasPremium": self.has_premium,
        }
