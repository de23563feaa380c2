# offer_model/config/models.py
"""
Pydantic models for validating the structure and types of the engine
configuration loaded from YAML files (e.g., offer_config.yaml).
"""

import logging
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from offer_model.firms.normalizer import normalize
from offer_model.firms.registry import FIRM_TERMS, FirmTerms, apply_overrides
from offer_model.schema.columns import CanonicalFirm

logger = logging.getLogger(__name__)


class GlobalParameters(BaseModel):
    """Engine-wide defaults. Rows under the ``Global`` pseudo-firm in the
    parameter table take precedence over these."""

    years_to_display: int = Field(10, ge=1, le=10, description="Projection horizon in years")
    current_grid_payout: float = Field(
        0.5, ge=0.0, description="Payout ratio at the advisor's current firm"
    )
    new_grid_payout: float = Field(
        0.52, ge=0.0, description="Payout ratio after moving, for firms without their own grid"
    )
    annual_growth_rate: float = Field(0.08, description="Annual revenue growth (can be negative)")
    backend_growth_pct: float = Field(40.0, ge=0.0)
    backend_assets_pct: float = Field(25.0, ge=0.0)
    backend_service_pct: float = Field(35.0, ge=0.0)

    @model_validator(mode='after')
    def check_backend_breakdown(self) -> 'GlobalParameters':
        """Warn when the backend composition does not total 100%."""
        total = self.backend_growth_pct + self.backend_assets_pct + self.backend_service_pct
        if abs(total - 100.0) > 1e-6:
            logger.warning(
                f"Backend breakdown percentages sum to {total:.2f}, not 100. Check config."
            )
        return self


class FirmTermsOverride(BaseModel):
    """Optional per-firm replacements for the built-in firm terms."""

    grid_payout_ratio: Optional[float] = Field(None, ge=0.0)
    fallback_upfront_ratio: Optional[float] = Field(None, ge=0.0)
    fallback_backend_ratio: Optional[float] = Field(None, ge=0.0)
    upfront_override_ratio: Optional[float] = Field(None, ge=0.0)


class EngineConfig(BaseModel):
    """The root model for the engine configuration file."""

    global_parameters: GlobalParameters = Field(default_factory=GlobalParameters)
    firm_terms: Dict[str, FirmTermsOverride] = Field(default_factory=dict)

    @field_validator("firm_terms")
    @classmethod
    def drop_unknown_firms(
        cls, value: Dict[str, FirmTermsOverride]
    ) -> Dict[str, FirmTermsOverride]:
        known = {}
        for key, override in value.items():
            if normalize(key) is None:
                logger.warning(f"Ignoring firm_terms entry for unrecognised firm '{key}'")
                continue
            known[key] = override
        return known

    def resolved_firm_terms(self) -> Dict[CanonicalFirm, FirmTerms]:
        """Built-in firm terms with this config's overrides applied."""
        if not self.firm_terms:
            return dict(FIRM_TERMS)
        overrides = {}
        for key, override in self.firm_terms.items():
            firm = normalize(key)
            fields = override.model_dump(exclude_none=True)
            if firm is not None and fields:
                overrides.setdefault(firm, {}).update(fields)
        return apply_overrides(overrides)


DEFAULT_CONFIG = EngineConfig()
