import math

import pytest

from offer_model.config.models import GlobalParameters
from offer_model.engines.projection import (
    compute_guaranteed_upfront,
    project,
    resolve_global_parameters,
)
from offer_model.models import AdvisorProfile
from offer_model.rules.adjustments import NO_ADJUSTMENTS, compute_adjustments
from offer_model.schema.columns import CanonicalFirm

MS = CanonicalFirm.MORGAN_STANLEY


def test_year_phases_with_resolved_deal(neutral_profile, ms_deal_rows):
    series = project(neutral_profile, ["Morgan Stanley"], deals=ms_deal_rows, horizon_years=10)

    values = [offer.value for offer in series[MS]]
    # upfront 1.75 + grid 0.52
    assert values[0] == pytest.approx(2.27)
    # backend 0.30 + grid 0.52 * 1.08
    assert values[1] == pytest.approx(0.30 + 0.5616)
    # grid only from year 3
    assert values[2] == pytest.approx(0.52 * 1.08 ** 2)
    assert values[9] == pytest.approx(0.52 * 1.08 ** 9)
    assert [offer.year for offer in series[MS]] == list(range(1, 11))


def test_output_is_fixed_width_with_zeroed_unselected(neutral_profile):
    series = project(neutral_profile, ["UBS"], horizon_years=7)

    assert list(series) == list(CanonicalFirm)
    for firm, offers in series.items():
        assert len(offers) == 7
        if firm is not CanonicalFirm.UBS_WEALTH:
            assert all(offer.value == 0.0 for offer in offers)
    assert series[CanonicalFirm.UBS_WEALTH][0].value > 0


def test_fallback_terms_without_deal(neutral_profile):
    series = project(neutral_profile, ["Ameriprise"], horizon_years=3)
    values = [offer.value for offer in series[CanonicalFirm.AMERIPRISE]]
    assert values[0] == pytest.approx(1.20 + 0.75)
    assert values[1] == pytest.approx(0.30 + 0.75 * 1.08)
    assert values[2] == pytest.approx(0.75 * 1.08 ** 2)


def test_upfront_override_ignores_deal(neutral_profile):
    deals = [{"firm": "Sanctuary", "upfront_min": 3.0, "upfront_max": 3.0}]
    upfront = compute_guaranteed_upfront(neutral_profile, deals, NO_ADJUSTMENTS)
    assert upfront[CanonicalFirm.SANCTUARY] == pytest.approx(0.60)
    assert upfront[CanonicalFirm.TRU] == pytest.approx(0.60)


def test_guaranteed_upfront_covers_every_firm(neutral_profile, ms_deal_rows):
    upfront = compute_guaranteed_upfront(neutral_profile, ms_deal_rows)
    assert set(upfront) == set(CanonicalFirm)
    assert upfront[MS] == pytest.approx(1.75)
    assert upfront[CanonicalFirm.GOLDMAN] == pytest.approx(1.90)
    assert upfront[CanonicalFirm.INDEPENDENT] == pytest.approx(0.25)


def test_higher_fee_based_share_raises_upfront(ms_deal_rows):
    high = AdvisorProfile(revenue=1_000_000, fee_based_percentage=90)
    low = AdvisorProfile(revenue=1_000_000, fee_based_percentage=50)

    high_upfront = compute_guaranteed_upfront(high, ms_deal_rows, compute_adjustments(high))
    low_upfront = compute_guaranteed_upfront(low, ms_deal_rows, compute_adjustments(low))

    assert high_upfront[MS] > low_upfront[MS]
    assert high_upfront[MS] == pytest.approx(1.75 * 1.05)
    assert low_upfront[MS] == pytest.approx(1.75 * 0.95)


def test_fallback_ratios_are_not_adjusted():
    profile = AdvisorProfile(revenue=1_000_000, fee_based_percentage=90)
    upfront = compute_guaranteed_upfront(profile, [], compute_adjustments(profile))
    assert upfront[CanonicalFirm.MERRILL_LYNCH] == pytest.approx(1.70)


def test_global_rows_drive_horizon_and_grid(neutral_profile, ms_deal_rows, global_rows):
    series = project(neutral_profile, [MS], parameters=global_rows, deals=ms_deal_rows)
    assert len(series[MS]) == 5
    assert series[MS][0].value == pytest.approx(1.75 + 0.6)


@pytest.mark.parametrize("raw,expected", [(0, 1), (-3, 1), (2.5, 3), (9.6, 10), (12.4, 10), (1e9, 10)])
def test_years_to_display_is_rounded_and_clamped(raw, expected):
    rows = [{"firm": "Global", "param_name": "yearsToDisplay", "param_value": raw}]
    assert resolve_global_parameters(rows).years_to_display == expected


def test_project_horizon_is_capped_at_ten_years(neutral_profile, caplog):
    rows = [{"firm": "Global", "param_name": "yearsToDisplay", "param_value": 1e9}]
    series = project(neutral_profile, [MS], parameters=rows)
    assert len(series[MS]) == 10
    assert "using 10" in caplog.text

    assert len(project(neutral_profile, [MS], horizon_years=50)[MS]) == 10


def test_global_parameters_fall_back_to_defaults():
    defaults = GlobalParameters(annual_growth_rate=0.05)
    resolved = resolve_global_parameters(None, defaults)
    assert resolved.annual_growth_rate == 0.05
    assert resolved.years_to_display == 10
    assert resolved.new_grid_payout == 0.52


def test_zero_revenue_projects_finite_zeros():
    profile = AdvisorProfile(revenue=0, fee_based_percentage=0)
    series = project(profile, list(CanonicalFirm), horizon_years=10)
    for offers in series.values():
        assert all(math.isfinite(offer.value) and offer.value == 0.0 for offer in offers)
