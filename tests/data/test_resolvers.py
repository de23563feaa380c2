import pytest

from offer_model.data.resolvers import candidate_names, resolve_deal, resolve_parameter
from offer_model.models import FirmDeal, FirmParameter
from offer_model.schema.columns import CanonicalFirm


def test_empty_table_returns_default():
    assert resolve_parameter([], "Morgan Stanley", "multiplier", 2.5) == 2.5
    assert resolve_parameter(None, CanonicalFirm.RBC, "grid", 0.55) == 0.55


def test_parameter_found_through_variant_spelling():
    table = [
        {"firm": "Morgan Stanley", "param_name": "other", "param_value": 9},
        {"firm": "MS", "param_name": "Multiplier", "param_value": "3.1"},
    ]
    assert resolve_parameter(table, "morganStanley", "multiplier", 2.5) == pytest.approx(3.1)
    assert resolve_parameter(table, CanonicalFirm.MORGAN_STANLEY, "MULTIPLIER", 2.5) == pytest.approx(3.1)


def test_display_name_row_beats_variant_row():
    table = [
        FirmParameter("ubs", "grid", 0.4),
        FirmParameter("UBS Wealth", "grid", 0.45),
    ]
    assert resolve_parameter(table, "UBS", "grid", 0.0) == pytest.approx(0.45)


def test_malformed_rows_and_non_numeric_values_are_skipped():
    table = [
        None,
        {},
        {"firm": None, "param_name": "grid", "param_value": 1},
        {"firm": "RBC", "param_value": 1},
        {"firm": "RBC", "param_name": "grid", "param_value": "n/a"},
        {"firm": "RBC", "param_name": "grid", "param_value": float("nan")},
        {"firm": "RBC", "param_name": "grid", "param_value": "0.57"},
    ]
    assert resolve_parameter(table, "RBC", "grid", 0.5) == pytest.approx(0.57)


def test_global_pseudo_firm_is_matched_verbatim():
    table = [{"firm": "Global", "param_name": "annualGrowthRate", "param_value": 0.05}]
    assert resolve_parameter(table, "Global", "annualGrowthRate", 0.08) == pytest.approx(0.05)
    assert resolve_parameter(table, "Global", "newGridPayout", 0.52) == pytest.approx(0.52)


def test_independent_candidates_include_firm_type_tagged_firms():
    table = [
        {"firm": "Acme Advisors", "param_name": "firmType", "param_value": 0, "notes": "Independent RIA"},
        {"firm": "Acme Advisors", "param_name": "grid", "param_value": 0.9},
    ]
    assert "acme advisors" in candidate_names(CanonicalFirm.INDEPENDENT, table)
    assert resolve_parameter(table, CanonicalFirm.INDEPENDENT, "grid", 0.8) == pytest.approx(0.9)


def test_resolve_deal_exact_match(ms_deal_rows):
    deal = resolve_deal(ms_deal_rows, "ms")
    assert isinstance(deal, FirmDeal)
    assert deal.upfront_midpoint == pytest.approx(1.75)
    assert deal.backend_midpoint == pytest.approx(0.3)


def test_resolve_deal_missing_returns_none(ms_deal_rows):
    assert resolve_deal(ms_deal_rows, "Merrill Lynch") is None
    assert resolve_deal([], "Morgan Stanley") is None
    assert resolve_deal(None, "Morgan Stanley") is None


def test_resolve_deal_widened_match_for_morgan_stanley():
    rows = [
        {"firm": "Merrill", "upfront_min": 1.0, "upfront_max": 1.0},
        {"firm": "Morgan Stanley Smith Barney", "upfront_min": 2.0, "upfront_max": 2.2},
    ]
    deal = resolve_deal(rows, CanonicalFirm.MORGAN_STANLEY)
    assert deal is not None
    assert deal.firm == "Morgan Stanley Smith Barney"

    # no widening for other firms
    assert resolve_deal([{"firm": "Goldman Sachs Private Wealth"}], CanonicalFirm.GOLDMAN) is None


def test_deal_rows_with_gaps_coerce_to_zero():
    deal = resolve_deal([{"firm": "Finet", "upfront_min": "0.4", "upfront_max": None}], "finet")
    assert deal.upfront_min == pytest.approx(0.4)
    assert deal.upfront_max == 0.0
    assert deal.backend_midpoint == 0.0


def test_prebuilt_parameter_rows_are_revalidated():
    table = [
        FirmParameter("Global", None, 1.0),
        FirmParameter(None, "newGridPayout", 0.9),
        FirmParameter("Global", "newGridPayout", float("nan")),
        FirmParameter("Global", "newGridPayout", "0.61"),
    ]
    assert resolve_parameter(table, "Global", "yearsToDisplay", 10) == 10
    assert resolve_parameter(table, "Global", "newGridPayout", 0.52) == pytest.approx(0.61)
    assert resolve_parameter(table[:3], "Global", "newGridPayout", 0.52) == 0.52


def test_prebuilt_deal_rows_with_gaps_coerce_to_zero():
    table = [FirmDeal("Morgan Stanley", upfront_min=None, upfront_max=2.0, backend_min=float("nan"))]
    deal = resolve_deal(table, "ms")
    assert deal.upfront_min == 0.0
    assert deal.upfront_midpoint == pytest.approx(1.0)
    assert deal.backend_min == 0.0
    assert resolve_deal([FirmDeal(None)], "ms") is None
