import json

import pandas as pd
import pytest

from offer_model.engines.calculator import calculate_offers
from offer_model.reporting.metrics import comparison_frame, format_millions, summarize, totals_frame
from offer_model.reporting.outputs import save_results
from offer_model.schema.columns import CanonicalFirm, canonical_firm_keys


@pytest.fixture
def result(neutral_profile, ms_deal_rows):
    return calculate_offers(
        neutral_profile, firm_deals=ms_deal_rows, selected_firms=["ms", "UBS", "Finet"]
    )


@pytest.mark.parametrize(
    "value,expected",
    [(2.27, "$2.27M"), (2.2749, "$2.27M"), (0, "$0.00M"), (-1.5, "-$1.50M"), (float("nan"), "$0.00M"), (1234.5, "$1,234.50M")],
)
def test_format_millions(value, expected):
    assert format_millions(value) == expected


def test_comparison_frame(result):
    df = comparison_frame(result)
    assert df.index.name == "year"
    assert list(df.index) == list(range(1, 11))
    assert list(df.columns) == canonical_firm_keys()
    assert df.loc[1, "morganStanley"] == pytest.approx(2.27)
    assert (df["rbc"] == 0).all()


def test_totals_frame_ranks_selected_only(result):
    df = totals_frame(result)

    assert list(df["firm"]) == canonical_firm_keys()
    assert df["selected"].sum() == 3
    selected = df[df["selected"]].sort_values("total", ascending=False)
    assert list(selected["rank"]) == [1, 2, 3]
    assert df.loc[~df["selected"], "rank"].isna().all()
    assert df.loc[df["firm"] == "morganStanley", "display_name"].item() == "Morgan Stanley"


def test_summarize(result):
    summary = summarize(result)
    assert summary["best_deal"] == pytest.approx(result.metrics.total_deal.value)
    assert summary["years"] == 10
    assert summary["selected_firms"] == ["Morgan Stanley", "UBS Wealth", "Finet"]
    # Finet's 85% grid outweighs the larger upfronts over ten years
    assert summary["best_firm"] == "Finet"


def test_save_results_writes_all_outputs(result, tmp_path):
    paths = save_results(result, tmp_path / "out")

    comparison = pd.read_csv(paths["comparison"], index_col="year")
    assert list(comparison.columns) == canonical_firm_keys()
    totals = pd.read_csv(paths["totals"])
    assert len(totals) == len(CanonicalFirm)
    data = json.loads(paths["result"].read_text())
    assert data["metrics"]["totalDeal"]["value"] == pytest.approx(result.metrics.total_deal.value)
    assert len(data["comparisonData"]) == 10
