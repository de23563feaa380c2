import json

import pandas as pd
import pytest
import yaml

from offer_model.data.readers import (
    DataReadError,
    deals_from_records,
    parameters_from_records,
    read_deal_table,
    read_parameter_table,
    read_profile,
)
from offer_model.models import AdvisorProfile, FirmDeal, FirmParameter


def test_read_parameter_table_csv_with_aliases(tmp_path):
    path = tmp_path / "params.csv"
    pd.DataFrame(
        {
            "Firm": ["Global", "RBC", None],
            "paramName": ["newGridPayout", "grid", "grid"],
            "paramValue": [0.52, "0.55", 1.0],
            "Notes": ["", "Grid percentage", ""],
        }
    ).to_csv(path, index=False)

    rows = read_parameter_table(path)

    assert all(isinstance(r, FirmParameter) for r in rows)
    assert [(r.firm, r.param_name) for r in rows] == [("Global", "newGridPayout"), ("RBC", "grid")]
    assert rows[1].param_value == pytest.approx(0.55)


def test_read_deal_table_yaml(tmp_path):
    path = tmp_path / "deals.yaml"
    path.write_text(
        yaml.safe_dump(
            [
                {"firm": "UBS", "upfrontMin": 1.8, "upfrontMax": 2.0},
                {"firm": "Finet", "upfront_min": 0.4, "upfront_max": 0.6, "backend_min": 0.1},
            ]
        )
    )

    deals = read_deal_table(path)

    assert len(deals) == 2
    assert isinstance(deals[0], FirmDeal)
    assert deals[0].upfront_midpoint == pytest.approx(1.9)
    assert deals[1].backend_min == pytest.approx(0.1)
    # missing column in first row becomes 0
    assert deals[0].backend_max == 0.0


def test_read_deal_table_json(tmp_path):
    path = tmp_path / "deals.json"
    path.write_text(json.dumps([{"firm": "Goldman", "upfront_min": 2, "upfront_max": 2.2}]))
    deals = read_deal_table(path)
    assert deals[0].firm == "Goldman"
    assert deals[0].upfront_midpoint == pytest.approx(2.1)


def test_missing_file_and_bad_format_raise(tmp_path):
    with pytest.raises(DataReadError):
        read_deal_table(tmp_path / "nope.csv")

    bad = tmp_path / "deals.txt"
    bad.write_text("firm\nUBS\n")
    with pytest.raises(DataReadError):
        read_deal_table(bad)

    not_a_list = tmp_path / "deals.yaml"
    not_a_list.write_text(yaml.safe_dump({"firm": "UBS"}))
    with pytest.raises(DataReadError):
        read_deal_table(not_a_list)


def test_parameter_table_requires_firm_and_name_columns(tmp_path):
    path = tmp_path / "params.csv"
    pd.DataFrame({"firm": ["RBC"], "value_only": [1]}).to_csv(path, index=False)
    with pytest.raises(DataReadError):
        read_parameter_table(path)


def test_read_profile_yaml_with_camel_case(tmp_path):
    path = tmp_path / "profile.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "aum": "150,000,000",
                "revenue": "$1,000,000",
                "feeBasedPercentage": "80%",
                "city": " Boston ",
                "banking": "yes",
                "internationalCountries": "UK, France",
                "households": "120",
            }
        )
    )

    profile = read_profile(path)

    assert isinstance(profile, AdvisorProfile)
    assert profile.revenue == 1_000_000
    assert profile.aum == 150_000_000
    assert profile.fee_based_percentage == 80
    assert profile.city == "Boston"
    assert profile.banking is True
    assert profile.international_countries == ("UK", "France")
    assert profile.households == 120


@pytest.mark.parametrize("raw,expected", [(123, "123"), (" UBS ", "UBS"), (None, None), ("", None)])
def test_profile_current_firm_is_coerced_to_text(raw, expected):
    profile = AdvisorProfile.model_validate({"revenue": "1,000,000", "currentFirm": raw})
    assert profile.current_firm == expected
    assert profile.revenue == 1_000_000


def test_read_profile_rejects_non_mapping(tmp_path):
    path = tmp_path / "profile.yaml"
    path.write_text(yaml.safe_dump([1, 2, 3]))
    with pytest.raises(DataReadError):
        read_profile(path)


def test_deals_from_store_records_apply_band():
    records = [
        {"fields": {"Firm Name": "Rockefeller", "Upfront": 2.0, "Total Deal": 3.0, "Firm Overview": "RIA"}},
        {"Firm Name": "RBC", "Upfront": "1.5"},
    ]

    deals = deals_from_records(records)

    rock, rbc = deals
    assert rock.firm == "Rockefeller"
    assert rock.upfront_min == pytest.approx(1.8)
    assert rock.upfront_max == pytest.approx(2.2)
    assert rock.backend_min == pytest.approx(0.9)
    assert rock.backend_max == pytest.approx(1.1)
    assert rock.upfront_midpoint == pytest.approx(2.0)
    assert rock.notes == "RIA"
    # no total deal: the total band stays at zero
    assert rbc.total_deal_max == 0.0
    assert rbc.upfront_midpoint == pytest.approx(1.5)


def test_parameters_from_store_records():
    records = [
        {
            "fields": {
                "Firm Name": "LPL Financial",
                "Length of Deal": 9,
                "Grid": "0.9",
                "Type": "Independent",
            }
        }
    ]

    params = parameters_from_records(records)

    by_name = {p.param_name: p for p in params}
    assert set(by_name) == {"dealLength", "grid", "firmType"}
    assert by_name["dealLength"].param_value == 9
    assert by_name["grid"].param_value == pytest.approx(0.9)
    assert by_name["firmType"].notes == "Independent"
    assert by_name["firmType"].param_value == 0.0
