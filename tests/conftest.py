import pytest

from offer_model.models import AdvisorProfile


@pytest.fixture
def neutral_profile():
    # 75% fee-based sits between the tiers, so no adjustment fires
    return AdvisorProfile(aum=150_000_000, revenue=1_000_000, fee_based_percentage=75)


@pytest.fixture
def ms_deal_rows():
    return [
        {
            "firm": "Morgan Stanley",
            "upfront_min": 1.5,
            "upfront_max": 2.0,
            "backend_min": 0.2,
            "backend_max": 0.4,
            "total_deal_min": 1.7,
            "total_deal_max": 2.4,
        }
    ]


@pytest.fixture
def global_rows():
    return [
        {"firm": "Global", "param_name": "yearsToDisplay", "param_value": 5},
        {"firm": "Global", "param_name": "newGridPayout", "param_value": 0.6},
    ]
