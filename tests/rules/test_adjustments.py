import pytest

from offer_model.models import AdvisorProfile
from offer_model.rules.adjustments import NO_ADJUSTMENTS, RULES, compute_adjustments


def _profile(**kwargs):
    kwargs.setdefault("revenue", 1_000_000)
    kwargs.setdefault("fee_based_percentage", 75)
    return AdvisorProfile(**kwargs)


def test_neutral_profile_has_no_adjustments():
    adj = compute_adjustments(_profile())
    assert adj == NO_ADJUSTMENTS
    assert adj.upfront_multiplier == 1.0


@pytest.mark.parametrize(
    "fee_based,upfront,backend",
    [
        (90, 0.05, 0.10),
        (85, 0.05, 0.10),
        (84.9, 0.0, 0.0),
        (65, 0.0, 0.0),
        (64.9, -0.05, -0.05),
        (0, -0.05, -0.05),
    ],
)
def test_fee_based_tiers(fee_based, upfront, backend):
    adj = compute_adjustments(_profile(fee_based_percentage=fee_based))
    assert adj.upfront_pct == pytest.approx(upfront)
    assert adj.backend_pct == pytest.approx(backend)


def test_international_bonus_depends_on_country_count():
    three = compute_adjustments(
        _profile(international=True, international_countries=["UK", "FR", "DE"])
    )
    four = compute_adjustments(
        _profile(international=True, international_countries=["UK", "FR", "DE", "JP"])
    )
    assert three.upfront_pct == pytest.approx(0.05)
    assert four.upfront_pct == pytest.approx(0.07)
    # countries without the international flag do nothing
    assert compute_adjustments(_profile(international_countries=["UK"])).upfront_pct == 0.0


def test_households_threshold_is_strict():
    assert compute_adjustments(_profile(households=100)).backend_pct == 0.0
    assert compute_adjustments(_profile(households=101)).backend_pct == pytest.approx(0.03)


def test_full_stack_sums_without_clamping():
    profile = _profile(
        fee_based_percentage=90,
        banking=True,
        international=True,
        international_countries=["UK", "FR", "DE", "JP"],
        lending=True,
        smas=True,
        households=150,
        deferred_comp=True,
        on_a_deal=True,
    )

    adj = compute_adjustments(profile)

    # 0.05 + 0.02 + 0.07 + 0.02 + 0.02 - 0.03 - 0.05
    assert adj.upfront_pct == pytest.approx(0.10)
    # 0.10 + 0.03 - 0.05
    assert adj.backend_pct == pytest.approx(0.08)
    assert adj.applied == tuple(name for name, _ in RULES)


def test_penalties_can_go_negative():
    adj = compute_adjustments(_profile(fee_based_percentage=10, deferred_comp=True, on_a_deal=True))
    assert adj.upfront_pct == pytest.approx(-0.13)
    assert adj.backend_pct == pytest.approx(-0.10)
    assert adj.applied == ("fee_based_tier", "deferred_comp", "on_a_deal")


def test_premium_neutral_copy_keeps_only_fee_based_rule():
    profile = _profile(fee_based_percentage=90, banking=True, lending=True, households=500)
    adj = compute_adjustments(profile.without_premium_attributes())
    assert adj.applied == ("fee_based_tier",)
    assert adj.upfront_pct == pytest.approx(0.05)
    assert adj.backend_pct == pytest.approx(0.10)
