import pytest

from pyauction.errors import ConstraintInfeasible
from pyauction.models import LeagueWarningReason, TeamCapSituation
from pyauction.pricing import apply_budget_constraint, league_capacity, minimum_roster_spend

LEAGUE_MINIMUM = 425_000


def test_capacity_and_minimum_spend():
    teams = [
        TeamCapSituation(franchise_id="F1", available_cap_space=30_000_000, roster_spots_to_fill=10),
        TeamCapSituation(franchise_id="F2", available_cap_space=12_500_000, roster_spots_to_fill=4),
    ]
    assert league_capacity(teams) == 42_500_000
    assert minimum_roster_spend(teams, LEAGUE_MINIMUM) == 14 * LEAGUE_MINIMUM


def test_overheated_pool_scales_uniformly():
    prices = {f"hi{i}": 6_800_000.0 for i in range(50)}
    prices.update({f"lo{i}": 3_000_000.0 for i in range(50)})

    outcome = apply_budget_constraint(prices, capacity=120_000_000, league_minimum=LEAGUE_MINIMUM)

    assert outcome.summary.total_before == 490_000_000
    assert outcome.summary.multiplier == pytest.approx(120 / 490, rel=1e-6)
    assert outcome.summary.binding
    assert outcome.summary.total_after <= 120_000_000
    assert sum(outcome.prices.values()) == outcome.summary.total_after
    assert [warning.reason for warning in outcome.warnings] == [LeagueWarningReason.INSUFFICIENT_CAP]
    assert all(price >= LEAGUE_MINIMUM for price in outcome.prices.values())
    assert outcome.prices["hi0"] > outcome.prices["lo0"]


def test_players_pushed_below_minimum_are_pinned():
    outcome = apply_budget_constraint({"a": 10_000_000, "b": 800_000}, capacity=5_500_000, league_minimum=LEAGUE_MINIMUM)

    assert outcome.prices["b"] == LEAGUE_MINIMUM
    assert sum(outcome.prices.values()) <= 5_500_000
    assert outcome.prices["a"] > outcome.prices["b"]


def test_reference_spend_band_deflates_and_inflates():
    hot = apply_budget_constraint(
        {"a": 100_000_000, "b": 50_000_000},
        capacity=500_000_000,
        league_minimum=LEAGUE_MINIMUM,
        reference_spend=100_000_000,
    )
    assert hot.summary.multiplier == pytest.approx(0.8)
    assert not hot.summary.binding
    assert hot.warnings == ()

    cold = apply_budget_constraint(
        {"a": 30_000_000, "b": 20_000_000},
        capacity=500_000_000,
        league_minimum=LEAGUE_MINIMUM,
        reference_spend=100_000_000,
    )
    assert cold.summary.multiplier == pytest.approx(1.15)

    steady = apply_budget_constraint(
        {"a": 60_000_000, "b": 50_000_000},
        capacity=500_000_000,
        league_minimum=LEAGUE_MINIMUM,
        reference_spend=100_000_000,
    )
    assert steady.summary.multiplier == 1.0
    assert steady.prices == {"a": 60_000_000, "b": 50_000_000}


def test_prices_within_capacity_are_only_rounded():
    outcome = apply_budget_constraint({"a": 1_234_567.6, "b": 100_000}, capacity=10_000_000, league_minimum=LEAGUE_MINIMUM)

    assert outcome.prices == {"a": 1_234_568, "b": LEAGUE_MINIMUM}
    assert outcome.summary.multiplier == 1.0
    assert not outcome.summary.binding


def test_infeasible_league_surfaces_warning():
    outcome = apply_budget_constraint(
        {"a": 1_000_000},
        capacity=2_000_000,
        league_minimum=LEAGUE_MINIMUM,
        minimum_spend=4_250_000,
    )

    assert outcome.warnings[0].reason is LeagueWarningReason.CONSTRAINT_INFEASIBLE
    assert outcome.prices == {"a": 1_000_000}


def test_infeasible_league_raises_in_strict_mode():
    with pytest.raises(ConstraintInfeasible) as excinfo:
        apply_budget_constraint(
            {"a": 1_000_000},
            capacity=2_000_000,
            league_minimum=LEAGUE_MINIMUM,
            minimum_spend=4_250_000,
            strict=True,
        )
    assert excinfo.value.minimum_spend == 4_250_000


def test_pool_too_large_for_minimum_salaries_is_flagged():
    prices = {f"p{i}": 1_000_000 for i in range(10)}
    outcome = apply_budget_constraint(prices, capacity=3_000_000, league_minimum=LEAGUE_MINIMUM)

    reasons = [warning.reason for warning in outcome.warnings]
    assert LeagueWarningReason.CONSTRAINT_INFEASIBLE in reasons
    assert LeagueWarningReason.INSUFFICIENT_CAP in reasons
    assert set(outcome.prices.values()) == {LEAGUE_MINIMUM}


def test_minimum_clamp_cannot_push_total_over_capacity():
    outcome = apply_budget_constraint({"a": 5_000_000.0, "b": 400_000.0}, capacity=5_400_000, league_minimum=LEAGUE_MINIMUM)

    assert outcome.prices["b"] == LEAGUE_MINIMUM
    assert outcome.prices["a"] > outcome.prices["b"]
    assert outcome.summary.total_after == sum(outcome.prices.values())
    assert outcome.summary.total_after <= 5_400_000
    assert outcome.summary.binding
    assert [warning.reason for warning in outcome.warnings] == [LeagueWarningReason.INSUFFICIENT_CAP]
