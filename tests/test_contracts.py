import pytest

from pyauction.config import get_league_rules
from pyauction.models import AgePhase, PlayerValuation
from pyauction.pricing import contract_prices, generate_contract_pricing, recommended_length
from pyauction.pricing.contracts import escalation_schedule

RULES = get_league_rules("THELEAGUE")


def _player(position: str, age: int) -> PlayerValuation:
    return PlayerValuation(player_id=f"{position}-{age}", position=position, age=age, composite_rank=20)


def test_contract_band_around_three_year_price():
    prices = contract_prices(2_000_000, league_minimum=425_000)
    assert prices == {1: 2_400_000, 2: 2_200_000, 3: 2_000_000, 4: 1_800_000, 5: 1_600_000}


def test_contract_prices_respect_minimum_and_stay_monotonic():
    for base in (100_000, 450_000, 531_000, 12_345_678):
        prices = contract_prices(base, league_minimum=425_000)
        ordered = [prices[years] for years in range(1, 6)]
        assert all(price >= 425_000 for price in ordered)
        assert ordered == sorted(ordered, reverse=True)


def test_recommended_length_by_age_phase():
    assert recommended_length("RB", 32, RULES) == (1, AgePhase.STEEP_DECLINE)
    assert recommended_length("QB", 34, RULES) == (2, AgePhase.DECLINE)
    assert recommended_length("WR", 24, RULES) == (5, AgePhase.PRIME)
    assert recommended_length("WR", 28, RULES) == (3, AgePhase.PRIME)
    assert recommended_length("DEF", 30, RULES) == (3, AgePhase.PRIME)


def test_escalation_schedule_compounds():
    assert escalation_schedule(1_000_000, 3, 0.10) == [1_000_000, 1_100_000, 1_210_000]


def test_generate_contract_pricing_recommends_precomputed_figure():
    pricing = generate_contract_pricing(_player("RB", 32), 2_000_000, RULES)

    assert pricing.base_price == 2_000_000
    assert pricing.five_year == 1_600_000
    assert pricing.recommended.years == 1
    assert pricing.recommended.price == pricing.one_year
    assert len(pricing.options) == 5
    five = pricing.options[-1]
    assert five.years == 5
    assert five.total_value == sum(five.schedule)
    assert five.average_annual_value == pytest.approx(five.total_value / 5, abs=1)


def test_age_never_changes_the_price_curve():
    young = generate_contract_pricing(_player("TE", 23), 3_000_000, RULES)
    old = generate_contract_pricing(_player("TE", 33), 3_000_000, RULES)
    assert young.as_list() == old.as_list()
    assert young.recommended != old.recommended
