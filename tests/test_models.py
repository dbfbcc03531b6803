import pytest
from pydantic import ValidationError

from pyauction.models import (
    AgePhase,
    ContractPricing,
    HistoricalSalaryRecord,
    NeedLevel,
    PlayerValuation,
    RecommendedContract,
    TeamCapSituation,
)


def test_player_valuation_is_frozen_and_normalizes_position():
    player = PlayerValuation(player_id="p1", name="Test Player", position=" wr ", age=25, composite_rank=3)

    assert player.position == "WR"
    assert player.franchise_id is None

    with pytest.raises((TypeError, ValidationError)):
        player.player_id = "p2"  # type: ignore[misc]


def test_player_valuation_rejects_zero_rank():
    with pytest.raises(ValidationError):
        PlayerValuation(player_id="p1", position="QB", age=25, composite_rank=0)


def test_player_is_expiring_requires_owner():
    owned = PlayerValuation(player_id="p1", position="QB", age=25, composite_rank=3, franchise_id="F1", contract_years_remaining=1)
    free = PlayerValuation(player_id="p2", position="QB", age=25, composite_rank=4, contract_years_remaining=1)

    assert owned.is_expiring
    assert not free.is_expiring


def test_salary_record_rejects_negative_salary():
    with pytest.raises(ValidationError):
        HistoricalSalaryRecord(player_id="x", position="RB", age=24, salary=-1, year=2024)


def test_team_need_defaults_to_low_and_keys_uppercase():
    team = TeamCapSituation(franchise_id="F1", available_cap_space=1_000_000, positional_needs={"qb": "critical"})

    assert team.need("QB") is NeedLevel.CRITICAL
    assert team.need("te") is NeedLevel.LOW


def test_contract_pricing_price_for_bounds():
    pricing = ContractPricing(
        base_price=1_000_000,
        one_year=1_200_000,
        two_year=1_100_000,
        three_year=1_000_000,
        four_year=900_000,
        five_year=800_000,
        recommended=RecommendedContract(years=3, price=1_000_000, reason=AgePhase.PRIME),
    )

    assert pricing.price_for(5) == 800_000
    assert pricing.as_list() == [1_200_000, 1_100_000, 1_000_000, 900_000, 800_000]
    with pytest.raises(ValueError):
        pricing.price_for(6)
