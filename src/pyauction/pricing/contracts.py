"""Expand one equilibrium price into the 1-5 year contract curve."""

from __future__ import annotations

from typing import Dict, List, Tuple

from pyauction.config.league import CONTRACT_BAND, LeagueRules
from pyauction.models import AgePhase, ContractOption, ContractPricing, PlayerValuation, RecommendedContract

DEFAULT_RECOMMENDED_YEARS = 3
PRIME_MIN_YEARS = 3
PRIME_MAX_YEARS = 5


def contract_prices(base_price: float, *, league_minimum: int) -> Dict[int, int]:
    """Annual price per contract length; shorter deals carry the premium."""

    return {
        years: max(league_minimum, int(round(base_price * factor)))
        for years, factor in sorted(CONTRACT_BAND.items())
    }


def recommended_length(position: str, age: int, rules: LeagueRules) -> Tuple[int, AgePhase]:
    curve = rules.age_curve(position)
    if curve is None:
        return DEFAULT_RECOMMENDED_YEARS, AgePhase.PRIME
    if age >= curve.decline_end:
        return 1, AgePhase.STEEP_DECLINE
    if age >= curve.prime_end:
        return 2, AgePhase.DECLINE
    years = max(PRIME_MIN_YEARS, min(PRIME_MAX_YEARS, curve.prime_end - age))
    return years, AgePhase.PRIME


def escalation_schedule(annual_price: int, years: int, escalation: float) -> List[int]:
    return [int(round(annual_price * (1.0 + escalation) ** index)) for index in range(years)]


def generate_contract_pricing(player: PlayerValuation, base_price: float, rules: LeagueRules) -> ContractPricing:
    prices = contract_prices(base_price, league_minimum=rules.league_minimum)
    options = []
    for years, price in prices.items():
        schedule = escalation_schedule(price, years, rules.annual_escalation)
        total = sum(schedule)
        options.append(
            ContractOption(
                years=years,
                annual_price=price,
                schedule=schedule,
                total_value=total,
                average_annual_value=int(round(total / years)),
            )
        )

    years, phase = recommended_length(player.position, player.age, rules)
    return ContractPricing(
        base_price=int(round(base_price)),
        one_year=prices[1],
        two_year=prices[2],
        three_year=prices[3],
        four_year=prices[4],
        five_year=prices[5],
        recommended=RecommendedContract(years=years, price=prices[years], reason=phase),
        options=options,
    )


__all__ = [
    "contract_prices",
    "escalation_schedule",
    "generate_contract_pricing",
    "recommended_length",
]
