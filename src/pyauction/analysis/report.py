"""Summaries over a finished pool valuation."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from statistics import fmean, median
from typing import Dict, List, Sequence

from pyauction.models import NeedLevel, PlayerPriceResult, PoolValuation, TeamCapSituation, ValueBand
from pyauction.pricing.market import positional_scarcity
from pyauction.scenario import contract_strategy


OPPORTUNITY_BANDS = (ValueBand.EXCELLENT_VALUE, ValueBand.GOOD_VALUE)
RISK_BANDS = (ValueBand.OVERPAY, ValueBand.AVOID)
TARGET_NEEDS = (NeedLevel.CRITICAL, NeedLevel.MODERATE)


@dataclass(frozen=True)
class PositionMarketSummary:
    position: str
    available: int
    mean_price: float | None
    median_price: float | None
    top_price: int | None
    teams_needing: int
    scarcity_index: float


@dataclass(frozen=True)
class TeamStrategySummary:
    franchise_id: str
    team_name: str
    window: str
    window_overridden: bool
    preferred_length: int
    target_age_low: int
    target_age_high: int
    targets: List[str]


@dataclass(frozen=True)
class MarketReport:
    positions: List[PositionMarketSummary]
    value_opportunities: List[PlayerPriceResult]
    overvalued_risks: List[PlayerPriceResult]
    review_queue: List[PlayerPriceResult]
    total_spend: int
    capacity: int
    multiplier: float
    teams: List[TeamStrategySummary]

    def as_dict(self) -> Dict[str, object]:
        def brief(result: PlayerPriceResult) -> Dict[str, object]:
            return {
                "player_id": result.player_id,
                "name": result.player.name,
                "position": result.player.position,
                "predicted_market_price": result.predicted_market_price,
                "intrinsic_value": result.intrinsic_value,
                "value_gap_pct": round(result.value_gap_pct, 4),
                "value_band": result.value_band.value,
            }

        return {
            "total_spend": self.total_spend,
            "capacity": self.capacity,
            "multiplier": self.multiplier,
            "positions": [asdict(summary) for summary in self.positions],
            "teams": [asdict(summary) for summary in self.teams],
            "value_opportunities": [brief(result) for result in self.value_opportunities],
            "overvalued_risks": [brief(result) for result in self.overvalued_risks],
            "review_queue": [
                {**brief(result), "reasons": [reason.value for reason in result.validation.reasons()]}
                for result in self.review_queue
            ],
        }


def _position_summaries(valuation: PoolValuation, teams: Sequence[TeamCapSituation]) -> List[PositionMarketSummary]:
    grouped: Dict[str, List[PlayerPriceResult]] = defaultdict(list)
    for result in valuation.players:
        grouped[result.player.position].append(result)

    players = [result.player for result in valuation.players]
    summaries = []
    for position in sorted(grouped):
        prices = [result.predicted_market_price for result in grouped[position]]
        scarcity = positional_scarcity(position, players, teams)
        summaries.append(
            PositionMarketSummary(
                position=position,
                available=len(prices),
                mean_price=fmean(prices) if prices else None,
                median_price=median(prices) if prices else None,
                top_price=max(prices) if prices else None,
                teams_needing=scarcity.teams_needing,
                scarcity_index=scarcity.scarcity_score,
            )
        )
    return summaries


def _team_strategies(
    valuation: PoolValuation,
    teams: Sequence[TeamCapSituation],
    limit: int | None,
) -> List[TeamStrategySummary]:
    """Window-driven contract length and the needed players in each team's target age band."""

    by_rank = sorted(valuation.players, key=lambda result: (result.player.composite_rank, result.player_id))
    summaries = []
    for team in teams:
        strategy = contract_strategy(team.championship_window)
        low, high = strategy.target_age
        targets = [
            result.player_id
            for result in by_rank
            if low <= result.player.age <= high and team.need(result.player.position) in TARGET_NEEDS
        ]
        summaries.append(
            TeamStrategySummary(
                franchise_id=team.franchise_id,
                team_name=team.team_name,
                window=team.championship_window.value,
                window_overridden=team.window_overridden,
                preferred_length=strategy.preferred_length,
                target_age_low=low,
                target_age_high=high,
                targets=targets[:limit] if limit is not None else targets,
            )
        )
    return summaries


def build_market_report(
    valuation: PoolValuation,
    teams: Sequence[TeamCapSituation],
    *,
    limit: int | None = 25,
) -> MarketReport:
    """``teams`` should already carry any window overrides used for the valuation."""

    opportunities = sorted(
        (result for result in valuation.players if result.value_band in OPPORTUNITY_BANDS),
        key=lambda result: (result.value_gap_pct, result.player.composite_rank),
    )
    risks = sorted(
        (result for result in valuation.players if result.value_band in RISK_BANDS),
        key=lambda result: (-result.value_gap_pct, result.player.composite_rank),
    )
    review = [result for result in valuation.players if result.validation.requires_review]
    if limit is not None:
        opportunities = opportunities[:limit]
        risks = risks[:limit]
    return MarketReport(
        positions=_position_summaries(valuation, teams),
        value_opportunities=opportunities,
        overvalued_risks=risks,
        review_queue=review,
        total_spend=valuation.budget.total_after,
        capacity=valuation.budget.capacity,
        multiplier=valuation.budget.multiplier,
        teams=_team_strategies(valuation, teams, limit),
    )


__all__ = [
    "MarketReport",
    "PositionMarketSummary",
    "TeamStrategySummary",
    "build_market_report",
]
