"""Competitive-market adjustments on top of intrinsic value."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from pyauction.config.league import CONFIDENCE_RANGE
from pyauction.models import (
    AppliedMultipliers,
    ChampionshipWindow,
    DepthBucket,
    NeedLevel,
    PlayerValuation,
    TeamCapSituation,
    Tier,
    ValueBand,
)

from .tiers import classify_overall_tier


logger = logging.getLogger(__name__)

DEMAND_CAP = 1.5
DESPERATE_WEIGHT = 0.05
CAP_WEIGHT = 0.03
TAG_LIKELIHOOD_THRESHOLD = 0.5
SCARCITY_QUALITY_RANK = 100

# (bucket, lower bound of ratio, multiplier at that bound, multiplier at the bucket top, bucket width)
_DEPTH_BUCKETS: Tuple[Tuple[DepthBucket, float, float, float, float], ...] = (
    (DepthBucket.DEEP, 1.0, 1.1, 0.9, 1.0),
    (DepthBucket.MODERATE, 0.6, 1.2, 1.1, 0.4),
    (DepthBucket.SCARCE, 0.3, 1.5, 1.2, 0.3),
    (DepthBucket.EXTREME, 0.0, 2.0, 1.5, 0.3),
)

_COMPETITION: Mapping[DepthBucket, Tuple[float, float]] = {
    DepthBucket.SCARCE: (1.3, 1.1),
    DepthBucket.EXTREME: (1.6, 1.3),
}


@dataclass(frozen=True)
class PositionMarket:
    position: str
    elite_available: int = 0
    critical_need_teams: int = 0
    desperate_teams: int = 0
    depth_ratio: Optional[float] = None
    bucket: DepthBucket = DepthBucket.DEEP
    depth_multiplier: float = 1.0


@dataclass(frozen=True)
class MarketContext:
    """Pool-wide supply and demand, computed once before per-player pricing."""

    positions: Dict[str, PositionMarket] = field(default_factory=dict)
    team_cap_spaces: Tuple[int, ...] = ()
    buyers: int = 0
    quality_players: int = 0
    inflation: float = 1.05
    tag_likelihoods: Dict[str, float] = field(default_factory=dict)

    def position(self, position: str) -> PositionMarket:
        return self.positions.get(position.upper(), PositionMarket(position=position.upper()))

    def teams_with_cap(self, price: float) -> int:
        return sum(1 for space in self.team_cap_spaces if space >= price)

    def tag_likelihood(self, player_id: str) -> float:
        return self.tag_likelihoods.get(player_id, 0.0)


@dataclass(frozen=True)
class MarketPrice:
    price: float
    multipliers: AppliedMultipliers
    bucket: DepthBucket


@dataclass(frozen=True)
class PositionalScarcity:
    position: str
    quality_available: int
    teams_needing: int
    supply_demand_ratio: float
    scarcity_score: float
    price_impact_multiplier: float


def depth_multiplier(ratio: Optional[float]) -> Tuple[DepthBucket, float]:
    """Bucket the elite-supply / critical-need ratio and interpolate inside the bucket."""

    if ratio is None:
        return DepthBucket.DEEP, 1.0
    for bucket, lower, at_lower, at_upper, width in _DEPTH_BUCKETS:
        if ratio >= lower:
            progress = min(1.0, (ratio - lower) / width)
            return bucket, at_lower + (at_upper - at_lower) * progress
    return DepthBucket.EXTREME, 2.0


def competition_factor(bucket: DepthBucket, position_rank: int) -> float:
    factors = _COMPETITION.get(bucket)
    if factors is None:
        return 1.0
    top_three, top_ten = factors
    if position_rank <= 3:
        return top_three
    if position_rank <= 10:
        return top_ten
    return 1.0


def demand_multiplier(desperate_teams: int, teams_with_cap: int) -> float:
    return min(DEMAND_CAP, 1.0 + DESPERATE_WEIGHT * desperate_teams + CAP_WEIGHT * teams_with_cap)


def market_inflation(buyers: int, quality_players: int) -> float:
    ratio = buyers / quality_players if quality_players else float("inf")
    if ratio >= 2.0:
        return 1.15
    if ratio >= 1.0:
        return 1.10
    return 1.05


def tag_premium(position_rank: int, likelihood: float) -> float:
    if position_rank > 5 or likelihood < TAG_LIKELIHOOD_THRESHOLD:
        return 1.0
    span = 1.0 - TAG_LIKELIHOOD_THRESHOLD
    return 1.15 + 0.10 * min(1.0, (likelihood - TAG_LIKELIHOOD_THRESHOLD) / span)


def is_desperate(team: TeamCapSituation, position: str) -> bool:
    if team.championship_window is ChampionshipWindow.REBUILDING:
        return False
    need = team.need(position)
    if need is NeedLevel.CRITICAL:
        return True
    return team.championship_window is ChampionshipWindow.CONTENDING and need is NeedLevel.MODERATE


def build_market_context(
    players: Sequence[PlayerValuation],
    teams: Sequence[TeamCapSituation],
    *,
    league_minimum: int,
    tag_likelihoods: Optional[Mapping[str, float]] = None,
) -> MarketContext:
    elite: Dict[str, int] = {}
    quality = 0
    for player in players:
        tier = classify_overall_tier(player.composite_rank)
        if tier is Tier.ELITE:
            elite[player.position] = elite.get(player.position, 0) + 1
        if tier in (Tier.ELITE, Tier.STAR):
            quality += 1

    positions = {player.position for player in players}
    for team in teams:
        positions.update(team.positional_needs.keys())

    markets: Dict[str, PositionMarket] = {}
    for position in sorted(positions):
        critical = sum(1 for team in teams if team.need(position) is NeedLevel.CRITICAL)
        ratio = elite.get(position, 0) / critical if critical else None
        bucket, multiplier = depth_multiplier(ratio)
        markets[position] = PositionMarket(
            position=position,
            elite_available=elite.get(position, 0),
            critical_need_teams=critical,
            desperate_teams=sum(1 for team in teams if is_desperate(team, position)),
            depth_ratio=ratio,
            bucket=bucket,
            depth_multiplier=multiplier,
        )
        logger.debug("Market %s: ratio=%s bucket=%s depth=%.3f", position, ratio, bucket.value, multiplier)

    buyers = sum(
        1
        for team in teams
        if team.roster_spots_to_fill > 0 and team.available_cap_space >= league_minimum * team.roster_spots_to_fill
    )
    return MarketContext(
        positions=markets,
        team_cap_spaces=tuple(team.available_cap_space for team in teams),
        buyers=buyers,
        quality_players=quality,
        inflation=market_inflation(buyers, quality),
        tag_likelihoods=dict(tag_likelihoods or {}),
    )


def predict_market_price(
    intrinsic_value: float,
    *,
    player: PlayerValuation,
    position_rank: int,
    context: MarketContext,
) -> MarketPrice:
    market = context.position(player.position)
    multipliers = AppliedMultipliers(
        depth=market.depth_multiplier,
        competition=competition_factor(market.bucket, position_rank),
        demand=demand_multiplier(market.desperate_teams, context.teams_with_cap(intrinsic_value)),
        inflation=context.inflation,
        tag_premium=tag_premium(position_rank, context.tag_likelihood(player.player_id)),
    )
    return MarketPrice(
        price=intrinsic_value * multipliers.market_product,
        multipliers=multipliers,
        bucket=market.bucket,
    )


def value_gap(predicted: float, intrinsic: float) -> float:
    if intrinsic <= 0:
        return 0.0
    return predicted / intrinsic - 1.0


def classify_value_gap(gap: float) -> ValueBand:
    if gap < -0.15:
        return ValueBand.EXCELLENT_VALUE
    if gap < -0.05:
        return ValueBand.GOOD_VALUE
    if gap <= 0.05:
        return ValueBand.FAIR_PRICE
    if gap <= 0.15:
        return ValueBand.SLIGHT_PREMIUM
    if gap <= 0.30:
        return ValueBand.OVERPAY
    return ValueBand.AVOID


def confidence_range(price: float) -> Tuple[int, int]:
    return int(round(price * (1.0 - CONFIDENCE_RANGE))), int(round(price * (1.0 + CONFIDENCE_RANGE)))


def positional_scarcity(
    position: str,
    players: Iterable[PlayerValuation],
    teams: Iterable[TeamCapSituation],
) -> PositionalScarcity:
    """Supply of ranked starters against teams with a real need at the position."""

    position = position.upper()
    supply = sum(1 for player in players if player.position == position and player.composite_rank <= SCARCITY_QUALITY_RANK)
    needing = sum(1 for team in teams if team.need(position) is not NeedLevel.LOW)
    ratio = supply / max(1, needing)
    score = max(0.0, min(100.0, (1.0 - ratio) * 100.0))
    return PositionalScarcity(
        position=position,
        quality_available=supply,
        teams_needing=needing,
        supply_demand_ratio=ratio,
        scarcity_score=score,
        price_impact_multiplier=1.0 + (score / 100.0) * 0.5,
    )


__all__ = [
    "MarketContext",
    "MarketPrice",
    "PositionMarket",
    "PositionalScarcity",
    "build_market_context",
    "classify_value_gap",
    "competition_factor",
    "confidence_range",
    "demand_multiplier",
    "depth_multiplier",
    "is_desperate",
    "market_inflation",
    "positional_scarcity",
    "predict_market_price",
    "tag_premium",
    "value_gap",
]
