"""Curve-derived fair value with elite premium and tier floors."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pyauction.config.league import (
    ELITE_PREMIUM_MAX,
    ELITE_PREMIUM_RANK_CUTOFF,
    FLOOR_FRACTIONS,
)
from pyauction.errors import DataError
from pyauction.history import DecayCurve, HistoricalSnapshot
from pyauction.models import CurveKind, Tier

from .tiers import classify_overall_tier


logger = logging.getLogger(__name__)

_FALLBACK_ORDER = (CurveKind.AVG, CurveKind.MAX, CurveKind.MIN)


@dataclass(frozen=True)
class ResolvedCurve:
    curve: DecayCurve
    requested: CurveKind
    fallback: bool = False


@dataclass(frozen=True)
class IntrinsicValue:
    value: float
    curve_price: float
    premium: float
    price_with_premium: float
    tier_floor: float
    overall_tier: Tier

    @property
    def floor_applied(self) -> bool:
        return self.tier_floor > self.price_with_premium and self.value == self.tier_floor


def resolve_curve(snapshot: HistoricalSnapshot, position: str, kind: CurveKind, *, league_minimum: int) -> ResolvedCurve:
    """Return the requested curve, or the widest available substitute.

    Order: requested kind, other kinds at the same position, the pooled
    all-position curve, then a flat league-minimum curve.
    """

    try:
        return ResolvedCurve(curve=snapshot.curve(position, kind), requested=kind)
    except DataError as exc:
        logger.warning("%s; falling back", exc.message)

    for alternative in _FALLBACK_ORDER:
        if alternative is kind:
            continue
        try:
            return ResolvedCurve(curve=snapshot.curve(position, alternative), requested=kind, fallback=True)
        except DataError:
            continue

    for alternative in (kind, *_FALLBACK_ORDER):
        try:
            return ResolvedCurve(curve=snapshot.pooled_curve(alternative), requested=kind, fallback=True)
        except DataError:
            continue

    logger.warning("No historical curve at all for %s; using flat league minimum", position)
    flat = DecayCurve(base_price=float(league_minimum), decay_rate=0.0, data_points=0, kind=kind, position=position)
    return ResolvedCurve(curve=flat, requested=kind, fallback=True)


def elite_rank_premium(position_rank: int) -> float:
    """+5% at positional rank 1 sliding linearly to 0% at rank 5."""

    if position_rank < 1:
        raise ValueError(f"position_rank must be >= 1, got {position_rank}")
    if position_rank > ELITE_PREMIUM_RANK_CUTOFF:
        return 0.0
    span = ELITE_PREMIUM_RANK_CUTOFF - 1
    return ELITE_PREMIUM_MAX * (ELITE_PREMIUM_RANK_CUTOFF - position_rank) / span


def tier_floor(position_max: float, overall_tier: Tier) -> float:
    return position_max * FLOOR_FRACTIONS[overall_tier]


def calculate_intrinsic_value(
    *,
    curve: DecayCurve,
    position_rank: int,
    overall_rank: int,
    position_max: float,
    league_minimum: int,
) -> IntrinsicValue:
    # The floor keys off league-wide standing while the curve decays by positional rank.
    curve_price = curve.price_at(position_rank)
    premium = elite_rank_premium(position_rank)
    with_premium = curve_price * (1.0 + premium)
    overall_tier = classify_overall_tier(overall_rank)
    floor = tier_floor(position_max, overall_tier)
    return IntrinsicValue(
        value=max(with_premium, floor, float(league_minimum)),
        curve_price=curve_price,
        premium=premium,
        price_with_premium=with_premium,
        tier_floor=floor,
        overall_tier=overall_tier,
    )


__all__ = [
    "IntrinsicValue",
    "ResolvedCurve",
    "calculate_intrinsic_value",
    "elite_rank_premium",
    "resolve_curve",
    "tier_floor",
]
