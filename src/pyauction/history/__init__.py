"""Historical salary aggregation."""

from .aggregator import (
    POOLED,
    AgePrecedent,
    DecayCurve,
    HistoricalSnapshot,
    PositionTierRange,
    RankSlotStats,
    build_snapshot,
    fit_decay_curve,
    position_tier,
)

__all__ = [
    "AgePrecedent",
    "DecayCurve",
    "HistoricalSnapshot",
    "POOLED",
    "PositionTierRange",
    "RankSlotStats",
    "build_snapshot",
    "fit_decay_curve",
    "position_tier",
]
