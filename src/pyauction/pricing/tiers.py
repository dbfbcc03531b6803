"""Overall-rank tiers and per-position curve selection."""

from __future__ import annotations

import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence

from pyauction.config.league import CURVE_BY_TIER, OVERALL_TIER_LIMITS
from pyauction.history import position_tier
from pyauction.models import CurveKind, PlayerValuation, Tier


logger = logging.getLogger(__name__)


def classify_overall_tier(rank: int) -> Tier:
    """Tier by league-wide composite rank: elite <= 30, star <= 105, starter <= 149."""

    if rank < 1:
        raise ValueError(f"rank must be >= 1, got {rank}")
    for tier, limit in OVERALL_TIER_LIMITS:
        if rank <= limit:
            return tier
    return Tier.DEPTH


classify_position_tier = position_tier


def _rank_key(player: PlayerValuation) -> tuple[int, str]:
    return player.composite_rank, player.player_id


def position_ranks(players: Iterable[PlayerValuation]) -> Dict[str, int]:
    """1-based rank of each player strictly within its own position."""

    grouped: Dict[str, List[PlayerValuation]] = defaultdict(list)
    for player in players:
        grouped[player.position].append(player)
    ranks: Dict[str, int] = {}
    for bucket in grouped.values():
        for index, player in enumerate(sorted(bucket, key=_rank_key)):
            ranks[player.player_id] = index + 1
    return ranks


def best_player_by_position(players: Iterable[PlayerValuation]) -> Mapping[str, PlayerValuation]:
    """Read-only map of position -> best (lowest composite rank) available player."""

    best: Dict[str, PlayerValuation] = {}
    for player in players:
        current = best.get(player.position)
        if current is None or _rank_key(player) < _rank_key(current):
            best[player.position] = player
    return MappingProxyType(best)


def select_curve(position: str, best_by_position: Mapping[str, PlayerValuation]) -> CurveKind:
    best = best_by_position.get(position.upper())
    if best is None:
        return CurveKind.MIN
    return CURVE_BY_TIER[classify_overall_tier(best.composite_rank)]


def select_curves(positions: Sequence[str], best_by_position: Mapping[str, PlayerValuation]) -> Dict[str, CurveKind]:
    selection = {}
    for position in dict.fromkeys([*positions, *best_by_position.keys()]):
        selection[position] = select_curve(position, best_by_position)
        logger.debug("Curve for %s: %s", position, selection[position].value)
    return selection


__all__ = [
    "best_player_by_position",
    "classify_overall_tier",
    "classify_position_tier",
    "position_ranks",
    "select_curve",
    "select_curves",
]
