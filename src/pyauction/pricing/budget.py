"""League-wide affordability check over the whole candidate pool."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from pyauction.errors import ConstraintInfeasible
from pyauction.models import BudgetSummary, LeagueWarning, LeagueWarningReason, TeamCapSituation


logger = logging.getLogger(__name__)

REFERENCE_BAND = (0.8, 1.2)
MAX_DEFLATION = 0.70
MAX_INFLATION = 1.15


@dataclass(frozen=True)
class BudgetOutcome:
    prices: Dict[str, int]
    summary: BudgetSummary
    warnings: Tuple[LeagueWarning, ...] = ()

    def multiplier_for(self, player_id: str, original: float) -> float:
        if original <= 0:
            return 1.0
        return self.prices[player_id] / original


def league_capacity(teams: Iterable[TeamCapSituation]) -> int:
    return sum(team.available_cap_space for team in teams)


def minimum_roster_spend(teams: Iterable[TeamCapSituation], league_minimum: int) -> int:
    return sum(team.roster_spots_to_fill for team in teams) * league_minimum


def _millions(value: float) -> str:
    return f"${value / 1_000_000:.2f}M"


def _target_multiplier(total: float, capacity: int, reference_spend: Optional[int]) -> Tuple[float, bool]:
    """Return the uniform multiplier and whether the hard capacity limit binds."""

    if total > capacity:
        return capacity / total, True
    if not reference_spend:
        return 1.0, False
    ratio = total / reference_spend
    low, high = REFERENCE_BAND
    if low <= ratio <= high:
        return 1.0, False
    if ratio > high:
        return max(MAX_DEFLATION, high / ratio), False
    return min(MAX_INFLATION, low / ratio, capacity / total), False


def _scale(
    prices: Mapping[str, float],
    multiplier: float,
    league_minimum: int,
    budget: Optional[int] = None,
) -> Tuple[Dict[str, int], float, bool]:
    """Scale uniformly; players pushed under the league minimum are pinned there
    and the rest rescaled so the total stays within the same budget."""

    if budget is None:
        budget = math.floor(sum(prices.values()) * multiplier)
    pinned: Set[str] = set()
    while True:
        free = {pid: price for pid, price in prices.items() if pid not in pinned}
        remaining = budget - league_minimum * len(pinned)
        free_total = sum(free.values())
        if not free or remaining <= 0 or free_total <= 0:
            scaled = {pid: league_minimum for pid in prices}
            return scaled, multiplier, budget < league_minimum * len(prices)
        applied = min(multiplier, remaining / free_total)
        newly = {pid for pid, price in free.items() if math.floor(price * applied) < league_minimum}
        if not newly:
            break
        pinned |= newly

    scaled = {
        pid: league_minimum if pid in pinned else math.floor(price * applied)
        for pid, price in prices.items()
    }
    return scaled, applied, False


def apply_budget_constraint(
    prices: Mapping[str, float],
    *,
    capacity: int,
    league_minimum: int,
    minimum_spend: int = 0,
    reference_spend: Optional[int] = None,
    strict: bool = False,
) -> BudgetOutcome:
    """Rescale predicted prices against league capacity.

    Prices above capacity deflate by ``capacity / total`` uniformly. Within
    capacity, an optional reference spend applies bounded deflation (floor
    0.70) or inflation (at most +15%) outside the [0.8, 1.2] band.
    """

    warnings: List[LeagueWarning] = []
    if capacity < minimum_spend:
        message = (
            f"League capacity {_millions(capacity)} cannot cover minimum roster spend {_millions(minimum_spend)}"
        )
        logger.warning("%s", message)
        if strict:
            raise ConstraintInfeasible(message, capacity=capacity, minimum_spend=minimum_spend)
        warnings.append(
            LeagueWarning(
                reason=LeagueWarningReason.CONSTRAINT_INFEASIBLE,
                message=message,
                details={"capacity": float(capacity), "minimum_spend": float(minimum_spend)},
            )
        )

    total = float(sum(prices.values()))
    multiplier, binding = _target_multiplier(total, capacity, reference_spend) if total > 0 else (1.0, False)
    spend = total
    infeasible = False

    if multiplier == 1.0:
        scaled = {pid: max(league_minimum, int(round(price))) for pid, price in prices.items()}
        applied = 1.0
        # raising sub-minimum prices can push an in-capacity pool over the limit
        clamped_total = sum(scaled.values())
        if clamped_total > capacity:
            spend = float(clamped_total)
            multiplier, binding = capacity / clamped_total, True
            scaled, applied, infeasible = _scale(scaled, multiplier, league_minimum, budget=capacity)
    else:
        scaled, applied, infeasible = _scale(prices, multiplier, league_minimum)

    if infeasible:
        pool_minimum = league_minimum * len(prices)
        message = f"League capacity {_millions(capacity)} cannot cover {len(prices)} players at the league minimum"
        logger.warning("%s", message)
        if strict:
            raise ConstraintInfeasible(message, capacity=capacity, minimum_spend=pool_minimum)
        warnings.append(
            LeagueWarning(
                reason=LeagueWarningReason.CONSTRAINT_INFEASIBLE,
                message=message,
                details={"capacity": float(capacity), "minimum_spend": float(pool_minimum)},
            )
        )

    if binding:
        message = (
            f"Total predicted spend {_millions(spend)} exceeds league capacity {_millions(capacity)}; "
            f"prices scaled by {multiplier:.3f}"
        )
        logger.warning("%s", message)
        warnings.append(
            LeagueWarning(
                reason=LeagueWarningReason.INSUFFICIENT_CAP,
                message=message,
                details={"total": spend, "capacity": float(capacity), "multiplier": multiplier},
            )
        )
    elif multiplier != 1.0:
        logger.info("Reference spend adjustment %.3f applied (total %s)", multiplier, _millions(total))

    summary = BudgetSummary(
        total_before=int(round(total)),
        total_after=sum(scaled.values()),
        capacity=capacity,
        multiplier=applied,
        reference_spend=reference_spend,
        minimum_roster_spend=minimum_spend,
        binding=binding,
    )
    return BudgetOutcome(prices=scaled, summary=summary, warnings=tuple(warnings))


__all__ = [
    "BudgetOutcome",
    "apply_budget_constraint",
    "league_capacity",
    "minimum_roster_spend",
]
