"""Reduce raw salary history into tier ranges, age precedents and decay curves."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from statistics import fmean
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pyauction.config.league import POSITION_TIER_LIMITS, RANK_SLOTS_TRACKED
from pyauction.errors import DataError
from pyauction.models import CurveKind, HistoricalSalaryRecord, Tier


logger = logging.getLogger(__name__)

DEFAULT_WINDOW_YEARS = 6
POOLED = "*"


@dataclass(frozen=True)
class PositionTierRange:
    position: str
    tier: Tier
    max: int
    avg: float
    min: int
    sample_size: int
    year_span: Optional[Tuple[int, int]] = None

    @property
    def has_data(self) -> bool:
        return self.sample_size > 0


@dataclass(frozen=True)
class AgePrecedent:
    position: str
    age: int
    max_salary: int
    avg_salary: float
    sample_size: int


@dataclass(frozen=True)
class RankSlotStats:
    rank: int
    max: int
    avg: float
    min: int
    samples: int

    def value(self, kind: CurveKind) -> float:
        if kind is CurveKind.MAX:
            return float(self.max)
        if kind is CurveKind.MIN:
            return float(self.min)
        return self.avg


@dataclass(frozen=True)
class DecayCurve:
    """Exponential salary curve ``base_price * exp(decay_rate * (rank - 1))``."""

    base_price: float
    decay_rate: float
    data_points: int
    kind: CurveKind
    position: str = POOLED

    def price_at(self, position_rank: int) -> float:
        if position_rank < 1:
            raise ValueError(f"position_rank must be >= 1, got {position_rank}")
        return self.base_price * math.exp(self.decay_rate * (position_rank - 1))


def position_tier(position_rank: int) -> Tier:
    """Within-position tier for a 1-based rank inside one position."""

    if position_rank < 1:
        raise ValueError(f"position_rank must be >= 1, got {position_rank}")
    for tier, limit in POSITION_TIER_LIMITS:
        if position_rank <= limit:
            return tier
    return Tier.DEPTH


@dataclass(frozen=True)
class HistoricalSnapshot:
    """Everything derived from one historical window.

    Built once per analysis session and shared read-only by every pricing
    pass. Plain dicts keep the snapshot picklable for worker processes.
    """

    years: Tuple[int, ...]
    window_years: int
    tier_ranges: Dict[Tuple[str, Tier], PositionTierRange] = field(default_factory=dict)
    age_precedents: Dict[Tuple[str, int], AgePrecedent] = field(default_factory=dict)
    rank_slots: Dict[str, Tuple[RankSlotStats, ...]] = field(default_factory=dict)
    curves: Dict[Tuple[str, CurveKind], DecayCurve] = field(default_factory=dict)
    position_maxima: Dict[str, int] = field(default_factory=dict)
    latest_top_salaries: Dict[str, Tuple[int, ...]] = field(default_factory=dict)

    @property
    def years_available(self) -> int:
        return len(self.years)

    @property
    def is_partial(self) -> bool:
        return self.years_available < self.window_years

    @property
    def year_span(self) -> Optional[Tuple[int, int]]:
        if not self.years:
            return None
        return self.years[0], self.years[-1]

    def tier_range(self, position: str, tier: Tier) -> PositionTierRange:
        key = (position.upper(), tier)
        found = self.tier_ranges.get(key)
        if found is not None:
            return found
        return PositionTierRange(position=key[0], tier=tier, max=0, avg=0.0, min=0, sample_size=0)

    def age_precedent(self, position: str, age: int) -> Optional[AgePrecedent]:
        return self.age_precedents.get((position.upper(), age))

    def position_max(self, position: str) -> int:
        return self.position_maxima.get(position.upper(), 0)

    def curve(self, position: str, kind: CurveKind) -> DecayCurve:
        key = (position.upper(), kind)
        found = self.curves.get(key)
        if found is None:
            raise DataError(
                f"No {kind.value} curve for position {key[0]} in years {self.year_span}",
                position=key[0],
                kind=kind,
            )
        return found

    def pooled_curve(self, kind: CurveKind) -> DecayCurve:
        return self.curve(POOLED, kind)

    def franchise_tag_salary(self, position: str, league_minimum: int) -> int:
        """Average of the top three salaries at a position in the latest year."""

        top = self.latest_top_salaries.get(position.upper(), ())
        if not top:
            return league_minimum
        return int(round(fmean(top[:3])))


def _window(records: Sequence[HistoricalSalaryRecord], end_year: Optional[int], window_years: int) -> Tuple[int, int] | None:
    if not records:
        return None
    last = end_year if end_year is not None else max(record.year for record in records)
    return last - window_years + 1, last


def _ranked_by_year(records: Iterable[HistoricalSalaryRecord], *, pooled: bool = False) -> Dict[Tuple[str, int], List[HistoricalSalaryRecord]]:
    grouped: Dict[Tuple[str, int], List[HistoricalSalaryRecord]] = defaultdict(list)
    for record in records:
        if record.salary <= 0:
            continue
        key = (POOLED if pooled else record.position, record.year)
        grouped[key].append(record)
    for bucket in grouped.values():
        bucket.sort(key=lambda rec: (-rec.salary, rec.player_id))
    return grouped


def _tier_ranges(ranked: Mapping[Tuple[str, int], List[HistoricalSalaryRecord]]) -> Dict[Tuple[str, Tier], PositionTierRange]:
    salaries: Dict[Tuple[str, Tier], List[int]] = defaultdict(list)
    years: Dict[Tuple[str, Tier], set[int]] = defaultdict(set)
    for (position, year), bucket in ranked.items():
        for index, record in enumerate(bucket):
            key = (position, position_tier(index + 1))
            salaries[key].append(record.salary)
            years[key].add(year)

    ranges: Dict[Tuple[str, Tier], PositionTierRange] = {}
    for key, values in salaries.items():
        span = (min(years[key]), max(years[key]))
        ranges[key] = PositionTierRange(
            position=key[0],
            tier=key[1],
            max=max(values),
            avg=fmean(values),
            min=min(values),
            sample_size=len(values),
            year_span=span,
        )
    return ranges


def _age_precedents(records: Iterable[HistoricalSalaryRecord]) -> Dict[Tuple[str, int], AgePrecedent]:
    grouped: Dict[Tuple[str, int], List[int]] = defaultdict(list)
    for record in records:
        if record.salary <= 0:
            continue
        grouped[(record.position, record.age)].append(record.salary)
    return {
        key: AgePrecedent(
            position=key[0],
            age=key[1],
            max_salary=max(values),
            avg_salary=fmean(values),
            sample_size=len(values),
        )
        for key, values in grouped.items()
    }


def _rank_slots(ranked: Mapping[Tuple[str, int], List[HistoricalSalaryRecord]]) -> Dict[str, Tuple[RankSlotStats, ...]]:
    by_slot: Dict[str, Dict[int, List[int]]] = defaultdict(lambda: defaultdict(list))
    for (position, _year), bucket in ranked.items():
        for index, record in enumerate(bucket[:RANK_SLOTS_TRACKED]):
            by_slot[position][index + 1].append(record.salary)

    slots: Dict[str, Tuple[RankSlotStats, ...]] = {}
    for position, ranks in by_slot.items():
        slots[position] = tuple(
            RankSlotStats(
                rank=rank,
                max=max(values),
                avg=fmean(values),
                min=min(values),
                samples=len(values),
            )
            for rank, values in sorted(ranks.items())
        )
    return slots


def fit_decay_curve(slots: Sequence[RankSlotStats], kind: CurveKind, *, position: str = POOLED) -> Optional[DecayCurve]:
    """Fit ``ln(v_r / v_1) = k * (r - 1)`` by least squares through the top slot.

    Returns ``None`` when fewer than two populated slots exist.
    """

    points = [(slot.rank, slot.value(kind)) for slot in slots if slot.samples > 0 and slot.value(kind) > 0]
    if not points or points[0][0] != 1:
        return None
    top = points[0][1]
    tail = points[1:]
    if not tail:
        return None
    numerator = sum((rank - 1) * math.log(value / top) for rank, value in tail)
    denominator = sum((rank - 1) ** 2 for rank, _ in tail)
    decay = min(0.0, numerator / denominator)
    return DecayCurve(base_price=top, decay_rate=decay, data_points=len(points), kind=kind, position=position)


def build_snapshot(
    records: Sequence[HistoricalSalaryRecord],
    *,
    end_year: Optional[int] = None,
    window_years: int = DEFAULT_WINDOW_YEARS,
) -> HistoricalSnapshot:
    """Aggregate salary history for the trailing ``window_years`` ending at ``end_year``."""

    if window_years < 1:
        raise ValueError(f"window_years must be >= 1, got {window_years}")

    bounds = _window(records, end_year, window_years)
    if bounds is None:
        logger.warning("No historical salary records supplied; every curve will fall back")
        return HistoricalSnapshot(years=(), window_years=window_years)

    first, last = bounds
    in_window = [record for record in records if first <= record.year <= last]
    years = tuple(sorted({record.year for record in in_window}))

    ranked = _ranked_by_year(in_window)
    pooled = _ranked_by_year(in_window, pooled=True)
    slots = _rank_slots(ranked)
    slots.update(_rank_slots(pooled))

    curves: Dict[Tuple[str, CurveKind], DecayCurve] = {}
    for position, position_slots in slots.items():
        for kind in CurveKind:
            curve = fit_decay_curve(position_slots, kind, position=position)
            if curve is not None:
                curves[(position, kind)] = curve
            else:
                logger.debug("Unable to fit %s curve for %s (%d slots)", kind.value, position, len(position_slots))

    maxima: Dict[str, int] = {}
    for (position, _year), bucket in ranked.items():
        maxima[position] = max(maxima.get(position, 0), bucket[0].salary)

    latest_top: Dict[str, Tuple[int, ...]] = {}
    if years:
        latest = years[-1]
        for (position, year), bucket in ranked.items():
            if year == latest:
                latest_top[position] = tuple(record.salary for record in bucket[:3])

    snapshot = HistoricalSnapshot(
        years=years,
        window_years=window_years,
        tier_ranges=_tier_ranges(ranked),
        age_precedents=_age_precedents(in_window),
        rank_slots=slots,
        curves=curves,
        position_maxima=maxima,
        latest_top_salaries=latest_top,
    )
    logger.info(
        "Historical snapshot built from %d records across %d/%d years (%s-%s), %d curves",
        len(in_window),
        len(years),
        window_years,
        first,
        last,
        len(curves),
    )
    if snapshot.is_partial:
        logger.warning("Historical window is partial: %d of %d years available", len(years), window_years)
    return snapshot


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
