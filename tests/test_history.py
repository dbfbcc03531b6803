import math

import pytest

from pyauction.errors import DataError
from pyauction.history import POOLED, build_snapshot, fit_decay_curve, position_tier
from pyauction.models import CurveKind, HistoricalSalaryRecord, Tier


def _records(position: str, year: int, salaries: list[int], *, age: int = 26) -> list[HistoricalSalaryRecord]:
    return [
        HistoricalSalaryRecord(
            player_id=f"{position}-{year}-{index}",
            position=position,
            age=age,
            salary=salary,
            year=year,
        )
        for index, salary in enumerate(salaries)
    ]


def _exponential(top: int, decay: float, count: int) -> list[int]:
    return [int(round(top * math.exp(decay * rank))) for rank in range(count)]


def test_position_tier_thresholds():
    assert [position_tier(rank) for rank in (1, 5, 6, 12, 13, 24, 25)] == [
        Tier.ELITE,
        Tier.ELITE,
        Tier.STAR,
        Tier.STAR,
        Tier.STARTER,
        Tier.STARTER,
        Tier.DEPTH,
    ]
    with pytest.raises(ValueError):
        position_tier(0)


def test_snapshot_fits_exponential_curve():
    records = _records("QB", 2024, _exponential(10_000_000, -0.2, 20))
    snapshot = build_snapshot(records, window_years=1)

    curve = snapshot.curve("QB", CurveKind.MAX)
    assert curve.base_price == pytest.approx(10_000_000)
    assert curve.decay_rate == pytest.approx(-0.2, abs=1e-4)
    assert curve.price_at(3) == pytest.approx(10_000_000 * math.exp(-0.4), rel=1e-3)
    assert snapshot.pooled_curve(CurveKind.AVG).position == POOLED


def test_snapshot_tier_ranges_and_precedents():
    salaries = _exponential(5_000_000, -0.1, 15)
    snapshot = build_snapshot(_records("RB", 2024, salaries, age=27), window_years=1)

    elite = snapshot.tier_range("rb", Tier.ELITE)
    assert elite.max == salaries[0]
    assert elite.min == salaries[4]
    assert elite.sample_size == 5
    assert snapshot.tier_range("RB", Tier.STARTER).sample_size == 3
    depth = snapshot.tier_range("RB", Tier.DEPTH)
    assert not depth.has_data
    assert depth.max == 0

    precedent = snapshot.age_precedent("RB", 27)
    assert precedent is not None
    assert precedent.max_salary == salaries[0]
    assert snapshot.age_precedent("RB", 37) is None
    assert snapshot.position_max("RB") == salaries[0]


def test_snapshot_window_filters_old_years_and_flags_partial():
    records = _records("WR", 2015, [20_000_000, 1_000_000]) + _records("WR", 2023, [9_000_000, 6_000_000]) + _records(
        "WR", 2024, [8_000_000, 5_000_000]
    )
    snapshot = build_snapshot(records, end_year=2024)

    assert snapshot.years == (2023, 2024)
    assert snapshot.is_partial
    assert snapshot.year_span == (2023, 2024)
    assert snapshot.position_max("WR") == 9_000_000


def test_snapshot_ignores_zero_salaries():
    snapshot = build_snapshot(_records("TE", 2024, [0, 3_000_000, 2_000_000]), window_years=1)
    assert snapshot.tier_range("TE", Tier.ELITE).min == 2_000_000
    assert snapshot.tier_range("TE", Tier.ELITE).sample_size == 2


def test_curve_missing_raises_data_error():
    snapshot = build_snapshot(_records("PK", 2024, [1_000_000]), window_years=1)

    with pytest.raises(DataError) as excinfo:
        snapshot.curve("PK", CurveKind.MAX)
    assert excinfo.value.position == "PK"


def test_fit_decay_curve_never_increases():
    records = _records("DEF", 2024, [1_000_000, 1_000_000, 1_000_000])
    snapshot = build_snapshot(records, window_years=1)
    curve = fit_decay_curve(snapshot.rank_slots["DEF"], CurveKind.AVG)

    assert curve is not None
    assert curve.decay_rate == 0.0


def test_franchise_tag_salary_uses_latest_year_top_three():
    records = _records("QB", 2023, [20_000_000, 19_000_000]) + _records("QB", 2024, [9_000_000, 6_000_000, 3_000_000, 1_000_000])
    snapshot = build_snapshot(records, window_years=2)

    assert snapshot.franchise_tag_salary("QB", 425_000) == 6_000_000
    assert snapshot.franchise_tag_salary("TE", 425_000) == 425_000


def test_empty_history_builds_empty_snapshot():
    snapshot = build_snapshot([], window_years=6)
    assert snapshot.years_available == 0
    assert snapshot.is_partial
