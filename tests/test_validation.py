import pytest

from pyauction.history import build_snapshot
from pyauction.models import Confidence, IssueReason, PlayerValuation
from pyauction.validation import confidence_for, merge_results, validate_pool, validate_price

from tests.samples import salary_at, sample_history


@pytest.fixture(scope="module")
def snapshot():
    return build_snapshot(sample_history(), end_year=2024)


def _rb(age: int, rank: int = 20) -> PlayerValuation:
    return PlayerValuation(player_id=f"rb-{age}", position="RB", age=age, composite_rank=rank)


def test_confidence_is_a_function_of_counts():
    assert confidence_for(0, 0) is Confidence.HIGH
    assert confidence_for(0, 3) is Confidence.MEDIUM
    assert confidence_for(1, 0) is Confidence.LOW


def test_aging_back_without_precedent_requires_review(snapshot):
    result = validate_price(_rb(32), 1_600_000, snapshot=snapshot, position_rank=20, contract_years=5)

    assert result.reasons() == [IssueReason.NO_AGE_PRECEDENT]
    assert result.requires_review
    assert result.confidence is Confidence.LOW
    assert result.errors[0].details["age"] == 37


def test_same_back_today_is_clean(snapshot):
    result = validate_price(_rb(32), 1_600_000, snapshot=snapshot, position_rank=20)

    assert result.errors == []
    assert result.warnings == []
    assert result.confidence is Confidence.HIGH


def test_price_far_above_tier_max_is_an_error(snapshot):
    price = salary_at("RB", 1) * 1.05 * 1.3
    result = validate_price(_rb(26, rank=1), price, snapshot=snapshot, position_rank=1)

    assert IssueReason.EXCEEDS_TIER_MAX in result.reasons()
    assert result.requires_review


def test_price_near_tier_max_is_a_warning(snapshot):
    price = salary_at("RB", 1) * 1.05 * 1.15
    result = validate_price(_rb(26, rank=1), price, snapshot=snapshot, position_rank=1)

    assert result.reasons() == [IssueReason.APPROACHES_TIER_MAX]
    assert not result.requires_review
    assert result.confidence is Confidence.MEDIUM


def test_elite_premium_raises_the_tier_limit(snapshot):
    price = salary_at("RB", 1) * 1.05 * 1.05

    top = validate_price(_rb(26, rank=1), price, snapshot=snapshot, position_rank=1)
    fifth = validate_price(_rb(26, rank=5), price, snapshot=snapshot, position_rank=5)

    assert top.reasons() == []
    assert fifth.reasons() == [IssueReason.APPROACHES_TIER_MAX]


def test_missing_tier_data_is_a_warning():
    history = [record for record in sample_history() if record.position == "QB"]
    snapshot = build_snapshot(history, end_year=2024)
    player = PlayerValuation(player_id="te", position="TE", age=26, composite_rank=40)

    result = validate_price(player, 2_000_000, snapshot=snapshot, position_rank=3)
    assert IssueReason.NO_TIER_DATA in [issue.reason for issue in result.warnings]


def test_short_history_and_fallback_lower_confidence():
    snapshot = build_snapshot(sample_history(years=(2023, 2024)), end_year=2024)
    result = validate_price(_rb(32), 1_600_000, snapshot=snapshot, position_rank=20, data_fallback=True)

    assert [issue.reason for issue in result.warnings] == [
        IssueReason.SHORT_HISTORY,
        IssueReason.HISTORICAL_DATA_FALLBACK,
    ]
    assert result.confidence is Confidence.MEDIUM


def test_validate_pool_keys_by_player(snapshot):
    young = _rb(26, rank=20)
    old = PlayerValuation(player_id="old", position="RB", age=36, composite_rank=90)
    results = validate_pool([(young, 1_500_000, 20), (old, 1_000_000, 30)], snapshot=snapshot)

    assert set(results) == {"rb-26", "old"}
    assert not results["rb-26"].requires_review
    assert results["old"].requires_review


def test_merge_results_deduplicates(snapshot):
    result = validate_price(_rb(32), 1_600_000, snapshot=snapshot, position_rank=20, contract_years=5)
    merged = merge_results(result, result)

    assert len(merged.errors) == 1
    assert merged.requires_review
