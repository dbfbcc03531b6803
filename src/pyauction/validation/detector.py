"""Sanity checks of predicted prices against historical precedent."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from pyauction.config.league import (
    AGE_PRECEDENT_TOLERANCE,
    TIER_MAX_ERROR_RATIO,
    TIER_MAX_WARNING_RATIO,
)
from pyauction.history import HistoricalSnapshot, position_tier
from pyauction.models import (
    Confidence,
    ContractOption,
    IssueReason,
    PlayerValuation,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from pyauction.pricing.intrinsic import elite_rank_premium


def confidence_for(error_count: int, warning_count: int) -> Confidence:
    if error_count:
        return Confidence.LOW
    if warning_count:
        return Confidence.MEDIUM
    return Confidence.HIGH


def _result(issues: Iterable[ValidationIssue]) -> ValidationResult:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    seen = set()
    for issue in issues:
        key = (issue.reason, issue.severity, issue.message)
        if key in seen:
            continue
        seen.add(key)
        (errors if issue.severity is Severity.ERROR else warnings).append(issue)
    return ValidationResult(
        warnings=warnings,
        errors=errors,
        confidence=confidence_for(len(errors), len(warnings)),
        requires_review=bool(errors),
    )


def merge_results(*results: ValidationResult) -> ValidationResult:
    return _result(issue for result in results for issue in (*result.errors, *result.warnings))


def _tier_max_issues(player: PlayerValuation, predicted: float, snapshot: HistoricalSnapshot, position_rank: int) -> List[ValidationIssue]:
    tier = position_tier(position_rank)
    tier_range = snapshot.tier_range(player.position, tier)
    if not tier_range.has_data:
        return [
            ValidationIssue(
                reason=IssueReason.NO_TIER_DATA,
                severity=Severity.WARNING,
                message=f"No {player.position} {tier.value} salaries in the historical window",
            )
        ]

    limit = tier_range.max * (1.0 + elite_rank_premium(position_rank))
    exceed_ratio = predicted / limit - 1.0
    details = {"exceed_ratio": exceed_ratio, "tier_max": float(tier_range.max), "predicted": float(predicted)}
    if exceed_ratio > TIER_MAX_ERROR_RATIO:
        return [
            ValidationIssue(
                reason=IssueReason.EXCEEDS_TIER_MAX,
                severity=Severity.ERROR,
                message=f"Price exceeds {player.position} {tier.value} historical max by {exceed_ratio:.0%}",
                details=details,
            )
        ]
    if exceed_ratio >= TIER_MAX_WARNING_RATIO:
        return [
            ValidationIssue(
                reason=IssueReason.APPROACHES_TIER_MAX,
                severity=Severity.WARNING,
                message=f"Price is {exceed_ratio:.0%} above {player.position} {tier.value} historical max",
                details=details,
            )
        ]
    return []


def _age_issues(player: PlayerValuation, predicted: float, snapshot: HistoricalSnapshot, contract_years: int) -> List[ValidationIssue]:
    age = player.age + contract_years
    precedent = snapshot.age_precedent(player.position, age)
    if precedent is None:
        return [
            ValidationIssue(
                reason=IssueReason.NO_AGE_PRECEDENT,
                severity=Severity.ERROR,
                message=f"No historical {player.position} salaries at age {age}",
                details={"age": float(age), "predicted": float(predicted)},
            )
        ]
    ceiling = precedent.max_salary * AGE_PRECEDENT_TOLERANCE
    if predicted > ceiling:
        return [
            ValidationIssue(
                reason=IssueReason.EXCEEDS_AGE_PRECEDENT,
                severity=Severity.ERROR,
                message=f"Price exceeds the highest {player.position} salary at age {age} by more than 25%",
                details={"age": float(age), "max_at_age": float(precedent.max_salary), "predicted": float(predicted)},
            )
        ]
    return []


def validate_price(
    player: PlayerValuation,
    predicted_price: float,
    *,
    snapshot: HistoricalSnapshot,
    position_rank: int,
    contract_years: int = 0,
    data_fallback: bool = False,
) -> ValidationResult:
    """Validate one price. Age precedent is checked at ``age + contract_years``."""

    issues = _tier_max_issues(player, predicted_price, snapshot, position_rank)
    issues.extend(_age_issues(player, predicted_price, snapshot, contract_years))
    if snapshot.is_partial:
        issues.append(
            ValidationIssue(
                reason=IssueReason.SHORT_HISTORY,
                severity=Severity.WARNING,
                message=f"Only {snapshot.years_available} of {snapshot.window_years} history years available",
                details={"years_available": float(snapshot.years_available)},
            )
        )
    if data_fallback:
        issues.append(
            ValidationIssue(
                reason=IssueReason.HISTORICAL_DATA_FALLBACK,
                severity=Severity.WARNING,
                message=f"{player.position} curve fell back to a wider historical curve",
            )
        )
    return _result(issues)


def validate_contract_ages(
    player: PlayerValuation,
    options: Iterable[ContractOption],
    *,
    snapshot: HistoricalSnapshot,
) -> ValidationResult:
    """Age precedent for every contract length, each at its own annual price."""

    return _result(
        issue
        for option in options
        for issue in _age_issues(player, option.annual_price, snapshot, option.years)
    )


def validate_pool(
    entries: Iterable[Tuple[PlayerValuation, float, int]],
    *,
    snapshot: HistoricalSnapshot,
) -> Dict[str, ValidationResult]:
    """Bulk regression gate over ``(player, predicted_price, position_rank)`` entries."""

    return {
        player.player_id: validate_price(player, price, snapshot=snapshot, position_rank=rank)
        for player, price, rank in entries
    }


__all__ = [
    "confidence_for",
    "merge_results",
    "validate_contract_ages",
    "validate_pool",
    "validate_price",
]
