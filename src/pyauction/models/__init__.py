"""Canonical records shared across ingestion, pricing and API layers."""

from .enums import (
    AgePhase,
    ChampionshipWindow,
    Confidence,
    CurveKind,
    DepthBucket,
    IssueReason,
    LeagueWarningReason,
    NeedLevel,
    Severity,
    Tier,
    ValueBand,
)
from .records import HistoricalSalaryRecord, PlayerValuation, TeamCapSituation
from .valuation import (
    AppliedMultipliers,
    BudgetSummary,
    ContractOption,
    ContractPricing,
    LeagueWarning,
    PlayerPriceResult,
    PoolValuation,
    PriceFactors,
    RecommendedContract,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "AgePhase",
    "AppliedMultipliers",
    "BudgetSummary",
    "ChampionshipWindow",
    "Confidence",
    "ContractOption",
    "ContractPricing",
    "CurveKind",
    "DepthBucket",
    "HistoricalSalaryRecord",
    "IssueReason",
    "LeagueWarning",
    "LeagueWarningReason",
    "NeedLevel",
    "PlayerPriceResult",
    "PlayerValuation",
    "PoolValuation",
    "PriceFactors",
    "RecommendedContract",
    "Severity",
    "TeamCapSituation",
    "Tier",
    "ValidationIssue",
    "ValidationResult",
    "ValueBand",
]
