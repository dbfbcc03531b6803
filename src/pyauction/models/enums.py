"""Tagged variants shared by the valuation models."""

from __future__ import annotations

from enum import Enum


class Tier(str, Enum):
    ELITE = "elite"
    STAR = "star"
    STARTER = "starter"
    DEPTH = "depth"


class CurveKind(str, Enum):
    """Which rank-slot statistic a historical decay curve was fitted on."""

    MAX = "max"
    AVG = "avg"
    MIN = "min"


class NeedLevel(str, Enum):
    CRITICAL = "critical"
    MODERATE = "moderate"
    LOW = "low"


class ChampionshipWindow(str, Enum):
    CONTENDING = "contending"
    NEUTRAL = "neutral"
    REBUILDING = "rebuilding"


class DepthBucket(str, Enum):
    DEEP = "deep"
    MODERATE = "moderate"
    SCARCE = "scarce"
    EXTREME = "extreme"


class ValueBand(str, Enum):
    EXCELLENT_VALUE = "excellent value"
    GOOD_VALUE = "good value"
    FAIR_PRICE = "fair price"
    SLIGHT_PREMIUM = "slight premium"
    OVERPAY = "overpay"
    AVOID = "avoid"


class AgePhase(str, Enum):
    PRIME = "prime"
    DECLINE = "decline"
    STEEP_DECLINE = "steep decline"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


class IssueReason(str, Enum):
    EXCEEDS_TIER_MAX = "exceeds tier max"
    APPROACHES_TIER_MAX = "approaches tier max"
    NO_TIER_DATA = "no tier data"
    NO_AGE_PRECEDENT = "no age precedent"
    EXCEEDS_AGE_PRECEDENT = "exceeds age precedent"
    SHORT_HISTORY = "short history"
    HISTORICAL_DATA_FALLBACK = "historical data fallback"


class LeagueWarningReason(str, Enum):
    INSUFFICIENT_CAP = "insufficient cap"
    CONSTRAINT_INFEASIBLE = "constraint infeasible"


__all__ = [
    "AgePhase",
    "ChampionshipWindow",
    "Confidence",
    "CurveKind",
    "DepthBucket",
    "IssueReason",
    "LeagueWarningReason",
    "NeedLevel",
    "Severity",
    "Tier",
    "ValueBand",
]
