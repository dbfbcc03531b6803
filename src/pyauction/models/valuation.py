"""Derived valuation records produced by the engine."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .enums import (
    AgePhase,
    Confidence,
    CurveKind,
    DepthBucket,
    IssueReason,
    LeagueWarningReason,
    Severity,
    Tier,
    ValueBand,
)
from .records import PlayerValuation


class AppliedMultipliers(BaseModel):
    depth: float = 1.0
    competition: float = 1.0
    demand: float = 1.0
    inflation: float = 1.0
    tag_premium: float = 1.0
    budget: float = 1.0

    model_config = ConfigDict(frozen=True)

    @property
    def market_product(self) -> float:
        """Product of the market multipliers, excluding the budget rescale."""

        return self.depth * self.competition * self.demand * self.inflation * self.tag_premium


class PriceFactors(BaseModel):
    intrinsic_value: int = Field(..., ge=0)
    predicted_market_price: int = Field(..., ge=0)
    unconstrained_market_price: int = Field(..., ge=0)
    applied_multipliers: AppliedMultipliers = Field(default_factory=AppliedMultipliers)
    tier_floor_applied: bool = False
    tier_floor: int = Field(default=0, ge=0)
    curve_kind: CurveKind = CurveKind.MIN
    curve_price: float = 0.0
    elite_premium: float = 0.0
    depth_bucket: DepthBucket = DepthBucket.DEEP
    data_fallback: bool = False

    model_config = ConfigDict(frozen=True)


class ContractOption(BaseModel):
    years: int = Field(..., ge=1, le=5)
    annual_price: int = Field(..., ge=0)
    schedule: List[int]
    total_value: int
    average_annual_value: int

    model_config = ConfigDict(frozen=True)


class RecommendedContract(BaseModel):
    years: int = Field(..., ge=1, le=5)
    price: int = Field(..., ge=0)
    reason: AgePhase

    model_config = ConfigDict(frozen=True)


class ContractPricing(BaseModel):
    base_price: int = Field(..., ge=0)
    one_year: int
    two_year: int
    three_year: int
    four_year: int
    five_year: int
    recommended: RecommendedContract
    options: List[ContractOption] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def price_for(self, years: int) -> int:
        prices = self.as_list()
        if not 1 <= years <= len(prices):
            raise ValueError(f"contract length must be 1-5 years, got {years}")
        return prices[years - 1]

    def as_list(self) -> List[int]:
        return [self.one_year, self.two_year, self.three_year, self.four_year, self.five_year]


class ValidationIssue(BaseModel):
    reason: IssueReason
    severity: Severity
    message: str = ""
    details: Dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    warnings: List[ValidationIssue] = Field(default_factory=list)
    errors: List[ValidationIssue] = Field(default_factory=list)
    confidence: Confidence = Confidence.HIGH
    requires_review: bool = False

    model_config = ConfigDict(frozen=True)

    def reasons(self) -> List[IssueReason]:
        return [issue.reason for issue in (*self.errors, *self.warnings)]


class PlayerPriceResult(BaseModel):
    player: PlayerValuation
    position_rank: int = Field(..., ge=1)
    overall_tier: Tier
    factors: PriceFactors
    value_gap_pct: float
    value_band: ValueBand
    price_low: int
    price_high: int
    tag_likelihood: float = 0.0
    contract: ContractPricing
    validation: ValidationResult

    model_config = ConfigDict(frozen=True)

    @property
    def player_id(self) -> str:
        return self.player.player_id

    @property
    def intrinsic_value(self) -> int:
        return self.factors.intrinsic_value

    @property
    def predicted_market_price(self) -> int:
        return self.factors.predicted_market_price


class LeagueWarning(BaseModel):
    reason: LeagueWarningReason
    message: str = ""
    details: Dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class BudgetSummary(BaseModel):
    total_before: int
    total_after: int
    capacity: int
    multiplier: float = 1.0
    reference_spend: Optional[int] = None
    minimum_roster_spend: int = 0
    binding: bool = False

    model_config = ConfigDict(frozen=True)


class PoolValuation(BaseModel):
    players: List[PlayerPriceResult]
    budget: BudgetSummary
    league_warnings: List[LeagueWarning] = Field(default_factory=list)
    tagged_player_ids: List[str] = Field(default_factory=list)
    curve_selection: Dict[str, CurveKind] = Field(default_factory=dict)
    years_available: List[int] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def requiring_review(self) -> List[str]:
        return [result.player_id for result in self.players if result.validation.requires_review]

    def get(self, player_id: str) -> PlayerPriceResult:
        for result in self.players:
            if result.player_id == player_id:
                return result
        raise KeyError(f"No valuation for player_id={player_id!r}")
