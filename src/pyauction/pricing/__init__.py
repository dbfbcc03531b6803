"""Per-player pricing stages and the pool-wide budget constraint."""

from .budget import BudgetOutcome, apply_budget_constraint, league_capacity, minimum_roster_spend
from .contracts import contract_prices, generate_contract_pricing, recommended_length
from .intrinsic import (
    IntrinsicValue,
    ResolvedCurve,
    calculate_intrinsic_value,
    elite_rank_premium,
    resolve_curve,
    tier_floor,
)
from .market import (
    MarketContext,
    MarketPrice,
    PositionalScarcity,
    build_market_context,
    classify_value_gap,
    confidence_range,
    positional_scarcity,
    predict_market_price,
    value_gap,
)
from .tiers import (
    best_player_by_position,
    classify_overall_tier,
    classify_position_tier,
    position_ranks,
    select_curve,
    select_curves,
)

__all__ = [
    "BudgetOutcome",
    "IntrinsicValue",
    "MarketContext",
    "MarketPrice",
    "PositionalScarcity",
    "ResolvedCurve",
    "apply_budget_constraint",
    "best_player_by_position",
    "build_market_context",
    "calculate_intrinsic_value",
    "classify_overall_tier",
    "classify_position_tier",
    "classify_value_gap",
    "confidence_range",
    "contract_prices",
    "elite_rank_premium",
    "generate_contract_pricing",
    "league_capacity",
    "minimum_roster_spend",
    "position_ranks",
    "positional_scarcity",
    "predict_market_price",
    "recommended_length",
    "resolve_curve",
    "select_curve",
    "select_curves",
    "tier_floor",
    "value_gap",
]
