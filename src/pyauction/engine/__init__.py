"""Valuation orchestration."""

from .scenarios import ScenarioJob, ScenarioRunner
from .service import AnalysisSession, BasePrice, PricingContext, build_pricing_context, price_player, value_pool

__all__ = [
    "AnalysisSession",
    "BasePrice",
    "PricingContext",
    "ScenarioJob",
    "ScenarioRunner",
    "build_pricing_context",
    "price_player",
    "value_pool",
]
