"""Reporting helpers for finished valuations."""

from .report import MarketReport, PositionMarketSummary, TeamStrategySummary, build_market_report

__all__ = ["MarketReport", "PositionMarketSummary", "TeamStrategySummary", "build_market_report"]
