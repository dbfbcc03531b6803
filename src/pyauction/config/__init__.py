"""Configuration helpers for league rules and pricing constants."""

from .league import (
    DEFAULT_LEAGUE,
    AgeCurve,
    LeagueRules,
    get_league_rules,
    iter_league_rules,
)
from .settings import (
    default_history_years,
    default_reference_spend,
    default_strict,
    default_workers,
)

__all__ = [
    "AgeCurve",
    "DEFAULT_LEAGUE",
    "LeagueRules",
    "default_history_years",
    "default_reference_spend",
    "default_strict",
    "default_workers",
    "get_league_rules",
    "iter_league_rules",
]
