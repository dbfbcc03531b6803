"""Input adapters for salary history, players and team cap situations."""

from .loaders import (
    load_players,
    load_salary_history,
    load_teams,
    normalize_position,
    parse_needs,
    parse_rows,
    player_from_row,
    salary_record_from_row,
    team_from_row,
)

__all__ = [
    "load_players",
    "load_salary_history",
    "load_teams",
    "normalize_position",
    "parse_needs",
    "parse_rows",
    "player_from_row",
    "salary_record_from_row",
    "team_from_row",
]
