"""Championship window overrides and the contract strategy each window implies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Sequence, Tuple

from pyauction.models import ChampionshipWindow, TeamCapSituation


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractStrategy:
    window: ChampionshipWindow
    preferred_length: int
    target_age: Tuple[int, int]


_STRATEGIES: Mapping[ChampionshipWindow, ContractStrategy] = {
    ChampionshipWindow.CONTENDING: ContractStrategy(ChampionshipWindow.CONTENDING, 2, (26, 30)),
    ChampionshipWindow.NEUTRAL: ContractStrategy(ChampionshipWindow.NEUTRAL, 3, (24, 28)),
    ChampionshipWindow.REBUILDING: ContractStrategy(ChampionshipWindow.REBUILDING, 4, (22, 25)),
}


def contract_strategy(window: ChampionshipWindow) -> ContractStrategy:
    return _STRATEGIES[ChampionshipWindow(window)]


def override_window(team: TeamCapSituation, window: ChampionshipWindow) -> TeamCapSituation:
    """Copy of ``team`` with a manual window; the first detected window is retained."""

    original = team.original_window if team.window_overridden else team.championship_window
    return team.model_copy(
        update={
            "championship_window": ChampionshipWindow(window),
            "window_overridden": True,
            "original_window": original,
        }
    )


def apply_window_overrides(
    teams: Sequence[TeamCapSituation],
    overrides: Mapping[str, ChampionshipWindow],
) -> List[TeamCapSituation]:
    known = {team.franchise_id for team in teams}
    for franchise_id in overrides:
        if franchise_id not in known:
            logger.warning("Window override names unknown franchise %s; ignoring", franchise_id)
    return [
        override_window(team, overrides[team.franchise_id]) if team.franchise_id in overrides else team
        for team in teams
    ]


__all__ = [
    "ContractStrategy",
    "apply_window_overrides",
    "contract_strategy",
    "override_window",
]
