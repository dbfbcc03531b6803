"""Scenario override records merged into copies of the base dataset."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from pyauction.models import ChampionshipWindow, PlayerValuation


logger = logging.getLogger(__name__)

# (player, dynasty weight 0-1) -> composite rank
RankProvider = Callable[[PlayerValuation, float], int]


class PlayerPatch(BaseModel):
    """Fields to replace on one player; only explicitly set fields apply."""

    player_id: str = Field(..., min_length=1)
    age: Optional[int] = Field(default=None, ge=0)
    composite_rank: Optional[int] = Field(default=None, ge=1)
    current_salary: Optional[int] = Field(default=None, ge=0)
    contract_years_remaining: Optional[int] = Field(default=None, ge=0)
    franchise_id: Optional[str] = None
    excluded: bool = False

    model_config = ConfigDict(frozen=True)

    def updates(self) -> Dict[str, object]:
        return self.model_dump(exclude_unset=True, exclude={"player_id", "excluded"})


class ScenarioOverrides(BaseModel):
    franchise_tags: Dict[str, Optional[str]] = Field(default_factory=dict)
    window_overrides: Dict[str, ChampionshipWindow] = Field(default_factory=dict)
    player_patches: List[PlayerPatch] = Field(default_factory=list)
    dynasty_weight: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not (self.franchise_tags or self.window_overrides or self.player_patches) and self.dynasty_weight is None


def apply_player_patches(players: Sequence[PlayerValuation], patches: Sequence[PlayerPatch]) -> List[PlayerValuation]:
    by_id: Dict[str, PlayerPatch] = {}
    for patch in patches:
        by_id[patch.player_id] = patch
    known = {player.player_id for player in players}
    for player_id in by_id:
        if player_id not in known:
            logger.warning("Patch names unknown player %s; ignoring", player_id)

    patched: List[PlayerValuation] = []
    for player in players:
        patch = by_id.get(player.player_id)
        if patch is None:
            patched.append(player)
            continue
        if patch.excluded:
            continue
        updates = patch.updates()
        patched.append(player.model_copy(update=updates) if updates else player)
    return patched


def apply_rank_weight(
    players: Sequence[PlayerValuation],
    dynasty_weight: Optional[float],
    rank_provider: Optional[RankProvider],
) -> List[PlayerValuation]:
    """Re-rank players through the injected provider for a dynasty/redraft blend."""

    if dynasty_weight is None:
        return list(players)
    if rank_provider is None:
        raise ValueError("dynasty_weight override requires a rank provider")
    reranked = []
    for player in players:
        rank = int(rank_provider(player, dynasty_weight))
        if rank < 1:
            raise ValueError(f"rank provider returned {rank} for {player.player_id}")
        reranked.append(player.model_copy(update={"composite_rank": rank}))
    return reranked


__all__ = [
    "PlayerPatch",
    "RankProvider",
    "ScenarioOverrides",
    "apply_player_patches",
    "apply_rank_weight",
]
