"""Franchise tag prediction and manual tag selections."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pyauction.config.league import LeagueRules
from pyauction.history import HistoricalSnapshot
from pyauction.models import PlayerValuation, TeamCapSituation
from pyauction.pricing.market import positional_scarcity


logger = logging.getLogger(__name__)

TAG_SCORE_THRESHOLD = 50.0
CANDIDATES_KEPT = 5


@dataclass(frozen=True)
class TagCandidate:
    player: PlayerValuation
    score: float
    tag_salary: int

    @property
    def likelihood(self) -> float:
        return self.score / 100.0


@dataclass(frozen=True)
class TagPrediction:
    franchise_id: str
    team_name: str = ""
    tagged_player: Optional[PlayerValuation] = None
    tag_salary: int = 0
    candidates: Tuple[TagCandidate, ...] = ()
    manual_override: bool = False

    @property
    def has_tag(self) -> bool:
        return self.tagged_player is not None


def franchise_tag_score(
    player: PlayerValuation,
    tag_salary: int,
    team: TeamCapSituation,
    *,
    scarcity: float = 0.0,
    salary_cap: int,
) -> float:
    """Tag worthiness 0-100 from rank, salary vs tag cost, scarcity, age and cap room.

    ``scarcity`` is the positional scarcity as a 0-1 fraction.
    """

    rank = player.composite_rank
    score = max(0, 100 - rank) / 100 * (1.5 if rank <= 50 else 1.0) * 40

    salary_ratio = player.current_salary / tag_salary if tag_salary > 0 else 0.0
    if salary_ratio < 0.7:
        score += 20
    elif salary_ratio > 1.2:
        score -= 10
    else:
        score += 10

    score += scarcity * 15

    if player.age <= 26:
        score += 10
    elif player.age >= 30:
        score -= 5

    flexibility = team.available_cap_space / salary_cap if salary_cap > 0 else 0.0
    if flexibility > 0.5:
        score += 15
    elif flexibility < 0.2:
        score -= 10

    return max(0.0, min(100.0, score))


def predict_franchise_tags(
    players: Sequence[PlayerValuation],
    teams: Sequence[TeamCapSituation],
    snapshot: HistoricalSnapshot,
    *,
    rules: LeagueRules,
) -> List[TagPrediction]:
    """Score every expiring contract and predict each team's tag.

    A team's best candidate is predicted tagged when its score reaches 50.
    """

    expiring: Dict[str, List[PlayerValuation]] = defaultdict(list)
    for player in players:
        if player.is_expiring:
            expiring[player.franchise_id].append(player)

    scarcity_cache: Dict[str, float] = {}

    def scarcity_for(position: str) -> float:
        if position not in scarcity_cache:
            scarcity_cache[position] = positional_scarcity(position, players, teams).scarcity_score / 100.0
        return scarcity_cache[position]

    predictions: List[TagPrediction] = []
    for team in teams:
        candidates = []
        for player in expiring.get(team.franchise_id, []):
            tag_salary = snapshot.franchise_tag_salary(player.position, rules.league_minimum)
            score = franchise_tag_score(
                player,
                tag_salary,
                team,
                scarcity=scarcity_for(player.position),
                salary_cap=rules.salary_cap,
            )
            candidates.append(TagCandidate(player=player, score=score, tag_salary=tag_salary))
        candidates.sort(key=lambda candidate: (-candidate.score, candidate.player.player_id))

        top = candidates[0] if candidates else None
        will_tag = top is not None and top.score >= TAG_SCORE_THRESHOLD
        predictions.append(
            TagPrediction(
                franchise_id=team.franchise_id,
                team_name=team.team_name,
                tagged_player=top.player if will_tag else None,
                tag_salary=top.tag_salary if will_tag else 0,
                candidates=tuple(candidates[:CANDIDATES_KEPT]),
            )
        )

    logger.info(
        "Predicted %d franchise tags across %d teams",
        sum(1 for prediction in predictions if prediction.has_tag),
        len(predictions),
    )
    return predictions


def apply_franchise_tag_override(
    predictions: Sequence[TagPrediction],
    franchise_id: str,
    player_id: Optional[str],
    players: Iterable[PlayerValuation],
    snapshot: HistoricalSnapshot,
    *,
    league_minimum: int,
) -> List[TagPrediction]:
    """Return a copy with one team's tag set manually (``None`` removes it).

    Unknown player ids leave the prediction unchanged.
    """

    lookup = {player.player_id: player for player in players}
    updated: List[TagPrediction] = []
    matched = False
    for prediction in predictions:
        if prediction.franchise_id != franchise_id:
            updated.append(prediction)
            continue
        matched = True
        if player_id is None:
            updated.append(replace(prediction, tagged_player=None, tag_salary=0, manual_override=True))
            continue
        player = lookup.get(player_id)
        if player is None:
            logger.warning("Tag override for %s names unknown player %s; ignoring", franchise_id, player_id)
            updated.append(prediction)
            continue
        updated.append(
            replace(
                prediction,
                tagged_player=player,
                tag_salary=snapshot.franchise_tag_salary(player.position, league_minimum),
                manual_override=True,
            )
        )
    if not matched:
        logger.warning("Tag override names unknown franchise %s; ignoring", franchise_id)
    return updated


def tagged_player_ids(predictions: Iterable[TagPrediction], *, include_predicted: bool = False) -> List[str]:
    return [
        prediction.tagged_player.player_id
        for prediction in predictions
        if prediction.tagged_player is not None and (prediction.manual_override or include_predicted)
    ]


def available_free_agents(
    players: Iterable[PlayerValuation],
    predictions: Iterable[TagPrediction],
    *,
    include_predicted: bool = False,
) -> List[PlayerValuation]:
    """Players left in the auction pool once tagged players are removed.

    Only manual tag selections remove players unless ``include_predicted`` is set.
    """

    tagged = set(tagged_player_ids(predictions, include_predicted=include_predicted))
    return [player for player in players if player.player_id not in tagged]


def tag_likelihoods(predictions: Iterable[TagPrediction]) -> Dict[str, float]:
    """Tag likelihood per candidate; manually settled teams carry no tag risk."""

    likelihoods: Dict[str, float] = {}
    for prediction in predictions:
        if prediction.manual_override:
            continue
        for candidate in prediction.candidates:
            likelihoods[candidate.player.player_id] = candidate.likelihood
    return likelihoods


def apply_tag_selections(
    predictions: Sequence[TagPrediction],
    selections: Mapping[str, Optional[str]],
    players: Iterable[PlayerValuation],
    snapshot: HistoricalSnapshot,
    *,
    league_minimum: int,
) -> List[TagPrediction]:
    players = list(players)
    updated = list(predictions)
    for franchise_id, player_id in sorted(selections.items()):
        updated = apply_franchise_tag_override(
            updated, franchise_id, player_id, players, snapshot, league_minimum=league_minimum
        )
    return updated


__all__ = [
    "TagCandidate",
    "TagPrediction",
    "apply_franchise_tag_override",
    "apply_tag_selections",
    "available_free_agents",
    "franchise_tag_score",
    "predict_franchise_tags",
    "tag_likelihoods",
    "tagged_player_ids",
]
