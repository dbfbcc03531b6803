"""What-if inputs: franchise tags, championship windows and player patches."""

from .overrides import PlayerPatch, RankProvider, ScenarioOverrides, apply_player_patches, apply_rank_weight
from .tags import (
    TagCandidate,
    TagPrediction,
    apply_franchise_tag_override,
    apply_tag_selections,
    available_free_agents,
    franchise_tag_score,
    predict_franchise_tags,
    tag_likelihoods,
    tagged_player_ids,
)
from .windows import ContractStrategy, apply_window_overrides, contract_strategy, override_window

__all__ = [
    "ContractStrategy",
    "PlayerPatch",
    "RankProvider",
    "ScenarioOverrides",
    "TagCandidate",
    "TagPrediction",
    "apply_franchise_tag_override",
    "apply_player_patches",
    "apply_rank_weight",
    "apply_tag_selections",
    "apply_window_overrides",
    "available_free_agents",
    "contract_strategy",
    "franchise_tag_score",
    "override_window",
    "predict_franchise_tags",
    "tag_likelihoods",
    "tagged_player_ids",
]
