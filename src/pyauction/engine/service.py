"""Two-phase pool valuation: per-player base pricing, then budget, contracts and validation."""

from __future__ import annotations

import logging
import multiprocessing as mp
import queue as queue_module
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from pyauction.config import default_history_years, default_reference_spend, default_strict, default_workers
from pyauction.config.league import LeagueRules, get_league_rules
from pyauction.errors import ComputationCanceled, PricingValidationError
from pyauction.history import HistoricalSnapshot, build_snapshot
from pyauction.models import (
    CurveKind,
    HistoricalSalaryRecord,
    PlayerPriceResult,
    PlayerValuation,
    PoolValuation,
    PriceFactors,
    TeamCapSituation,
)
from pyauction.pricing import (
    BudgetOutcome,
    IntrinsicValue,
    MarketContext,
    MarketPrice,
    ResolvedCurve,
    apply_budget_constraint,
    best_player_by_position,
    build_market_context,
    calculate_intrinsic_value,
    classify_value_gap,
    confidence_range,
    generate_contract_pricing,
    league_capacity,
    minimum_roster_spend,
    position_ranks,
    predict_market_price,
    resolve_curve,
    select_curves,
    value_gap,
)
from pyauction.scenario import (
    RankProvider,
    ScenarioOverrides,
    apply_player_patches,
    apply_rank_weight,
    apply_tag_selections,
    apply_window_overrides,
    available_free_agents,
    predict_franchise_tags,
    tag_likelihoods,
    tagged_player_ids,
)
from pyauction.validation import merge_results, validate_contract_ages, validate_price


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

CancelCheck = Callable[[], bool]

_QUEUE_POLL_SECONDS = 0.1


@dataclass(frozen=True)
class PricingContext:
    """Everything phase 1 needs per player; picklable for worker processes."""

    snapshot: HistoricalSnapshot
    rules: LeagueRules
    curves: Dict[str, ResolvedCurve]
    ranks: Dict[str, int]
    market: MarketContext


@dataclass(frozen=True)
class BasePrice:
    player: PlayerValuation
    position_rank: int
    intrinsic: IntrinsicValue
    market: MarketPrice
    curve_kind: CurveKind
    data_fallback: bool
    tag_likelihood: float


class PhaseOneJobConfig:
    def __init__(self, job_id: int, players: List[PlayerValuation], context: PricingContext):
        self.job_id = job_id
        self.players = players
        self.context = context


class PhaseOneJobResult:
    def __init__(self, job_id: int, prices: List[BasePrice]):
        self.job_id = job_id
        self.prices = prices


def build_pricing_context(
    players: Sequence[PlayerValuation],
    teams: Sequence[TeamCapSituation],
    snapshot: HistoricalSnapshot,
    rules: LeagueRules,
    *,
    likelihoods: Optional[Dict[str, float]] = None,
) -> PricingContext:
    best = best_player_by_position(players)
    selection = select_curves(rules.positions, best)
    curves = {
        position: resolve_curve(snapshot, position, kind, league_minimum=rules.league_minimum)
        for position, kind in selection.items()
    }
    return PricingContext(
        snapshot=snapshot,
        rules=rules,
        curves=curves,
        ranks=position_ranks(players),
        market=build_market_context(
            players,
            teams,
            league_minimum=rules.league_minimum,
            tag_likelihoods=likelihoods,
        ),
    )


def price_player(player: PlayerValuation, context: PricingContext) -> BasePrice:
    resolved = context.curves.get(player.position)
    if resolved is None:
        resolved = resolve_curve(context.snapshot, player.position, CurveKind.MIN, league_minimum=context.rules.league_minimum)
    rank = context.ranks[player.player_id]
    intrinsic = calculate_intrinsic_value(
        curve=resolved.curve,
        position_rank=rank,
        overall_rank=player.composite_rank,
        position_max=context.snapshot.position_max(player.position),
        league_minimum=context.rules.league_minimum,
    )
    market = predict_market_price(intrinsic.value, player=player, position_rank=rank, context=context.market)
    return BasePrice(
        player=player,
        position_rank=rank,
        intrinsic=intrinsic,
        market=market,
        curve_kind=resolved.requested,
        data_fallback=resolved.fallback,
        tag_likelihood=context.market.tag_likelihood(player.player_id),
    )


def _require_unique_ids(players: Sequence[PlayerValuation], teams: Sequence[TeamCapSituation]) -> None:
    for label, ids in (
        ("player_id", [player.player_id for player in players]),
        ("franchise_id", [team.franchise_id for team in teams]),
    ):
        seen = set()
        for value in ids:
            if value in seen:
                raise ValueError(f"duplicate {label} {value!r}")
            seen.add(value)


def _check_canceled(cancel_check: Optional[CancelCheck]) -> None:
    if cancel_check is not None and cancel_check():
        raise ComputationCanceled("Valuation superseded by a newer scenario")


def _price_serial(
    players: Sequence[PlayerValuation],
    context: PricingContext,
    cancel_check: Optional[CancelCheck],
) -> List[BasePrice]:
    prices = []
    for player in players:
        _check_canceled(cancel_check)
        prices.append(price_player(player, context))
    return prices


def _run_phase_one_job(config: PhaseOneJobConfig) -> PhaseOneJobResult:
    return PhaseOneJobResult(config.job_id, [price_player(player, config.context) for player in config.players])


def _phase_one_worker(config: PhaseOneJobConfig, queue: mp.Queue) -> None:
    try:
        queue.put(_run_phase_one_job(config))
    except Exception as exc:  # pragma: no cover - worker errors bubble to parent
        queue.put(exc)


def _price_parallel(
    players: Sequence[PlayerValuation],
    context: PricingContext,
    workers: int,
    cancel_check: Optional[CancelCheck],
) -> List[BasePrice]:
    batches = [list(players[index::workers]) for index in range(workers)]
    batches = [batch for batch in batches if batch]

    ctx = mp.get_context("spawn")
    queue: mp.Queue = ctx.Queue()
    processes: dict[int, mp.Process] = {}
    collected: Dict[str, BasePrice] = {}

    try:
        for job_id, batch in enumerate(batches):
            proc = ctx.Process(target=_phase_one_worker, args=(PhaseOneJobConfig(job_id, batch, context), queue))
            proc.start()
            processes[job_id] = proc
            logger.info("Dispatched pricing batch %s with %s players", job_id, len(batch))

        while processes:
            _check_canceled(cancel_check)
            try:
                outcome = queue.get(timeout=_QUEUE_POLL_SECONDS)
            except queue_module.Empty:
                continue
            if isinstance(outcome, Exception):
                raise outcome
            proc = processes.pop(outcome.job_id, None)
            if proc is not None:
                proc.join()
            for price in outcome.prices:
                collected[price.player.player_id] = price
            logger.info("Pricing batch %s completed (%s/%s players)", outcome.job_id, len(collected), len(players))
    finally:
        for proc in processes.values():
            if proc.is_alive():
                proc.terminate()
            proc.join()

    return [collected[player.player_id] for player in players]


def _finalize(base: BasePrice, outcome: BudgetOutcome, context: PricingContext) -> PlayerPriceResult:
    player = base.player
    final_price = outcome.prices[player.player_id]
    intrinsic = int(round(base.intrinsic.value))
    multipliers = base.market.multipliers.model_copy(
        update={"budget": outcome.multiplier_for(player.player_id, base.market.price)}
    )
    contract = generate_contract_pricing(player, final_price, context.rules)
    validation = merge_results(
        validate_price(
            player,
            final_price,
            snapshot=context.snapshot,
            position_rank=base.position_rank,
            data_fallback=base.data_fallback,
        ),
        validate_price(
            player,
            contract.recommended.price,
            snapshot=context.snapshot,
            position_rank=base.position_rank,
            contract_years=contract.recommended.years,
        ),
        validate_contract_ages(player, contract.options, snapshot=context.snapshot),
    )
    gap = value_gap(final_price, intrinsic)
    low, high = confidence_range(final_price)
    return PlayerPriceResult(
        player=player,
        position_rank=base.position_rank,
        overall_tier=base.intrinsic.overall_tier,
        factors=PriceFactors(
            intrinsic_value=intrinsic,
            predicted_market_price=final_price,
            unconstrained_market_price=int(round(base.market.price)),
            applied_multipliers=multipliers,
            tier_floor_applied=base.intrinsic.floor_applied,
            tier_floor=int(round(base.intrinsic.tier_floor)),
            curve_kind=base.curve_kind,
            curve_price=base.intrinsic.curve_price,
            elite_premium=base.intrinsic.premium,
            depth_bucket=base.market.bucket,
            data_fallback=base.data_fallback,
        ),
        value_gap_pct=gap,
        value_band=classify_value_gap(gap),
        price_low=low,
        price_high=high,
        tag_likelihood=base.tag_likelihood,
        contract=contract,
        validation=validation,
    )


def value_pool(
    players: Sequence[PlayerValuation],
    teams: Sequence[TeamCapSituation],
    snapshot: HistoricalSnapshot,
    *,
    rules: Optional[LeagueRules] = None,
    overrides: Optional[ScenarioOverrides] = None,
    strict: Optional[bool] = None,
    workers: Optional[int] = None,
    reference_spend: Optional[int] = None,
    cancel_check: Optional[CancelCheck] = None,
    rank_provider: Optional[RankProvider] = None,
) -> PoolValuation:
    """Price every available player against one historical snapshot.

    Inputs are never mutated; overrides are merged into copies. Every player
    receives a price. With ``strict`` set, review-required players raise
    :class:`PricingValidationError` carrying the complete valuation.
    """

    rules = rules or get_league_rules()
    overrides = overrides or ScenarioOverrides()
    strict = default_strict() if strict is None else strict
    workers = max(1, default_workers() if workers is None else workers)
    if reference_spend is None:
        reference_spend = default_reference_spend()

    _require_unique_ids(players, teams)
    run_start = time.perf_counter()
    candidates = apply_player_patches(players, overrides.player_patches)
    candidates = apply_rank_weight(candidates, overrides.dynasty_weight, rank_provider)
    teams = apply_window_overrides(teams, overrides.window_overrides)

    predictions = predict_franchise_tags(candidates, teams, snapshot, rules=rules)
    predictions = apply_tag_selections(
        predictions, overrides.franchise_tags, candidates, snapshot, league_minimum=rules.league_minimum
    )
    pool = sorted(available_free_agents(candidates, predictions), key=lambda p: (p.composite_rank, p.player_id))
    tagged = tagged_player_ids(predictions)

    context = build_pricing_context(pool, teams, snapshot, rules, likelihoods=tag_likelihoods(predictions))
    _check_canceled(cancel_check)

    if workers > 1 and len(pool) > workers:
        base_prices = _price_parallel(pool, context, workers, cancel_check)
    else:
        base_prices = _price_serial(pool, context, cancel_check)
    logger.info("Phase 1 priced %s players in %.2fs (workers=%s)", len(base_prices), time.perf_counter() - run_start, workers)

    outcome = apply_budget_constraint(
        {price.player.player_id: price.market.price for price in base_prices},
        capacity=league_capacity(teams),
        league_minimum=rules.league_minimum,
        minimum_spend=minimum_roster_spend(teams, rules.league_minimum),
        reference_spend=reference_spend,
        strict=strict,
    )

    results = []
    for base in base_prices:
        _check_canceled(cancel_check)
        results.append(_finalize(base, outcome, context))

    valuation = PoolValuation(
        players=results,
        budget=outcome.summary,
        league_warnings=list(outcome.warnings),
        tagged_player_ids=tagged,
        curve_selection={position: resolved.requested for position, resolved in context.curves.items()},
        years_available=list(snapshot.years),
    )
    review = valuation.requiring_review()
    logger.info(
        "Valued %s players in %.2fs: spend %s of capacity %s (multiplier %.3f), %s require review",
        len(results),
        time.perf_counter() - run_start,
        outcome.summary.total_after,
        outcome.summary.capacity,
        outcome.summary.multiplier,
        len(review),
    )
    if strict and review:
        raise PricingValidationError(f"{len(review)} players require review", valuation, review)
    return valuation


class AnalysisSession:
    """One historical snapshot plus a base dataset, re-valued per scenario."""

    def __init__(
        self,
        records: Sequence[HistoricalSalaryRecord],
        players: Sequence[PlayerValuation] = (),
        teams: Sequence[TeamCapSituation] = (),
        *,
        rules: Optional[LeagueRules] = None,
        end_year: Optional[int] = None,
        window_years: Optional[int] = None,
        rank_provider: Optional[RankProvider] = None,
    ):
        self.session_id = uuid.uuid4().hex
        self.rules = rules or get_league_rules()
        window = window_years or default_history_years(self.rules.history_years)
        self.snapshot = build_snapshot(records, end_year=end_year, window_years=window)
        self.players = tuple(players)
        self.teams = tuple(teams)
        _require_unique_ids(self.players, self.teams)
        self.rank_provider = rank_provider

    def value(
        self,
        overrides: Optional[ScenarioOverrides] = None,
        *,
        players: Optional[Sequence[PlayerValuation]] = None,
        teams: Optional[Sequence[TeamCapSituation]] = None,
        strict: Optional[bool] = None,
        workers: Optional[int] = None,
        reference_spend: Optional[int] = None,
        cancel_check: Optional[CancelCheck] = None,
    ) -> PoolValuation:
        return value_pool(
            self.players if players is None else players,
            self.teams if teams is None else teams,
            self.snapshot,
            rules=self.rules,
            overrides=overrides,
            strict=strict,
            workers=workers,
            reference_spend=reference_spend,
            cancel_check=cancel_check,
            rank_provider=self.rank_provider,
        )


__all__ = [
    "AnalysisSession",
    "BasePrice",
    "PricingContext",
    "build_pricing_context",
    "price_player",
    "value_pool",
]
