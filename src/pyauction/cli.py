"""Command-line interface for valuing an auction pool from CSV inputs."""

from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path

from pyauction.analysis import build_market_report
from pyauction.config import DEFAULT_LEAGUE, get_league_rules
from pyauction.config_loader import ScenarioProfile
from pyauction.engine import AnalysisSession
from pyauction.errors import ConstraintInfeasible, PricingValidationError
from pyauction.ingest import load_players, load_salary_history, load_teams
from pyauction.models import ChampionshipWindow, PoolValuation
from pyauction.scenario import ScenarioOverrides, apply_window_overrides


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Value a fantasy auction pool against salary history")
    parser.add_argument("salaries", type=Path, help="Path to historical salaries CSV")
    parser.add_argument("players", type=Path, help="Path to available players CSV")
    parser.add_argument("teams", type=Path, help="Path to team cap situations CSV")
    parser.add_argument("--league", default=None, help=f"League rules key (default {DEFAULT_LEAGUE})")
    parser.add_argument("--end-year", type=int, default=None, help="Last history year (default latest present)")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Exit non-zero when any player requires review or the cap is infeasible",
    )
    parser.add_argument("--workers", type=int, default=None, help="Worker processes for per-player pricing")
    parser.add_argument(
        "--reference-spend",
        type=int,
        default=None,
        help="Expected league auction spend used for bounded inflation/deflation",
    )
    parser.add_argument(
        "--tag",
        action="append",
        default=[],
        help="Franchise tag selection FRANCHISE=PLAYER_ID (use FRANCHISE= for no tag)",
    )
    parser.add_argument(
        "--window",
        action="append",
        default=[],
        help="Championship window override FRANCHISE=contending|neutral|rebuilding",
    )
    parser.add_argument("--load-scenario", type=Path, default=None, help="Load scenario overrides JSON")
    parser.add_argument("--save-scenario", type=Path, default=None, help="Save scenario overrides JSON")
    parser.add_argument("--output", type=Path, default=Path("valuations.csv"), help="Output CSV path")
    parser.add_argument("--report", type=Path, default=None, help="Optional path to write market report JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pricing details")
    return parser.parse_args(argv)


def _parse_assignments(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _write_valuations(path: Path, valuation: PoolValuation) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([
            "player_id",
            "name",
            "position",
            "age",
            "composite_rank",
            "position_rank",
            "intrinsic_value",
            "predicted_market_price",
            "value_gap_pct",
            "value_band",
            "one_year",
            "two_year",
            "three_year",
            "four_year",
            "five_year",
            "recommended_years",
            "confidence",
            "requires_review",
            "issues",
        ])
        for result in valuation.players:
            player = result.player
            writer.writerow([
                player.player_id,
                player.name,
                player.position,
                player.age,
                player.composite_rank,
                result.position_rank,
                result.intrinsic_value,
                result.predicted_market_price,
                f"{result.value_gap_pct:.4f}",
                result.value_band.value,
                *result.contract.as_list(),
                result.contract.recommended.years,
                result.validation.confidence.value,
                result.validation.requires_review,
                " ".join(reason.name for reason in result.validation.reasons()),
            ])


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    profile = ScenarioProfile.load(args.load_scenario) if args.load_scenario else ScenarioProfile()
    tags = {
        franchise: player_id or None
        for franchise, player_id in _parse_assignments(args.tag).items()
    }
    windows = {
        franchise: ChampionshipWindow(window.lower())
        for franchise, window in _parse_assignments(args.window).items()
    }
    overrides = ScenarioOverrides(
        franchise_tags={**profile.overrides.franchise_tags, **tags},
        window_overrides={**profile.overrides.window_overrides, **windows},
        player_patches=profile.overrides.player_patches,
        dynasty_weight=profile.overrides.dynasty_weight,
    )
    league = args.league or profile.league or DEFAULT_LEAGUE
    reference_spend = args.reference_spend if args.reference_spend is not None else profile.reference_spend

    if args.save_scenario:
        ScenarioProfile(overrides=overrides, league=league, reference_spend=reference_spend).save(args.save_scenario)
        print(f"Saved scenario profile to {args.save_scenario}")

    rules = get_league_rules(league)
    records = load_salary_history(args.salaries)
    players = load_players(args.players)
    teams = load_teams(args.teams)
    session = AnalysisSession(records, players, teams, rules=rules, end_year=args.end_year)
    print(
        f"Loaded {len(records)} salary records ({session.snapshot.years_available}/{session.snapshot.window_years} years), "
        f"{len(players)} players, {len(teams)} teams"
    )

    exit_code = 0
    try:
        valuation = session.value(
            overrides,
            strict=args.strict,
            workers=args.workers,
            reference_spend=reference_spend,
        )
    except PricingValidationError as exc:
        valuation = exc.valuation
        print(f"Strict mode: {exc.message}")
        exit_code = 1
    except ConstraintInfeasible as exc:
        print(f"Strict mode: {exc.message}")
        return 2

    _write_valuations(args.output, valuation)
    budget = valuation.budget
    print(
        f"Valued {len(valuation.players)} players: spend ${budget.total_after:,} of capacity ${budget.capacity:,} "
        f"(multiplier {budget.multiplier:.3f})"
    )
    if valuation.tagged_player_ids:
        print(f"Tagged players removed from pool: {', '.join(valuation.tagged_player_ids)}")
    for warning in valuation.league_warnings:
        print(f"League warning: {warning.message}")
    review = valuation.requiring_review()
    if review:
        preview = ", ".join(review[:5])
        more = len(review) - 5
        suffix = f", +{more} more" if more > 0 else ""
        print(f"Players requiring review: {preview}{suffix}")
    print(f"Wrote valuations to {args.output}")

    if args.report:
        report = build_market_report(valuation, apply_window_overrides(teams, overrides.window_overrides))
        args.report.write_text(json.dumps(report.as_dict(), indent=2), encoding="utf-8")
        print(f"Wrote market report to {args.report}")
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
