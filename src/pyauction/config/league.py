"""League rules and the fixed pricing thresholds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple

from pyauction.models.enums import CurveKind, Tier


@dataclass(frozen=True)
class AgeCurve:
    prime_end: int
    decline_end: int


@dataclass(frozen=True)
class LeagueRules:
    key: str
    salary_cap: int
    league_minimum: int
    teams: int
    positions: Tuple[str, ...]
    history_years: int
    annual_escalation: float
    age_curves: Mapping[str, AgeCurve]

    def age_curve(self, position: str) -> AgeCurve | None:
        return self.age_curves.get(position.upper())


# Overall-rank tier cutoffs (inclusive upper bounds); anything beyond is depth.
OVERALL_TIER_LIMITS: Tuple[Tuple[Tier, int], ...] = (
    (Tier.ELITE, 30),
    (Tier.STAR, 105),
    (Tier.STARTER, 149),
)

# Within-position tier cutoffs used by the historical aggregator.
POSITION_TIER_LIMITS: Tuple[Tuple[Tier, int], ...] = (
    (Tier.ELITE, 5),
    (Tier.STAR, 12),
    (Tier.STARTER, 24),
)

# Best available player's overall tier -> curve governing the whole position.
CURVE_BY_TIER: Mapping[Tier, CurveKind] = {
    Tier.ELITE: CurveKind.MAX,
    Tier.STAR: CurveKind.AVG,
    Tier.STARTER: CurveKind.MIN,
    Tier.DEPTH: CurveKind.MIN,
}

FLOOR_FRACTIONS: Mapping[Tier, float] = {
    Tier.ELITE: 0.85,
    Tier.STAR: 0.60,
    Tier.STARTER: 0.30,
    Tier.DEPTH: 0.0,
}

ELITE_PREMIUM_MAX = 0.05
ELITE_PREMIUM_RANK_CUTOFF = 5

# Annual price relative to the three-year equilibrium price.
CONTRACT_BAND: Mapping[int, float] = {
    1: 1.20,
    2: 1.10,
    3: 1.00,
    4: 0.90,
    5: 0.80,
}

TIER_MAX_ERROR_RATIO = 0.25
TIER_MAX_WARNING_RATIO = 0.10
AGE_PRECEDENT_TOLERANCE = 1.25

CONFIDENCE_RANGE = 0.25
RANK_SLOTS_TRACKED = 50


_LEAGUE_RULES: Dict[str, LeagueRules] = {
    "THELEAGUE": LeagueRules(
        key="THELEAGUE",
        salary_cap=45_000_000,
        league_minimum=425_000,
        teams=16,
        positions=("QB", "RB", "WR", "TE", "PK", "DEF"),
        history_years=6,
        annual_escalation=0.10,
        age_curves={
            "QB": AgeCurve(prime_end=33, decline_end=36),
            "RB": AgeCurve(prime_end=28, decline_end=30),
            "WR": AgeCurve(prime_end=30, decline_end=32),
            "TE": AgeCurve(prime_end=30, decline_end=32),
            "PK": AgeCurve(prime_end=35, decline_end=38),
        },
    ),
    "AFL": LeagueRules(
        key="AFL",
        salary_cap=45_000_000,
        league_minimum=425_000,
        teams=12,
        positions=("QB", "RB", "WR", "TE", "PK", "DEF"),
        history_years=6,
        annual_escalation=0.10,
        age_curves={
            "QB": AgeCurve(prime_end=33, decline_end=36),
            "RB": AgeCurve(prime_end=28, decline_end=30),
            "WR": AgeCurve(prime_end=30, decline_end=32),
            "TE": AgeCurve(prime_end=30, decline_end=32),
            "PK": AgeCurve(prime_end=35, decline_end=38),
        },
    ),
}

DEFAULT_LEAGUE = "THELEAGUE"


def iter_league_rules() -> Iterable[LeagueRules]:
    """Return an iterator of all configured leagues."""

    return _LEAGUE_RULES.values()


def get_league_rules(key: str = DEFAULT_LEAGUE) -> LeagueRules:
    """Fetch rules for a league key, raising KeyError if missing."""

    normalized = key.upper()
    if normalized not in _LEAGUE_RULES:
        raise KeyError(f"No league rules configured for key={key!r}")
    return _LEAGUE_RULES[normalized]
