"""Load salary history, player and team CSVs into canonical records."""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

from pydantic import ValidationError

from pyauction.models import (
    ChampionshipWindow,
    HistoricalSalaryRecord,
    NeedLevel,
    PlayerValuation,
    TeamCapSituation,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

POSITION_ALIASES: Mapping[str, str] = {
    "DST": "DEF",
    "D/ST": "DEF",
    "D": "DEF",
    "DEF": "DEF",
    "K": "PK",
    "PK": "PK",
}

DEFAULT_SALARY_MAPPING = {
    "player_id": "player_id",
    "name": "name",
    "position": "position",
    "age": "age",
    "salary": "salary",
    "year": "year",
}

DEFAULT_PLAYER_MAPPING = {
    "player_id": "player_id",
    "name": "name",
    "position": "position",
    "age": "age",
    "composite_rank": "composite_rank",
    "current_salary": "current_salary",
    "contract_years_remaining": "contract_years_remaining",
    "franchise_id": "franchise_id",
}

DEFAULT_TEAM_MAPPING = {
    "franchise_id": "franchise_id",
    "team_name": "team_name",
    "available_cap_space": "available_cap_space",
    "roster_spots_to_fill": "roster_spots_to_fill",
    "positional_needs": "positional_needs",
    "championship_window": "championship_window",
}


def _extract(row: Mapping[str, str], mapping: Mapping[str, str], key: str) -> Optional[str]:
    """Column value for ``key``; ``"First|Last"`` specs join several columns."""

    spec = mapping.get(key)
    if spec is None:
        return None
    if "|" in spec:
        parts = [row.get(column.strip(), "").strip() for column in spec.split("|") if row.get(column.strip())]
        return " ".join(parts) if parts else None
    value = row.get(spec)
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_position(raw: str) -> str:
    token = raw.strip().upper()
    return POSITION_ALIASES.get(token, token)


def _parse_money(raw: Optional[str], *, field: str, default: int | None = None) -> int:
    """Whole dollars from text such as ``$1,250,000`` or ``1.25M``."""

    if raw is None:
        if default is not None:
            return default
        raise ValueError(f"{field} is required")
    text = raw.strip().upper().replace(",", "").replace("$", "")
    multiplier = 1
    if text.endswith("M"):
        multiplier, text = 1_000_000, text[:-1]
    elif text.endswith("K"):
        multiplier, text = 1_000, text[:-1]
    try:
        return int(round(float(text) * multiplier))
    except ValueError:
        digits = re.sub(r"[^0-9]", "", text)
        if not digits:
            raise ValueError(f"{field} '{raw}' has no digits") from None
        return int(digits) * multiplier


def _parse_int(raw: Optional[str], *, field: str, default: int | None = None) -> int:
    if raw is None:
        if default is not None:
            return default
        raise ValueError(f"{field} is required")
    try:
        return int(float(raw))
    except ValueError:
        raise ValueError(f"{field} '{raw}' is not numeric") from None


def parse_needs(raw: Optional[str]) -> Dict[str, NeedLevel]:
    """Parse ``"QB:critical|WR:moderate"`` into a position -> need map."""

    needs: Dict[str, NeedLevel] = {}
    if not raw:
        return needs
    for chunk in re.split(r"[|;]", raw):
        if not chunk.strip():
            continue
        position, _, level = chunk.partition(":")
        if not level:
            raise ValueError(f"need '{chunk}' must look like POSITION:level")
        try:
            needs[normalize_position(position)] = NeedLevel(level.strip().lower())
        except ValueError:
            raise ValueError(f"unknown need level '{level.strip()}' for {position.strip()}") from None
    return needs


def salary_record_from_row(row: Mapping[str, str], mapping: Mapping[str, str] = DEFAULT_SALARY_MAPPING) -> HistoricalSalaryRecord:
    return HistoricalSalaryRecord(
        player_id=_extract(row, mapping, "player_id") or "",
        name=_extract(row, mapping, "name") or "",
        position=normalize_position(_extract(row, mapping, "position") or ""),
        age=_parse_int(_extract(row, mapping, "age"), field="age"),
        salary=_parse_money(_extract(row, mapping, "salary"), field="salary"),
        year=_parse_int(_extract(row, mapping, "year"), field="year"),
    )


def player_from_row(row: Mapping[str, str], mapping: Mapping[str, str] = DEFAULT_PLAYER_MAPPING) -> PlayerValuation:
    return PlayerValuation(
        player_id=_extract(row, mapping, "player_id") or "",
        name=_extract(row, mapping, "name") or "",
        position=normalize_position(_extract(row, mapping, "position") or ""),
        age=_parse_int(_extract(row, mapping, "age"), field="age"),
        composite_rank=_parse_int(_extract(row, mapping, "composite_rank"), field="composite_rank"),
        current_salary=_parse_money(_extract(row, mapping, "current_salary"), field="current_salary", default=0),
        contract_years_remaining=_parse_int(
            _extract(row, mapping, "contract_years_remaining"), field="contract_years_remaining", default=0
        ),
        franchise_id=_extract(row, mapping, "franchise_id"),
    )


def team_from_row(row: Mapping[str, str], mapping: Mapping[str, str] = DEFAULT_TEAM_MAPPING) -> TeamCapSituation:
    window = _extract(row, mapping, "championship_window")
    return TeamCapSituation(
        franchise_id=_extract(row, mapping, "franchise_id") or "",
        team_name=_extract(row, mapping, "team_name") or "",
        available_cap_space=_parse_money(_extract(row, mapping, "available_cap_space"), field="available_cap_space"),
        roster_spots_to_fill=_parse_int(_extract(row, mapping, "roster_spots_to_fill"), field="roster_spots_to_fill", default=0),
        positional_needs=parse_needs(_extract(row, mapping, "positional_needs")),
        championship_window=ChampionshipWindow(window.lower()) if window else ChampionshipWindow.NEUTRAL,
    )


def _load_rows(rows: Iterable[Mapping[str, str]], parse: Callable[[Mapping[str, str]], T], *, source: str) -> List[T]:
    records: List[T] = []
    for line, row in enumerate(rows, start=2):
        if not any((value or "").strip() for value in row.values()):
            continue
        try:
            records.append(parse(row))
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise ValueError(f"{source} line {line}: {location} {first['msg']}") from exc
        except ValueError as exc:
            raise ValueError(f"{source} line {line}: {exc}") from exc
    logger.info("Loaded %d rows from %s", len(records), source)
    return records


def _read_csv(path: Path) -> List[Dict[str, str]]:
    with path.open(newline="", encoding="utf-8-sig") as f:
        return list(csv.DictReader(f))


def load_salary_history(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[HistoricalSalaryRecord]:
    mapping = mapping or DEFAULT_SALARY_MAPPING
    return _load_rows(_read_csv(path), lambda row: salary_record_from_row(row, mapping), source=path.name)


def load_players(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[PlayerValuation]:
    mapping = mapping or DEFAULT_PLAYER_MAPPING
    players = _load_rows(_read_csv(path), lambda row: player_from_row(row, mapping), source=path.name)
    _reject_duplicates((player.player_id for player in players), kind="player_id", source=path.name)
    return players


def load_teams(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[TeamCapSituation]:
    mapping = mapping or DEFAULT_TEAM_MAPPING
    teams = _load_rows(_read_csv(path), lambda row: team_from_row(row, mapping), source=path.name)
    _reject_duplicates((team.franchise_id for team in teams), kind="franchise_id", source=path.name)
    return teams


def parse_rows(kind: str, rows: Sequence[Mapping[str, str]]) -> List:
    """Parse already-read rows (e.g. from an upload) by record kind."""

    parsers = {
        "salaries": salary_record_from_row,
        "players": player_from_row,
        "teams": team_from_row,
    }
    if kind not in parsers:
        raise ValueError(f"unknown row kind '{kind}'")
    return _load_rows(rows, parsers[kind], source=kind)


def _reject_duplicates(ids: Iterable[str], *, kind: str, source: str) -> None:
    seen = set()
    for value in ids:
        if value in seen:
            raise ValueError(f"{source}: duplicate {kind} '{value}'")
        seen.add(value)


__all__ = [
    "DEFAULT_PLAYER_MAPPING",
    "DEFAULT_SALARY_MAPPING",
    "DEFAULT_TEAM_MAPPING",
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
