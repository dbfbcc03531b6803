from pathlib import Path

import pytest

from pyauction.ingest import (
    load_players,
    load_salary_history,
    load_teams,
    normalize_position,
    parse_needs,
    parse_rows,
    player_from_row,
)
from pyauction.models import ChampionshipWindow, NeedLevel


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_position_aliases():
    assert normalize_position("dst") == "DEF"
    assert normalize_position("D/ST") == "DEF"
    assert normalize_position(" k ") == "PK"
    assert normalize_position("wr") == "WR"


def test_parse_needs():
    assert parse_needs("QB:critical|wr:Moderate; DST:low") == {
        "QB": NeedLevel.CRITICAL,
        "WR": NeedLevel.MODERATE,
        "DEF": NeedLevel.LOW,
    }
    assert parse_needs("") == {}
    with pytest.raises(ValueError):
        parse_needs("QB")
    with pytest.raises(ValueError):
        parse_needs("QB:urgent")


def test_load_salary_history_parses_money(tmp_path: Path):
    path = _write(
        tmp_path / "salaries.csv",
        "player_id,name,position,age,salary,year\n"
        's1,Joe Arm,qb,27,"$10,800,000",2024\n'
        "s2,Kick Er,K,31,1.25M,2023\n"
        ",,,,,\n"
        "s3,Line Backer,DST,0,850K,2023\n",
    )
    records = load_salary_history(path)

    assert [record.salary for record in records] == [10_800_000, 1_250_000, 850_000]
    assert [record.position for record in records] == ["QB", "PK", "DEF"]
    assert records[1].year == 2023


def test_load_players_with_column_mapping(tmp_path: Path):
    path = _write(
        tmp_path / "players.csv",
        "Id,First,Last,Pos,Age,Rank,Salary,Years,Team\n"
        'p1,Ace,Receiver,WR,25,4,"$2,500,000",1,F1\n'
        "p2,Bo,Back,RB,23,17,,,\n",
    )
    mapping = {
        "player_id": "Id",
        "name": "First|Last",
        "position": "Pos",
        "age": "Age",
        "composite_rank": "Rank",
        "current_salary": "Salary",
        "contract_years_remaining": "Years",
        "franchise_id": "Team",
    }
    players = load_players(path, mapping=mapping)

    assert players[0].name == "Ace Receiver"
    assert players[0].current_salary == 2_500_000
    assert players[0].is_expiring
    assert players[1].current_salary == 0
    assert players[1].franchise_id is None


def test_load_players_reports_line_numbers(tmp_path: Path):
    path = _write(
        tmp_path / "players.csv",
        "player_id,name,position,age,composite_rank\n"
        "p1,One,QB,25,1\n"
        "p2,Two,QB,26,abc\n",
    )
    with pytest.raises(ValueError, match="players.csv line 3: composite_rank 'abc' is not numeric"):
        load_players(path)


def test_load_players_reports_model_errors(tmp_path: Path):
    path = _write(
        tmp_path / "players.csv",
        "player_id,name,position,age,composite_rank\n"
        "p1,One,QB,25,0\n",
    )
    with pytest.raises(ValueError, match="line 2: composite_rank"):
        load_players(path)


def test_load_players_rejects_duplicates(tmp_path: Path):
    path = _write(
        tmp_path / "players.csv",
        "player_id,name,position,age,composite_rank\n"
        "p1,One,QB,25,1\n"
        "p1,Again,QB,25,2\n",
    )
    with pytest.raises(ValueError, match="duplicate player_id 'p1'"):
        load_players(path)


def test_load_teams(tmp_path: Path):
    path = _write(
        tmp_path / "teams.csv",
        "franchise_id,team_name,available_cap_space,roster_spots_to_fill,positional_needs,championship_window\n"
        "F1,Sharks,30M,10,QB:critical|TE:moderate,Contending\n"
        "F2,Jets,12500000,4,,\n",
    )
    teams = load_teams(path)

    assert teams[0].available_cap_space == 30_000_000
    assert teams[0].need("QB") is NeedLevel.CRITICAL
    assert teams[0].championship_window is ChampionshipWindow.CONTENDING
    assert teams[1].championship_window is ChampionshipWindow.NEUTRAL
    assert teams[1].positional_needs == {}


def test_parse_rows_by_kind():
    rows = [{"franchise_id": "F1", "available_cap_space": "1000000", "championship_window": "sideways"}]
    with pytest.raises(ValueError, match="teams line 2"):
        parse_rows("teams", rows)
    with pytest.raises(ValueError):
        parse_rows("draft", rows)

    player = player_from_row({"player_id": "p9", "position": "te", "age": "29", "composite_rank": "88"})
    assert player.position == "TE"
    assert player.contract_years_remaining == 0
