import pytest

from pyauction.config import get_league_rules, iter_league_rules
from pyauction.config.settings import default_history_years, default_reference_spend, default_strict, default_workers


def test_get_league_rules_handles_lowercase_key():
    rules = get_league_rules("theleague")
    assert rules.salary_cap == 45_000_000
    assert rules.league_minimum == 425_000
    assert "DEF" in rules.positions


def test_age_curve_missing_for_defense():
    rules = get_league_rules()
    assert rules.age_curve("rb").prime_end == 28
    assert rules.age_curve("DEF") is None


def test_iter_league_rules_lists_every_league():
    keys = {rules.key for rules in iter_league_rules()}
    assert {"THELEAGUE", "AFL"} <= keys


def test_get_league_rules_missing_raises():
    with pytest.raises(KeyError):
        get_league_rules("CURLING")


def test_env_defaults_fall_back_on_bad_values(monkeypatch):
    monkeypatch.setenv("PYAUCTION_WORKERS", "many")
    monkeypatch.setenv("PYAUCTION_STRICT", "perhaps")
    monkeypatch.setenv("PYAUCTION_HISTORY_YEARS", "0")
    monkeypatch.delenv("PYAUCTION_REFERENCE_SPEND", raising=False)

    assert default_workers() == 1
    assert default_strict() is False
    assert default_history_years(6) == 1
    assert default_reference_spend() is None


def test_env_defaults_read_valid_values(monkeypatch):
    monkeypatch.setenv("PYAUCTION_WORKERS", "4")
    monkeypatch.setenv("PYAUCTION_STRICT", "yes")
    monkeypatch.setenv("PYAUCTION_REFERENCE_SPEND", "350000000")

    assert default_workers() == 4
    assert default_strict() is True
    assert default_reference_spend() == 350_000_000
