from pathlib import Path

import pytest

from rosterbook.config import DEFAULT_ROSTER_CAP, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("ROSTERBOOK_DB_PATH", "ROSTERBOOK_ROSTER_CAP", "ROSTERBOOK_DB_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    settings = load_settings(db_path=tmp_path / "roster.sqlite")
    assert settings.roster_cap == DEFAULT_ROSTER_CAP == 11
    assert settings.db_timeout == 5.0
    assert settings.db_path == tmp_path / "roster.sqlite"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("ROSTERBOOK_DB_PATH", str(tmp_path / "env.sqlite"))
    monkeypatch.setenv("ROSTERBOOK_ROSTER_CAP", "21")
    monkeypatch.setenv("ROSTERBOOK_DB_TIMEOUT", "0.5")

    settings = load_settings()

    assert settings.db_path == Path(tmp_path / "env.sqlite")
    assert settings.roster_cap == 21
    assert settings.db_timeout == 0.5


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_cap_env_falls_back_to_default(monkeypatch, tmp_path, raw):
    monkeypatch.setenv("ROSTERBOOK_ROSTER_CAP", raw)
    assert load_settings(db_path=tmp_path / "r.sqlite").roster_cap == DEFAULT_ROSTER_CAP


def test_explicit_cap_wins_and_must_be_positive(monkeypatch, tmp_path):
    monkeypatch.setenv("ROSTERBOOK_ROSTER_CAP", "21")
    assert load_settings(db_path=tmp_path / "r.sqlite", roster_cap=15).roster_cap == 15
    with pytest.raises(ValueError):
        load_settings(db_path=tmp_path / "r.sqlite", roster_cap=0)
