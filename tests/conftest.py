from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    recorded: list[float] = []
    monkeypatch.setattr("leagueboards.core.retry.time.sleep", lambda value: recorded.append(value))
    return recorded


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in ("APISPORTS_KEY", "API_FOOTBALL_KEY", "APIFOOTBALL_API_KEY", "LEAGUEBOARDS_LEAGUES"):
        monkeypatch.delenv(name, raising=False)
