from __future__ import annotations

from leagueboards.core.errors import FetchResult
from leagueboards.core.http_client import ProviderHttpClient
from leagueboards.providers.apifootball import APIFootballProvider, get_provider

from fakes import envelope


class _SpyHttpClient:
    has_credential = True

    def __init__(self) -> None:
        self.calls: list[dict] = []

    def fetch(
        self, path: str, params: dict | None = None, *, ttl_seconds=None, cache_empty=True, cache_errors=True
    ) -> FetchResult:
        self.calls.append(
            {
                "path": path,
                "params": params,
                "ttl_seconds": ttl_seconds,
                "cache_empty": cache_empty,
                "cache_errors": cache_errors,
            }
        )
        return FetchResult.success(envelope([{"path": path}]))


def test_apifootball_provider_uses_http_client():
    spy = _SpyHttpClient()
    provider = APIFootballProvider(client=spy, stats_ttl_seconds=3600)

    provider.get_league(league_id=39)
    provider.get_teams(league_id=39, season=2025)
    provider.get_finished_fixtures(league_id=39, season=2025)
    provider.get_team_last_fixtures(team_id=33, last=7)
    stats = provider.get_fixture_statistics(fixture_id=1234)
    provider.get_fixture_card_events(fixture_id=1234)

    assert [call["path"] for call in spy.calls] == [
        "/leagues",
        "/teams",
        "/fixtures",
        "/fixtures",
        "/fixtures/statistics",
        "/fixtures/events",
    ]
    assert spy.calls[0]["params"] == {"id": 39}
    assert spy.calls[1]["params"] == {"league": 39, "season": 2025}
    assert spy.calls[2]["params"] == {"league": 39, "season": 2025, "status": "FT-AET-PEN"}
    assert spy.calls[3]["params"] == {"team": 33, "last": 7, "status": "FT-AET-PEN"}
    assert spy.calls[4]["params"] == {"fixture": 1234}
    assert spy.calls[5]["params"] == {"fixture": 1234, "type": "Card"}
    assert stats.rows == [{"path": "/fixtures/statistics"}]


def test_apifootball_provider_caches_stats_longer_and_skips_empty_or_failed():
    spy = _SpyHttpClient()
    provider = APIFootballProvider(client=spy, stats_ttl_seconds=3600)

    provider.get_teams(league_id=39, season=2025)
    provider.get_fixture_statistics(fixture_id=1)
    provider.get_fixture_card_events(fixture_id=1)

    assert spy.calls[0]["ttl_seconds"] is None
    assert spy.calls[0]["cache_empty"] is True
    assert spy.calls[0]["cache_errors"] is True
    assert all(call["ttl_seconds"] == 3600 for call in spy.calls[1:])
    assert all(call["cache_empty"] is False for call in spy.calls[1:])
    assert all(call["cache_errors"] is False for call in spy.calls[1:])


def test_get_provider_reads_credential_from_env(monkeypatch):
    monkeypatch.setenv("APISPORTS_KEY", "env-key")
    monkeypatch.setenv("APIFOOTBALL_BASE_URL", "https://api.test/")

    provider = get_provider()

    assert provider.has_credential
    assert isinstance(provider.client, ProviderHttpClient)
    assert provider.client.api_key == "env-key"
    assert provider.client.base_url == "https://api.test"


def test_get_provider_without_credential(monkeypatch):
    provider = get_provider()

    assert not provider.has_credential
