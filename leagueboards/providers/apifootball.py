from __future__ import annotations

from leagueboards.config.leagues import FINISHED_STATUSES
from leagueboards.config.settings import settings
from leagueboards.core.cache import TTLCache
from leagueboards.core.errors import FetchResult
from leagueboards.core.http_client import ProviderHttpClient
from leagueboards.providers.base import BoardDataProvider

FINISHED_STATUS_PARAM = "-".join(FINISHED_STATUSES)


class APIFootballProvider(BoardDataProvider):
    name = "api_football"

    def __init__(
        self,
        *,
        client: ProviderHttpClient | None = None,
        stats_ttl_seconds: float | None = None,
    ) -> None:
        self.client = client or ProviderHttpClient.from_settings()
        self.stats_ttl_seconds = (
            settings.STATS_CACHE_TTL_SECONDS if stats_ttl_seconds is None else stats_ttl_seconds
        )

    @property
    def has_credential(self) -> bool:
        return self.client.has_credential

    def get_league(self, *, league_id: int) -> FetchResult:
        return self.client.fetch("/leagues", {"id": league_id})

    def get_teams(self, *, league_id: int, season: int) -> FetchResult:
        return self.client.fetch("/teams", {"league": league_id, "season": season})

    def get_finished_fixtures(self, *, league_id: int, season: int) -> FetchResult:
        return self.client.fetch(
            "/fixtures",
            {"league": league_id, "season": season, "status": FINISHED_STATUS_PARAM},
        )

    def get_team_last_fixtures(self, *, team_id: int, last: int) -> FetchResult:
        return self.client.fetch(
            "/fixtures",
            {"team": team_id, "last": last, "status": FINISHED_STATUS_PARAM},
        )

    def get_fixture_statistics(self, *, fixture_id: int) -> FetchResult:
        return self.client.fetch(
            "/fixtures/statistics",
            {"fixture": fixture_id},
            ttl_seconds=self.stats_ttl_seconds,
            cache_empty=False,
            cache_errors=False,
        )

    def get_fixture_card_events(self, *, fixture_id: int) -> FetchResult:
        return self.client.fetch(
            "/fixtures/events",
            {"fixture": fixture_id, "type": "Card"},
            ttl_seconds=self.stats_ttl_seconds,
            cache_empty=False,
            cache_errors=False,
        )


def get_provider(*, cache: TTLCache | None = None, api_key: str | None = None) -> BoardDataProvider:
    client = ProviderHttpClient.from_settings(cache=cache, api_key=api_key)
    return APIFootballProvider(client=client)
