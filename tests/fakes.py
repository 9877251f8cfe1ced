from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
import threading
from typing import Any

from leagueboards.core.errors import FetchResult, UpstreamError
from leagueboards.providers.base import BoardDataProvider


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, headers: dict | None = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = text

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Replays queued responses (or raises queued exceptions) for ``request``."""

    def __init__(self, responses: list[Any]) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def request(self, method, url, params=None, headers=None, timeout=None):  # type: ignore[no-untyped-def]
        self.calls.append({"method": method, "url": url, "params": params, "headers": headers, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def envelope(rows: list[Any]) -> dict[str, Any]:
    return {"errors": [], "results": len(rows), "response": rows}


def league_row(league_id: int, seasons: list[tuple[int, bool]]) -> dict[str, Any]:
    return {
        "league": {"id": league_id, "name": f"League {league_id}"},
        "seasons": [{"year": year, "current": current} for year, current in seasons],
    }


def team_row(team_id: int, name: str) -> dict[str, Any]:
    return {"team": {"id": team_id, "name": name, "logo": f"https://media.example/teams/{team_id}.png"}}


def fixture_row(
    fixture_id: int,
    timestamp: int,
    home: tuple[int | None, str],
    away: tuple[int | None, str],
    goals: tuple[int | None, int | None] = (1, 0),
    status: str = "FT",
    season: int = 2025,
) -> dict[str, Any]:
    return {
        "fixture": {
            "id": fixture_id,
            "timestamp": timestamp,
            "date": datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat(),
            "status": {"short": status},
        },
        "league": {"season": season},
        "teams": {"home": {"id": home[0], "name": home[1]}, "away": {"id": away[0], "name": away[1]}},
        "goals": {"home": goals[0], "away": goals[1]},
    }


def statistics_rows(
    corners: tuple[Any, Any] = (3, 2),
    yellow: tuple[Any, Any] = (1, 2),
    red: tuple[Any, Any] = (None, None),
) -> list[dict[str, Any]]:
    rows = []
    for index in (0, 1):
        rows.append(
            {
                "team": {"id": index},
                "statistics": [
                    {"type": "Corner Kicks", "value": corners[index]},
                    {"type": "Yellow Cards", "value": yellow[index]},
                    {"type": "Red Cards", "value": red[index]},
                ],
            }
        )
    return rows


def card_event(detail: str) -> dict[str, Any]:
    return {"type": "Card", "detail": detail}


class FakeProvider(BoardDataProvider):
    """In-memory provider keyed like the real upstream calls.

    Values may be row lists, a ``FetchResult``, an ``UpstreamError`` (served
    as a failure) or a callable returning either. Unknown keys answer with an
    empty row list.
    """

    name = "fake"

    def __init__(
        self,
        *,
        leagues: dict[int, Any] | None = None,
        teams: dict[tuple[int, int], Any] | None = None,
        fixtures: dict[tuple[int, int], Any] | None = None,
        team_fixtures: dict[int, Any] | None = None,
        statistics: dict[int, Any] | None = None,
        events: dict[int, Any] | None = None,
        credential: bool = True,
    ) -> None:
        self.leagues = leagues or {}
        self.teams = teams or {}
        self.fixtures = fixtures or {}
        self.team_fixtures = team_fixtures or {}
        self.statistics = statistics or {}
        self.events = events or {}
        self.credential = credential
        self.calls: Counter[tuple[Any, ...]] = Counter()
        self._lock = threading.Lock()

    @property
    def has_credential(self) -> bool:
        return self.credential

    def _answer(self, call: tuple[Any, ...], table: dict[Any, Any], key: Any) -> FetchResult:
        with self._lock:
            self.calls[call] += 1
        value = table.get(key, [])
        if callable(value):
            value = value()
        if isinstance(value, FetchResult):
            return value
        if isinstance(value, UpstreamError):
            return FetchResult.failure(value, attempts=1)
        return FetchResult.success(envelope(list(value)))

    def get_league(self, *, league_id: int) -> FetchResult:
        return self._answer(("league", league_id), self.leagues, league_id)

    def get_teams(self, *, league_id: int, season: int) -> FetchResult:
        return self._answer(("teams", league_id, season), self.teams, (league_id, season))

    def get_finished_fixtures(self, *, league_id: int, season: int) -> FetchResult:
        return self._answer(("fixtures", league_id, season), self.fixtures, (league_id, season))

    def get_team_last_fixtures(self, *, team_id: int, last: int) -> FetchResult:
        return self._answer(("team_fixtures", team_id), self.team_fixtures, team_id)

    def get_fixture_statistics(self, *, fixture_id: int) -> FetchResult:
        return self._answer(("statistics", fixture_id), self.statistics, fixture_id)

    def get_fixture_card_events(self, *, fixture_id: int) -> FetchResult:
        return self._answer(("events", fixture_id), self.events, fixture_id)

    def count(self, kind: str) -> int:
        return sum(total for call, total in self.calls.items() if call[0] == kind)
