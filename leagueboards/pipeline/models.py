from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from leagueboards.config.leagues import FINISHED_STATUSES

BLANK_OPPONENT = "-"


def as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Team:
    team_id: int
    name: str
    logo: str = ""
    effective_ids: frozenset[int] = frozenset()

    @property
    def ids(self) -> frozenset[int]:
        return self.effective_ids or frozenset({self.team_id})

    @classmethod
    def from_api(cls, row: dict[str, Any]) -> "Team | None":
        team = (row or {}).get("team") or {}
        team_id = as_int(team.get("id"))
        if team_id is None:
            return None
        return cls(team_id=team_id, name=str(team.get("name") or "Unknown"), logo=str(team.get("logo") or ""))


@dataclass(frozen=True)
class FixtureSide:
    team_id: int | None
    name: str


@dataclass(frozen=True)
class Fixture:
    fixture_id: int
    timestamp: int
    date: str
    status: str
    home: FixtureSide
    away: FixtureSide
    home_goals: int | None
    away_goals: int | None
    season: int | None = None

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES

    @property
    def goals_total(self) -> int | None:
        if self.home_goals is None and self.away_goals is None:
            return None
        return (self.home_goals or 0) + (self.away_goals or 0)

    @classmethod
    def from_api(cls, row: dict[str, Any]) -> "Fixture | None":
        fixture = (row or {}).get("fixture") or {}
        fixture_id = as_int(fixture.get("id"))
        if fixture_id is None:
            return None
        teams = (row or {}).get("teams") or {}
        home = teams.get("home") or {}
        away = teams.get("away") or {}
        goals = (row or {}).get("goals") or {}
        status = (fixture.get("status") or {}).get("short") or ""
        date = str(fixture.get("date") or "")
        timestamp = as_int(fixture.get("timestamp"))
        if timestamp is None:
            timestamp = _timestamp_from_iso(date)
        league = (row or {}).get("league") or {}
        return cls(
            fixture_id=fixture_id,
            timestamp=timestamp,
            date=date,
            status=str(status).upper(),
            home=FixtureSide(as_int(home.get("id")), str(home.get("name") or "")),
            away=FixtureSide(as_int(away.get("id")), str(away.get("name") or "")),
            home_goals=as_int(goals.get("home")),
            away_goals=as_int(goals.get("away")),
            season=as_int(league.get("season")),
        )


def _timestamp_from_iso(value: str) -> int:
    if not value:
        return 0
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


@dataclass(frozen=True)
class FixtureStatistics:
    """Combined per-fixture totals; ``None`` means not published, not zero."""

    corners: int | None = None
    cards: int | None = None


@dataclass(frozen=True)
class MatchSlot:
    fixture_id: int
    date: str
    opponent: str
    is_home: bool
    goals_total: int | None
    corners_total: int | None
    cards_total: int | None

    @classmethod
    def blank(cls) -> "MatchSlot":
        return cls(
            fixture_id=0,
            date="",
            opponent=BLANK_OPPONENT,
            is_home=True,
            goals_total=None,
            corners_total=None,
            cards_total=None,
        )

    @property
    def is_blank(self) -> bool:
        return self.fixture_id == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "fixtureId": self.fixture_id,
            "date": self.date,
            "opponent": self.opponent,
            "isHome": self.is_home,
            "goalsTotal": self.goals_total,
            "cornersTotal": self.corners_total,
            "cardsTotal": self.cards_total,
        }


@dataclass(frozen=True)
class TeamBoard:
    team_id: int
    name: str
    logo: str
    matches: tuple[MatchSlot, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "teamId": self.team_id,
            "name": self.name,
            "logo": self.logo,
            "matches": [slot.to_dict() for slot in self.matches],
        }


@dataclass(frozen=True)
class LeagueBoard:
    league_id: int
    league_name: str
    season_used: int | None = None
    teams: tuple[TeamBoard, ...] = field(default_factory=tuple)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "leagueId": self.league_id,
            "leagueName": self.league_name,
            "seasonUsed": self.season_used,
            "teams": [team.to_dict() for team in self.teams],
            "error": self.error,
        }
