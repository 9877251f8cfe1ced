"""Finished-fixture collection and per-team partitioning."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable

from leagueboards.core.errors import UpstreamError
from leagueboards.core.limiter import ConcurrencyLimiter
from leagueboards.pipeline.models import Fixture, FixtureSide, Team
from leagueboards.pipeline.names import DEFAULT_MATCH_THRESHOLD, names_match
from leagueboards.providers.base import BoardDataProvider

logger = logging.getLogger(__name__)


@dataclass
class FixtureCollection:
    fixtures: list[Fixture] = field(default_factory=list)
    seasons: tuple[int, ...] = ()
    error: str | None = None


def parse_finished(rows: Iterable[dict]) -> list[Fixture]:
    parsed = (Fixture.from_api(row) for row in rows)
    return [fixture for fixture in parsed if fixture is not None and fixture.is_finished]


def newest_first(fixtures: Iterable[Fixture]) -> list[Fixture]:
    """Dedupe by fixture ID (first occurrence wins) and sort newest-first."""
    unique: dict[int, Fixture] = {}
    for fixture in fixtures:
        unique.setdefault(fixture.fixture_id, fixture)
    return sorted(unique.values(), key=lambda f: (f.timestamp, f.fixture_id), reverse=True)


class FixtureAggregator:
    def __init__(
        self,
        provider: BoardDataProvider,
        *,
        matches_per_team: int = 7,
        include_previous_season: bool = True,
        limiter: ConcurrencyLimiter | None = None,
        match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    ) -> None:
        self.provider = provider
        self.matches_per_team = matches_per_team
        self.include_previous_season = include_previous_season
        self.limiter = limiter or ConcurrencyLimiter(1)
        self.match_threshold = match_threshold

    def collect(self, league_id: int, season: int, previous_season: int | None = None) -> FixtureCollection:
        """One bulk fetch per season; the prior season is merged in to bridge season boundaries.

        When the resolved season has no finished fixtures the prior season is
        used even if merging is disabled. ``seasons`` lists only the seasons
        that contributed fixtures.
        """
        current, error = self._fetch_season(league_id, season)
        seasons = [season] if current else []
        fixtures = list(current)

        wants_previous = previous_season is not None and previous_season != season
        if wants_previous and (self.include_previous_season or not current):
            previous, _previous_error = self._fetch_season(league_id, previous_season)
            if previous:
                seasons.append(previous_season)
                fixtures.extend(previous)
            if error and previous:
                error = f"{error} (showing season {previous_season} fixtures)"

        ordered = newest_first(fixtures)
        logger.info(
            "fixtures collected league_id=%s seasons=%s finished=%s",
            league_id,
            seasons,
            len(ordered),
        )
        return FixtureCollection(fixtures=ordered, seasons=tuple(seasons), error=error)

    def last_n_finished(
        self,
        team: Team,
        fixtures: Iterable[Fixture],
        n: int | None = None,
        *,
        foreign_ids: frozenset[int] = frozenset(),
    ) -> list[Fixture]:
        """The team's newest ``n`` finished fixtures from an already newest-first list."""
        limit = self.matches_per_team if n is None else n
        picks: list[Fixture] = []
        for fixture in fixtures:
            if len(picks) >= limit:
                break
            if fixture.is_finished and self.team_side(team, fixture, foreign_ids=foreign_ids) is not None:
                picks.append(fixture)
        return picks

    def partition(self, roster: list[Team], fixtures: list[Fixture]) -> dict[int, list[Fixture]]:
        """Map each roster team ID to its newest finished fixtures.

        Teams with nothing in the bulk list get a dedicated per-team query.
        """
        all_ids = frozenset(team_id for team in roster for team_id in team.ids)
        per_team: dict[int, list[Fixture]] = {}
        missing: list[Team] = []
        for team in roster:
            picks = self.last_n_finished(team, fixtures, foreign_ids=all_ids - team.ids)
            per_team[team.team_id] = picks
            if not picks:
                missing.append(team)

        if missing:
            logger.info(
                "per-team fallback teams=%s",
                [team.team_id for team in missing],
            )
            fallback = self.limiter.map(self.fetch_team_fallback, missing)
            for team, picks in zip(missing, fallback):
                per_team[team.team_id] = picks
        return per_team

    def fetch_team_fallback(self, team: Team) -> list[Fixture]:
        result = self.provider.get_team_last_fixtures(team_id=team.team_id, last=self.matches_per_team)
        if not result.ok:
            logger.warning("per-team fallback failed team_id=%s error=%s", team.team_id, result.error)
            return []
        fixtures = newest_first(parse_finished(result.rows))
        picks = self.last_n_finished(team, fixtures)
        logger.info("per-team fallback team_id=%s fixtures=%s", team.team_id, len(picks))
        return picks

    def team_side(
        self,
        team: Team,
        fixture: Fixture,
        *,
        foreign_ids: frozenset[int] = frozenset(),
    ) -> str | None:
        """``"home"``, ``"away"`` or ``None`` when the team did not play the fixture."""
        ids = team.ids
        if fixture.home.team_id in ids:
            return "home"
        if fixture.away.team_id in ids:
            return "away"
        if self._name_matches(team, fixture.home, foreign_ids):
            return "home"
        if self._name_matches(team, fixture.away, foreign_ids):
            return "away"
        return None

    def _name_matches(self, team: Team, side: FixtureSide, foreign_ids: frozenset[int]) -> bool:
        if side.team_id is not None and side.team_id in foreign_ids:
            return False
        return names_match(team.name, side.name, threshold=self.match_threshold)

    def _fetch_season(self, league_id: int, season: int) -> tuple[list[Fixture], str | None]:
        result = self.provider.get_finished_fixtures(league_id=league_id, season=season)
        if not result.ok:
            error = result.error or UpstreamError("fixture fetch failed")
            logger.warning(
                "bulk fixture fetch failed league_id=%s season=%s error=%s",
                league_id,
                season,
                error,
            )
            return [], f"Fixture fetch failed for season {season}: {error}"
        return parse_finished(result.rows), None
