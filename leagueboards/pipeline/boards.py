"""Board assembly: the single entry point the presentation layer calls.

Each league runs season -> roster -> fixtures -> stats in order, in three
phases: collect the deduplicated fixture set, fetch stats for it once, then
map fixtures onto fixed-size slot lists without further I/O. A failure in one
league becomes that league's ``error`` and never aborts the others.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from leagueboards.config.leagues import LeagueConfig
from leagueboards.config.settings import settings
from leagueboards.core.errors import MissingCredentialError, ResolutionError, UpstreamError
from leagueboards.core.limiter import ConcurrencyLimiter
from leagueboards.core.retry import BackoffPolicy
from leagueboards.pipeline.fixtures import FixtureAggregator
from leagueboards.pipeline.models import Fixture, FixtureStatistics, LeagueBoard, MatchSlot, Team, TeamBoard
from leagueboards.pipeline.names import names_match
from leagueboards.pipeline.resolver import EntityResolver, SeasonResolution
from leagueboards.pipeline.stats import StatFetcher
from leagueboards.providers.apifootball import get_provider
from leagueboards.providers.base import BoardDataProvider

logger = logging.getLogger(__name__)

MATCH_SLOTS = 7


def to_match_slot(team: Team, fixture: Fixture, stats: FixtureStatistics | None) -> MatchSlot:
    if fixture.home.team_id in team.ids:
        is_home = True
    elif fixture.away.team_id in team.ids:
        is_home = False
    else:
        is_home = names_match(team.name, fixture.home.name)
    opponent = fixture.away if is_home else fixture.home
    stats = stats or FixtureStatistics()
    return MatchSlot(
        fixture_id=fixture.fixture_id,
        date=fixture.date,
        opponent=opponent.name or "-",
        is_home=is_home,
        goals_total=fixture.goals_total,
        corners_total=stats.corners,
        cards_total=stats.cards,
    )


def pad_slots(slots: list[MatchSlot], size: int = MATCH_SLOTS) -> tuple[MatchSlot, ...]:
    trimmed = list(slots[:size])
    trimmed.extend(MatchSlot.blank() for _ in range(size - len(trimmed)))
    return tuple(trimmed)


def assemble_teams(
    roster: Iterable[Team],
    per_team: Mapping[int, list[Fixture]],
    stats: Mapping[int, FixtureStatistics],
    *,
    size: int = MATCH_SLOTS,
) -> tuple[TeamBoard, ...]:
    boards = []
    for team in roster:
        slots = [to_match_slot(team, fixture, stats.get(fixture.fixture_id)) for fixture in per_team.get(team.team_id, [])]
        boards.append(TeamBoard(team_id=team.team_id, name=team.name, logo=team.logo, matches=pad_slots(slots, size)))
    return tuple(sorted(boards, key=lambda board: (board.name.casefold(), board.team_id)))


def _league_config(raw: LeagueConfig | Mapping[str, Any]) -> LeagueConfig:
    if isinstance(raw, LeagueConfig):
        return raw
    league_id = raw.get("leagueId", raw.get("league_id", raw.get("id")))
    league_name = raw.get("leagueName", raw.get("league_name", raw.get("name")))
    return LeagueConfig(int(league_id), str(league_name or f"League {league_id}"))


class BoardAssembler:
    def __init__(
        self,
        provider: BoardDataProvider,
        *,
        resolver: EntityResolver | None = None,
        aggregator: FixtureAggregator | None = None,
        stat_fetcher: StatFetcher | None = None,
        matches_per_team: int = MATCH_SLOTS,
    ) -> None:
        self.provider = provider
        self.matches_per_team = matches_per_team
        self.resolver = resolver or EntityResolver(provider)
        self.aggregator = aggregator or FixtureAggregator(provider, matches_per_team=matches_per_team)
        self.stat_fetcher = stat_fetcher or StatFetcher(provider)

    @classmethod
    def from_settings(cls, provider: BoardDataProvider | None = None) -> "BoardAssembler":
        provider = provider or get_provider()
        matches_per_team = settings.MATCHES_PER_TEAM
        stats_limiter = ConcurrencyLimiter(
            settings.STATS_CONCURRENCY,
            min_interval=settings.STATS_DISPATCH_INTERVAL,
        )
        return cls(
            provider,
            aggregator=FixtureAggregator(
                provider,
                matches_per_team=matches_per_team,
                include_previous_season=settings.INCLUDE_PREVIOUS_SEASON,
                limiter=ConcurrencyLimiter(1, min_interval=settings.STATS_DISPATCH_INTERVAL),
            ),
            stat_fetcher=StatFetcher(
                provider,
                limiter=stats_limiter,
                retry_policy=BackoffPolicy(
                    max_attempts=settings.STATS_MAX_ATTEMPTS,
                    base_delay=settings.STATS_RETRY_DELAY,
                    max_delay=settings.STATS_RETRY_DELAY * settings.STATS_MAX_ATTEMPTS,
                    linear=True,
                ),
            ),
            matches_per_team=matches_per_team,
        )

    def build_boards(self, configs: Iterable[LeagueConfig | Mapping[str, Any]]) -> list[LeagueBoard]:
        leagues = [_league_config(config) for config in configs]
        if not self.provider.has_credential:
            error = str(MissingCredentialError())
            logger.error("board build aborted: %s", error)
            return [LeagueBoard(league.league_id, league.league_name, error=error) for league in leagues]
        return [self.build_board(league) for league in leagues]

    def build_board(self, league: LeagueConfig) -> LeagueBoard:
        try:
            return self._build_board(league)
        except Exception as exc:
            logger.exception("board build failed league_id=%s", league.league_id)
            return LeagueBoard(league.league_id, league.league_name, error=str(exc) or type(exc).__name__)

    def _build_board(self, league: LeagueConfig) -> LeagueBoard:
        try:
            resolution = self.resolver.resolve_season(league.league_id)
        except UpstreamError as exc:
            logger.warning("season resolution failed league_id=%s error=%s", league.league_id, exc)
            return LeagueBoard(league.league_id, league.league_name, error=str(exc))

        try:
            season, roster = self._resolve_roster(resolution)
        except UpstreamError as exc:
            logger.warning("roster resolution failed league_id=%s error=%s", league.league_id, exc)
            return LeagueBoard(league.league_id, league.league_name, season_used=resolution.season, error=str(exc))

        previous = resolution.previous if season == resolution.season else None
        collection = self.aggregator.collect(league.league_id, season, previous)
        if collection.seasons and season not in collection.seasons:
            season = collection.seasons[0]
        roster = self.resolver.reconcile(roster, collection.fixtures)
        per_team = self.aggregator.partition(roster, collection.fixtures)

        fixture_ids = {fixture.fixture_id for fixtures in per_team.values() for fixture in fixtures}
        stats = self.stat_fetcher.stats_for(fixture_ids)

        teams = assemble_teams(roster, per_team, stats, size=self.matches_per_team)
        logger.info(
            "board built league_id=%s season=%s teams=%s fixtures=%s",
            league.league_id,
            season,
            len(teams),
            len(fixture_ids),
        )
        return LeagueBoard(
            league_id=league.league_id,
            league_name=league.league_name,
            season_used=season,
            teams=teams,
            error=collection.error,
        )

    def _resolve_roster(self, resolution: SeasonResolution) -> tuple[int, list[Team]]:
        try:
            return resolution.season, self.resolver.resolve_roster(resolution.league_id, resolution.season)
        except ResolutionError as exc:
            if exc.code != "EMPTY_ROSTER":
                raise
            previous = resolution.previous
            logger.info(
                "empty roster, falling back league_id=%s season=%s previous=%s",
                resolution.league_id,
                resolution.season,
                previous,
            )
            try:
                return previous, self.resolver.resolve_roster(resolution.league_id, previous)
            except ResolutionError:
                raise exc from None


def get_league_boards(
    configs: Iterable[LeagueConfig | Mapping[str, Any]] | None = None,
    *,
    assembler: BoardAssembler | None = None,
) -> list[dict[str, Any]]:
    """Build every configured league board as JSON-ready dicts. Never raises for upstream failures."""
    assembler = assembler or BoardAssembler.from_settings()
    leagues = settings.LEAGUES if configs is None else configs
    return [board.to_dict() for board in assembler.build_boards(leagues)]
