"""Season, roster and team-identity resolution for a league."""
from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Any, Iterable

from leagueboards.core.errors import ResolutionError
from leagueboards.pipeline.models import Fixture, Team, as_int
from leagueboards.pipeline.names import DEFAULT_MATCH_THRESHOLD, build_name_index, names_match, normalize_name
from leagueboards.providers.base import BoardDataProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeasonResolution:
    league_id: int
    season: int
    available: tuple[int, ...]
    flagged_current: bool

    @property
    def previous(self) -> int:
        """The season immediately before the resolved one."""
        earlier = [year for year in self.available if year < self.season]
        return max(earlier) if earlier else self.season - 1


def _league_seasons(rows: Iterable[dict[str, Any]], league_id: int) -> list[dict[str, Any]]:
    seasons: list[dict[str, Any]] = []
    for row in rows:
        league = (row or {}).get("league") or {}
        row_league_id = as_int(league.get("id"))
        if row_league_id is not None and row_league_id != league_id:
            continue
        seasons.extend(season for season in (row or {}).get("seasons") or [] if isinstance(season, dict))
    return seasons


class EntityResolver:
    def __init__(self, provider: BoardDataProvider, *, match_threshold: float = DEFAULT_MATCH_THRESHOLD) -> None:
        self.provider = provider
        self.match_threshold = match_threshold

    def resolve_season(self, league_id: int) -> SeasonResolution:
        rows = self.provider.get_league(league_id=league_id).unwrap().get("response") or []
        seasons = _league_seasons(rows, league_id)
        years = sorted({year for year in (as_int(s.get("year")) for s in seasons) if year is not None}, reverse=True)
        if not years:
            raise ResolutionError(
                f"No seasons found for league {league_id}",
                code="NO_SEASONS",
                league_id=league_id,
            )

        current = [
            year
            for year in (as_int(s.get("year")) for s in seasons if s.get("current") is True)
            if year is not None
        ]
        season = max(current) if current else years[0]
        logger.info(
            "season resolved league_id=%s season=%s flagged_current=%s available=%s",
            league_id,
            season,
            bool(current),
            len(years),
        )
        return SeasonResolution(
            league_id=league_id,
            season=season,
            available=tuple(years),
            flagged_current=bool(current),
        )

    def resolve_roster(self, league_id: int, season: int) -> list[Team]:
        """Fetch the roster; an empty roster raises ``ResolutionError(EMPTY_ROSTER)``.

        Transport failures propagate as the fetch client's own error so callers
        can tell "unreachable" apart from "reachable but empty".
        """
        rows = self.provider.get_teams(league_id=league_id, season=season).unwrap().get("response") or []
        roster: list[Team] = []
        seen: set[int] = set()
        for row in rows:
            team = Team.from_api(row)
            if team is None or team.team_id in seen:
                continue
            seen.add(team.team_id)
            roster.append(team)

        if not roster:
            raise ResolutionError(
                f"Empty roster for league {league_id} season {season}",
                code="EMPTY_ROSTER",
                league_id=league_id,
                season=season,
            )
        logger.info("roster resolved league_id=%s season=%s teams=%s", league_id, season, len(roster))
        return roster

    def reconcile(self, roster: list[Team], fixtures: Iterable[Fixture]) -> list[Team]:
        """Attach each roster team's effective ID set using fixture participant names.

        A fixture-side name whose IDs differ from the roster is aliased to the
        single roster team it matches; IDs owned by another roster team are
        never borrowed.
        """
        index = build_name_index(
            (side.name, side.team_id) for fixture in fixtures for side in (fixture.home, fixture.away)
        )
        roster_ids = {team.team_id for team in roster}
        normalized_roster = {team.team_id: normalize_name(team.name) for team in roster}
        effective: dict[int, set[int]] = {team.team_id: {team.team_id} for team in roster}

        for normalized, observed_ids in index.items():
            if observed_ids <= roster_ids:
                continue
            owners = [team for team in roster if normalized_roster[team.team_id] == normalized]
            if not owners:
                owners = [
                    team for team in roster if names_match(team.name, normalized, threshold=self.match_threshold)
                ]
            if len(owners) != 1:
                if owners:
                    logger.debug("ambiguous alias name=%s candidates=%s", normalized, [t.team_id for t in owners])
                continue
            owner = owners[0]
            aliases = {team_id for team_id in observed_ids if team_id not in roster_ids}
            if aliases:
                logger.info(
                    "team alias resolved team_id=%s name=%s fixture_name=%s aliases=%s",
                    owner.team_id,
                    owner.name,
                    normalized,
                    sorted(aliases),
                )
                effective[owner.team_id] |= aliases

        return [replace(team, effective_ids=frozenset(effective[team.team_id])) for team in roster]
