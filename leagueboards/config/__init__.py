from .leagues import DEFAULT_LEAGUES, FINISHED_STATUSES, LeagueConfig, parse_league, parse_leagues
from .settings import Settings, settings

__all__ = ["DEFAULT_LEAGUES", "FINISHED_STATUSES", "LeagueConfig", "Settings", "parse_league", "parse_leagues", "settings"]
