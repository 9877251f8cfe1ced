from .boards import BoardAssembler, assemble_teams, get_league_boards, pad_slots, to_match_slot
from .fixtures import FixtureAggregator, FixtureCollection
from .models import Fixture, FixtureSide, FixtureStatistics, LeagueBoard, MatchSlot, Team, TeamBoard
from .resolver import EntityResolver, SeasonResolution
from .stats import StatFetcher

__all__ = [
    "BoardAssembler",
    "EntityResolver",
    "Fixture",
    "FixtureAggregator",
    "FixtureCollection",
    "FixtureSide",
    "FixtureStatistics",
    "LeagueBoard",
    "MatchSlot",
    "SeasonResolution",
    "StatFetcher",
    "Team",
    "TeamBoard",
    "assemble_teams",
    "get_league_boards",
    "pad_slots",
    "to_match_slot",
]
