from leagueboards.pipeline.boards import BoardAssembler, get_league_boards

__all__ = ["BoardAssembler", "get_league_boards"]
