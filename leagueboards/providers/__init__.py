from .apifootball import APIFootballProvider, get_provider
from .base import BoardDataProvider

__all__ = ["APIFootballProvider", "BoardDataProvider", "get_provider"]
