from __future__ import annotations

from abc import ABC, abstractmethod

from leagueboards.core.errors import FetchResult


class BoardDataProvider(ABC):
    name: str

    @property
    @abstractmethod
    def has_credential(self) -> bool:
        """True when the provider is configured to authenticate upstream."""

    @abstractmethod
    def get_league(self, *, league_id: int) -> FetchResult:
        """League metadata including the list of seasons."""

    @abstractmethod
    def get_teams(self, *, league_id: int, season: int) -> FetchResult:
        """Roster snapshot for a league season."""

    @abstractmethod
    def get_finished_fixtures(self, *, league_id: int, season: int) -> FetchResult:
        """All finished fixtures of a league season."""

    @abstractmethod
    def get_team_last_fixtures(self, *, team_id: int, last: int) -> FetchResult:
        """The team's last ``last`` finished fixtures, any competition."""

    @abstractmethod
    def get_fixture_statistics(self, *, fixture_id: int) -> FetchResult:
        """Per-team statistics rows for a fixture."""

    @abstractmethod
    def get_fixture_card_events(self, *, fixture_id: int) -> FetchResult:
        """Card events for a fixture."""
