from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LeagueConfig:
    league_id: int
    league_name: str


# Fixture status shorts for a concluded match: regulation, extra time, penalties.
FINISHED_STATUSES: tuple[str, ...] = ("FT", "AET", "PEN")


DEFAULT_LEAGUES: tuple[LeagueConfig, ...] = (
    LeagueConfig(262, "Liga MX"),
    LeagueConfig(39, "Premier League"),
    LeagueConfig(78, "Bundesliga"),
    LeagueConfig(140, "La Liga"),
    LeagueConfig(135, "Serie A"),
)


def parse_league(raw: str) -> LeagueConfig:
    """Parse ``"39:Premier League"`` into a LeagueConfig."""
    league_id, sep, name = raw.partition(":")
    try:
        parsed_id = int(league_id.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid league id in '{raw}'. Expected '<id>:<name>'.") from exc
    cleaned_name = name.strip() if sep else ""
    return LeagueConfig(parsed_id, cleaned_name or f"League {parsed_id}")


def parse_leagues(raw: str) -> list[LeagueConfig]:
    return [parse_league(chunk) for chunk in raw.split(",") if chunk.strip()]
