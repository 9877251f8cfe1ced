from __future__ import annotations

import os

from leagueboards.config.leagues import DEFAULT_LEAGUES, LeagueConfig, parse_leagues


def _optional_env(*names: str) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value is not None:
            cleaned = value.strip()
            if cleaned:
                return cleaned
    return None


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    @property
    def API_FOOTBALL_KEY(self) -> str | None:
        return _optional_env("APISPORTS_KEY", "API_FOOTBALL_KEY", "APIFOOTBALL_API_KEY")

    @property
    def API_FOOTBALL_BASE_URL(self) -> str:
        return (_optional_env("APIFOOTBALL_BASE_URL") or "https://v3.football.api-sports.io").rstrip("/")

    @property
    def HTTP_TIMEOUT_SECONDS(self) -> float:
        return _float_env("HTTP_TIMEOUT_SECONDS", 20.0)

    @property
    def RATE_LIMIT_MAX_ATTEMPTS(self) -> int:
        return _int_env("RATE_LIMIT_MAX_ATTEMPTS", 6)

    @property
    def RATE_LIMIT_BASE_DELAY(self) -> float:
        return _float_env("RATE_LIMIT_BASE_DELAY", 0.8)

    @property
    def RATE_LIMIT_MAX_DELAY(self) -> float:
        return _float_env("RATE_LIMIT_MAX_DELAY", 16.0)

    @property
    def TRANSIENT_MAX_ATTEMPTS(self) -> int:
        return _int_env("TRANSIENT_MAX_ATTEMPTS", 3)

    @property
    def TRANSIENT_BASE_DELAY(self) -> float:
        return _float_env("TRANSIENT_BASE_DELAY", 0.4)

    @property
    def TRANSIENT_MAX_DELAY(self) -> float:
        return _float_env("TRANSIENT_MAX_DELAY", 4.0)

    @property
    def CACHE_TTL_SECONDS(self) -> float:
        return _float_env("CACHE_TTL_SECONDS", 300.0)

    @property
    def CACHE_ERROR_TTL_SECONDS(self) -> float:
        return _float_env("CACHE_ERROR_TTL_SECONDS", 15.0)

    @property
    def STATS_CACHE_TTL_SECONDS(self) -> float:
        return _float_env("STATS_CACHE_TTL_SECONDS", 6 * 60 * 60)

    @property
    def STATS_CONCURRENCY(self) -> int:
        return _int_env("STATS_CONCURRENCY", 2)

    @property
    def STATS_DISPATCH_INTERVAL(self) -> float:
        return _float_env("STATS_DISPATCH_INTERVAL", 0.25)

    @property
    def STATS_MAX_ATTEMPTS(self) -> int:
        return _int_env("STATS_MAX_ATTEMPTS", 3)

    @property
    def STATS_RETRY_DELAY(self) -> float:
        return _float_env("STATS_RETRY_DELAY", 0.5)

    @property
    def MATCHES_PER_TEAM(self) -> int:
        return _int_env("MATCHES_PER_TEAM", 7)

    @property
    def INCLUDE_PREVIOUS_SEASON(self) -> bool:
        return _bool_env("INCLUDE_PREVIOUS_SEASON", True)

    @property
    def LEAGUES(self) -> list[LeagueConfig]:
        raw = _optional_env("LEAGUEBOARDS_LEAGUES")
        if raw is None:
            return list(DEFAULT_LEAGUES)
        return parse_leagues(raw)

    @property
    def SNAPSHOT_BUCKET(self) -> str:
        return _optional_env("SNAPSHOT_BUCKET") or "leagueboards"

    @property
    def SNAPSHOT_KEY(self) -> str:
        return _optional_env("SNAPSHOT_KEY") or "data/boards.json"

    @property
    def S3_ENDPOINT_URL(self) -> str | None:
        return _optional_env("S3_ENDPOINT_URL", "MINIO_ENDPOINT_URL")

    @property
    def S3_ACCESS_KEY(self) -> str | None:
        return _optional_env("S3_ACCESS_KEY", "MINIO_ACCESS_KEY")

    @property
    def S3_SECRET_KEY(self) -> str | None:
        return _optional_env("S3_SECRET_KEY", "MINIO_SECRET_KEY")

    @property
    def LOG_LEVEL(self) -> str:
        return (_optional_env("LOG_LEVEL") or "INFO").upper()


settings = Settings()
