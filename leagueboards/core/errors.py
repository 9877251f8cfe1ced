from __future__ import annotations

from dataclasses import dataclass
from typing import Any

BODY_PREVIEW_CHARS = 300


@dataclass
class UpstreamError(Exception):
    message: str
    code: str = "UPSTREAM_ERROR"
    status: int | None = None
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


class MissingCredentialError(UpstreamError):
    def __init__(self, message: str = "Missing API-Football credential (set APISPORTS_KEY).") -> None:
        super().__init__(message=message, code="MISSING_CREDENTIAL")


class RateLimitError(UpstreamError):
    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message=message, code="RATE_LIMITED", status=429, details={"attempts": attempts})


class UpstreamHttpError(UpstreamError):
    def __init__(self, message: str, *, status: int, body: str = "") -> None:
        super().__init__(
            message=message,
            code="HTTP_ERROR",
            status=status,
            details={"body": (body or "")[:BODY_PREVIEW_CHARS]},
        )


class NetworkError(UpstreamError):
    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message=message, code="NETWORK_ERROR", details={"attempts": attempts})


class ResolutionError(UpstreamError):
    """Upstream was reachable but had nothing usable for the league."""

    def __init__(self, message: str, *, code: str, league_id: int, season: int | None = None) -> None:
        super().__init__(message=message, code=code, details={"league_id": league_id, "season": season})


@dataclass(frozen=True)
class FetchResult:
    ok: bool
    data: Any | None = None
    error: UpstreamError | None = None
    status: int | None = None
    attempts: int = 0
    from_cache: bool = False

    @classmethod
    def success(cls, data: Any, *, status: int = 200, attempts: int = 1) -> "FetchResult":
        return cls(ok=True, data=data, status=status, attempts=attempts)

    @classmethod
    def failure(cls, error: UpstreamError, *, attempts: int = 0) -> "FetchResult":
        return cls(ok=False, error=error, status=error.status, attempts=attempts)

    def cached(self) -> "FetchResult":
        return FetchResult(
            ok=self.ok,
            data=self.data,
            error=self.error,
            status=self.status,
            attempts=0,
            from_cache=True,
        )

    @property
    def rows(self) -> list[Any]:
        if not self.ok or not isinstance(self.data, dict):
            return []
        response = self.data.get("response")
        return response if isinstance(response, list) else []

    def unwrap(self) -> Any:
        if self.ok:
            return self.data
        raise self.error or UpstreamError("Fetch failed without error detail.")
