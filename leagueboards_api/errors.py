from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from leagueboards.core.errors import UpstreamError

UPSTREAM_STATUS = {
    "MISSING_CREDENTIAL": 500,
    "RATE_LIMITED": 503,
}


@dataclass
class AppError(Exception):
    message: str
    code: str
    status: int
    details: Any | None = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_upstream(cls, exc: UpstreamError) -> "AppError":
        return cls(
            message=exc.message,
            code=exc.code,
            status=UPSTREAM_STATUS.get(exc.code, 502),
            details=exc.details,
        )


def error_payload(message: str, code: str, status: int, details: Any | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "ok": False,
        "error": message,
        "code": code,
        "status": status,
    }
    if details is not None:
        payload["details"] = details
    return payload
