from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import time
from typing import Any

import requests

from leagueboards.config.settings import settings
from leagueboards.core.cache import TTLCache, clean_params, make_cache_key
from leagueboards.core.errors import (
    FetchResult,
    MissingCredentialError,
    NetworkError,
    RateLimitError,
    UpstreamHttpError,
)
from leagueboards.core.retry import BackoffPolicy, backoff_sleep

RATE_LIMIT_ERROR_KEYS = {"ratelimit", "rate_limit"}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _safe_params(params: dict[str, Any] | None) -> dict[str, Any]:
    if not params:
        return {}
    safe: dict[str, Any] = {}
    for key, value in params.items():
        lowered = key.lower()
        if "token" in lowered or "key" in lowered or "secret" in lowered or "password" in lowered:
            safe[key] = "***"
        else:
            safe[key] = value
    return safe


def _http_logger() -> logging.Logger:
    return logging.getLogger("leagueboards_http_client")


def _retry_after_seconds(raw: str | None) -> float | None:
    if raw and raw.strip().isdigit():
        return float(raw.strip())
    return None


def _is_rate_limit_payload(errors: Any) -> bool:
    if isinstance(errors, dict):
        return any(str(key).lower() in RATE_LIMIT_ERROR_KEYS for key in errors)
    return False


class ProviderHttpClient:
    """GET client for the upstream sports API.

    Returns a ``FetchResult`` for every expected failure (missing key,
    exhausted 429s, 4xx, upstream ``errors`` envelope, network failures)
    instead of raising. 429 and 5xx/network failures have independent
    backoff schedules.
    """

    def __init__(
        self,
        *,
        provider: str = "api_football",
        base_url: str,
        api_key: str | None,
        auth_header: str = "x-apisports-key",
        timeout_seconds: float = 20.0,
        rate_limit_policy: BackoffPolicy | None = None,
        transient_policy: BackoffPolicy | None = None,
        cache: TTLCache | None = None,
        cache_ttl_seconds: float = 0.0,
        error_ttl_seconds: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.provider = provider
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.auth_header = auth_header
        self.timeout_seconds = timeout_seconds
        self.rate_limit_policy = rate_limit_policy or BackoffPolicy(max_attempts=6, base_delay=0.8, max_delay=16.0)
        self.transient_policy = transient_policy or BackoffPolicy(max_attempts=3, base_delay=0.4, max_delay=4.0)
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds
        self.error_ttl_seconds = error_ttl_seconds
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, *, cache: TTLCache | None = None, api_key: str | None = None) -> "ProviderHttpClient":
        return cls(
            base_url=settings.API_FOOTBALL_BASE_URL,
            api_key=api_key if api_key is not None else settings.API_FOOTBALL_KEY,
            timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
            rate_limit_policy=BackoffPolicy(
                max_attempts=settings.RATE_LIMIT_MAX_ATTEMPTS,
                base_delay=settings.RATE_LIMIT_BASE_DELAY,
                max_delay=settings.RATE_LIMIT_MAX_DELAY,
            ),
            transient_policy=BackoffPolicy(
                max_attempts=settings.TRANSIENT_MAX_ATTEMPTS,
                base_delay=settings.TRANSIENT_BASE_DELAY,
                max_delay=settings.TRANSIENT_MAX_DELAY,
            ),
            cache=cache if cache is not None else TTLCache(),
            cache_ttl_seconds=settings.CACHE_TTL_SECONDS,
            error_ttl_seconds=settings.CACHE_ERROR_TTL_SECONDS,
        )

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    def fetch(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        ttl_seconds: float | None = None,
        cache_empty: bool = True,
        cache_errors: bool = True,
    ) -> FetchResult:
        """GET ``path`` with ``params``; ``None`` params are dropped.

        ``cache_empty=False`` keeps successful responses with no rows out of
        the cache so data published later is picked up. ``cache_errors=False``
        does the same for failures, for callers that run their own retries.
        """
        ttl = self.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        use_cache = self.cache is not None and ttl > 0
        key = make_cache_key(path, params)

        if use_cache:
            hit = self.cache.get(key)
            if hit is not None:
                return hit.cached()

        if not self.api_key:
            return FetchResult.failure(MissingCredentialError())

        result = self._fetch_uncached(path, clean_params(params))

        if use_cache:
            if result.ok:
                if cache_empty or result.rows:
                    self.cache.set(key, result, ttl)
            elif cache_errors:
                self.cache.set(key, result, min(self.error_ttl_seconds, ttl))
        return result

    def _fetch_uncached(self, path: str, params: dict[str, str]) -> FetchResult:
        url = f"{self.base_url}{path}"
        headers = {self.auth_header: self.api_key or ""}
        attempts = 0
        rate_limited = 0
        transient = 0

        while True:
            attempts += 1
            started = time.perf_counter()
            try:
                response = self._session.request(
                    method="GET",
                    url=url,
                    params=params,
                    headers=headers,
                    timeout=self.timeout_seconds,
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                transient += 1
                retry = self.transient_policy.allows_retry(transient)
                self._log(
                    path=path,
                    params=params,
                    status_code=None,
                    attempt=attempts,
                    started=started,
                    final=not retry,
                    error=type(exc).__name__,
                )
                if not retry:
                    return FetchResult.failure(
                        NetworkError(
                            f"provider={self.provider} path={path} network failure after {attempts} attempts: {exc}",
                            attempts=attempts,
                        ),
                        attempts=attempts,
                    )
                backoff_sleep(self.transient_policy, transient - 1)
                continue

            status_code = response.status_code
            payload: Any = None
            if status_code == 200:
                try:
                    payload = response.json()
                except ValueError:
                    payload = None
                if isinstance(payload, dict) and _is_rate_limit_payload(payload.get("errors")):
                    # API-Football reports per-minute throttling as a 200 with an errors envelope
                    status_code = 429

            if status_code == 429:
                rate_limited += 1
                retry = self.rate_limit_policy.allows_retry(rate_limited)
                self._log(
                    path=path,
                    params=params,
                    status_code=status_code,
                    attempt=attempts,
                    started=started,
                    final=not retry,
                    error="rate_limited",
                )
                if not retry:
                    return FetchResult.failure(
                        RateLimitError(
                            f"provider={self.provider} path={path} rate limited after {attempts} attempts",
                            attempts=attempts,
                        ),
                        attempts=attempts,
                    )
                backoff_sleep(
                    self.rate_limit_policy,
                    rate_limited - 1,
                    floor=_retry_after_seconds(response.headers.get("Retry-After")),
                )
                continue

            if 500 <= status_code <= 599:
                transient += 1
                retry = self.transient_policy.allows_retry(transient)
                self._log(
                    path=path,
                    params=params,
                    status_code=status_code,
                    attempt=attempts,
                    started=started,
                    final=not retry,
                    error=f"retryable_status={status_code}",
                )
                if not retry:
                    return FetchResult.failure(
                        UpstreamHttpError(
                            f"provider={self.provider} path={path} status={status_code}",
                            status=status_code,
                            body=response.text or "",
                        ),
                        attempts=attempts,
                    )
                backoff_sleep(self.transient_policy, transient - 1)
                continue

            if not 200 <= status_code <= 299:
                self._log(
                    path=path,
                    params=params,
                    status_code=status_code,
                    attempt=attempts,
                    started=started,
                    final=True,
                    error=f"http_error status={status_code}",
                )
                return FetchResult.failure(
                    UpstreamHttpError(
                        f"provider={self.provider} path={path} status={status_code}",
                        status=status_code,
                        body=response.text or "",
                    ),
                    attempts=attempts,
                )

            if payload is None:
                try:
                    payload = response.json()
                except ValueError:
                    payload = None
            if not isinstance(payload, dict):
                self._log(
                    path=path,
                    params=params,
                    status_code=status_code,
                    attempt=attempts,
                    started=started,
                    final=True,
                    error="invalid_json",
                )
                return FetchResult.failure(
                    UpstreamHttpError(
                        f"provider={self.provider} path={path} returned a non-JSON object payload",
                        status=status_code,
                        body=response.text or "",
                    ),
                    attempts=attempts,
                )

            errors = payload.get("errors")
            if errors:
                self._log(
                    path=path,
                    params=params,
                    status_code=status_code,
                    attempt=attempts,
                    started=started,
                    final=True,
                    error="api_errors",
                )
                return FetchResult.failure(
                    UpstreamHttpError(
                        f"provider={self.provider} path={path} errors={errors}",
                        status=status_code,
                        body=json.dumps(errors, ensure_ascii=False, default=str),
                    ),
                    attempts=attempts,
                )

            self._log(
                path=path,
                params=params,
                status_code=status_code,
                attempt=attempts,
                started=started,
                final=True,
            )
            return FetchResult.success(
                payload,
                status=status_code,
                attempts=attempts,
            )

    def _log(
        self,
        *,
        path: str,
        params: dict[str, Any] | None,
        status_code: int | None,
        attempt: int,
        started: float,
        final: bool,
        error: str | None = None,
    ) -> None:
        payload = {
            "ts": _utc_now(),
            "event": "http_get",
            "provider": self.provider,
            "path": path,
            "params": _safe_params(params),
            "status_code": status_code,
            "attempt": attempt,
            "duration_ms": int((time.perf_counter() - started) * 1000),
            "final": final,
            "error": error,
        }
        level = logging.INFO if error is None or not final else logging.WARNING
        _http_logger().log(level, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))
