from __future__ import annotations

import threading
import time
from typing import Any, Callable, Hashable


class TTLCache:
    """In-memory cache with a TTL per entry.

    Entries are replaced wholesale on write and never mutated in place.
    """

    def __init__(self, *, clock: Callable[[], float] | None = None, max_entries: int = 5000) -> None:
        self._clock = clock or time.monotonic
        self._max_entries = max_entries
        self._store: dict[Hashable, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                self._store.pop(key, None)
                return None
            return value

    def set(self, key: Hashable, value: Any, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            return
        with self._lock:
            if len(self._store) >= self._max_entries and key not in self._store:
                self._evict_expired()
                if len(self._store) >= self._max_entries:
                    oldest = min(self._store, key=lambda k: self._store[k][0])
                    self._store.pop(oldest, None)
            self._store[key] = (self._clock() + ttl_seconds, value)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def _evict_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (expires_at, _) in self._store.items() if expires_at <= now]:
            self._store.pop(key, None)


def make_cache_key(path: str, params: dict[str, Any] | None) -> tuple[str, tuple[tuple[str, str], ...]]:
    cleaned = clean_params(params)
    return path, tuple(sorted(cleaned.items()))


def clean_params(params: dict[str, Any] | None) -> dict[str, str]:
    if not params:
        return {}
    return {key: str(value) for key, value in params.items() if value is not None}
