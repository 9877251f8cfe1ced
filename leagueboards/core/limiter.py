from __future__ import annotations

from collections import deque
from concurrent.futures import ThreadPoolExecutor
import threading
import time
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ConcurrencyLimiter:
    """Admits at most ``limit`` concurrent calls, releasing queued callers in FIFO order.

    ``min_interval`` additionally spaces out admissions so bursts of queued
    work reach the upstream at a steady pace.
    """

    def __init__(self, limit: int, *, min_interval: float = 0.0) -> None:
        if limit < 1:
            raise ValueError(f"ConcurrencyLimiter requires limit >= 1, got {limit}")
        self.limit = limit
        self.min_interval = max(0.0, min_interval)
        self._cond = threading.Condition()
        self._queue: deque[object] = deque()
        self._active = 0
        self._peak_active = 0
        self._throttle_lock = threading.Lock()
        self._next_allowed_at = 0.0

    @property
    def active(self) -> int:
        with self._cond:
            return self._active

    @property
    def waiting(self) -> int:
        with self._cond:
            return len(self._queue)

    @property
    def peak_active(self) -> int:
        with self._cond:
            return self._peak_active

    def acquire(self) -> None:
        ticket = object()
        with self._cond:
            self._queue.append(ticket)
            while self._queue[0] is not ticket or self._active >= self.limit:
                self._cond.wait()
            self._queue.popleft()
            self._active += 1
            self._peak_active = max(self._peak_active, self._active)
            # the next ticket may be admissible too
            self._cond.notify_all()
        self._throttle()

    def release(self) -> None:
        with self._cond:
            if self._active <= 0:
                raise RuntimeError("ConcurrencyLimiter.release() called without a matching acquire()")
            self._active -= 1
            self._cond.notify_all()

    def run(self, fn: Callable[..., R], *args, **kwargs) -> R:
        self.acquire()
        try:
            return fn(*args, **kwargs)
        finally:
            self.release()

    __call__ = run

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> list[R]:
        """Apply ``fn`` to every item through the limiter; results keep input order."""
        work = list(items)
        if not work:
            return []
        with ThreadPoolExecutor(max_workers=min(self.limit, len(work))) as executor:
            futures = [executor.submit(self.run, fn, item) for item in work]
            return [future.result() for future in futures]

    def _throttle(self) -> None:
        if self.min_interval <= 0:
            return
        with self._throttle_lock:
            now = time.monotonic()
            start_at = max(now, self._next_allowed_at)
            self._next_allowed_at = start_at + self.min_interval
        wait_seconds = start_at - now
        if wait_seconds > 0:
            time.sleep(wait_seconds)
