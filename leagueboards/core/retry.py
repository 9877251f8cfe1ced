from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackoffPolicy:
    """Attempt budget and delay schedule for one class of failure.

    ``delay_for(n)`` is the wait before retry number ``n`` (0-based):
    ``base_delay * multiplier**n`` for exponential schedules or
    ``base_delay * (n + 1)`` for linear ones, never above ``max_delay``.
    """

    max_attempts: int
    base_delay: float
    max_delay: float
    multiplier: float = 2.0
    linear: bool = False

    def delay_for(self, retry_index: int) -> float:
        if self.linear:
            raw = self.base_delay * (retry_index + 1)
        else:
            raw = self.base_delay * (self.multiplier**retry_index)
        return max(0.0, min(self.max_delay, raw))

    def delays(self) -> list[float]:
        return [self.delay_for(index) for index in range(max(self.max_attempts - 1, 0))]

    def allows_retry(self, attempts_made: int) -> bool:
        return attempts_made < self.max_attempts


def backoff_sleep(policy: BackoffPolicy, retry_index: int, *, floor: float | None = None) -> float:
    delay = policy.delay_for(retry_index)
    if floor is not None:
        delay = min(policy.max_delay, max(delay, floor))
    if delay > 0:
        time.sleep(delay)
    return delay


def retry_call(
    operation: Callable[[], T],
    *,
    policy: BackoffPolicy,
    should_retry: Callable[[T], bool],
    label: str = "operation",
) -> T:
    """Run ``operation`` until ``should_retry`` says the result is final or attempts run out.

    The last result is returned either way; callers decide what an exhausted
    result means.
    """
    attempt = 0
    while True:
        result = operation()
        attempt += 1
        if not should_retry(result) or not policy.allows_retry(attempt):
            return result
        delay = backoff_sleep(policy, attempt - 1)
        logger.debug("retrying %s attempt=%s delay=%.2fs", label, attempt + 1, delay)
