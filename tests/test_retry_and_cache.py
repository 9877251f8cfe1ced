from __future__ import annotations

from leagueboards.core.cache import TTLCache, make_cache_key
from leagueboards.core.retry import BackoffPolicy, backoff_sleep, retry_call


def test_exponential_policy_doubles_and_caps():
    policy = BackoffPolicy(max_attempts=7, base_delay=1.0, max_delay=15.0)

    assert policy.delays() == [1.0, 2.0, 4.0, 8.0, 15.0, 15.0]


def test_linear_policy_grows_by_base_delay():
    policy = BackoffPolicy(max_attempts=3, base_delay=0.5, max_delay=2.0, linear=True)

    assert policy.delays() == [0.5, 1.0]
    assert policy.allows_retry(2)
    assert not policy.allows_retry(3)


def test_backoff_sleep_floor_is_capped(sleeps):
    policy = BackoffPolicy(max_attempts=3, base_delay=0.5, max_delay=4.0)

    assert backoff_sleep(policy, 0, floor=60) == 4.0
    assert sleeps == [4.0]


def test_retry_call_returns_last_result_when_exhausted(sleeps):
    calls = []

    def operation():
        calls.append(1)
        return len(calls)

    result = retry_call(operation, policy=BackoffPolicy(3, 0.1, 1.0), should_retry=lambda value: True)

    assert result == 3
    assert len(sleeps) == 2


def test_retry_call_stops_on_final_result(sleeps):
    results = iter([None, "done", "unused"])

    result = retry_call(lambda: next(results), policy=BackoffPolicy(5, 0.1, 1.0), should_retry=lambda v: v is None)

    assert result == "done"
    assert sleeps == [0.1]


def test_ttl_cache_expires_entries():
    now = [0.0]
    cache = TTLCache(clock=lambda: now[0])
    cache.set("key", "value", 10)
    cache.set("skip", "value", 0)

    assert cache.get("key") == "value"
    assert cache.get("skip") is None
    now[0] = 10.0
    assert cache.get("key") is None
    assert len(cache) == 0


def test_ttl_cache_evicts_oldest_when_full():
    now = [0.0]
    cache = TTLCache(clock=lambda: now[0], max_entries=2)
    cache.set("a", 1, 10)
    cache.set("b", 2, 20)
    cache.set("c", 3, 30)

    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3


def test_cache_key_ignores_param_order_and_none():
    assert make_cache_key("/teams", {"season": 2025, "league": 39, "x": None}) == make_cache_key(
        "/teams", {"league": "39", "season": "2025"}
    )
