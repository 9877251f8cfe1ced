"""Corner and card totals for the fixtures actually shown on a board."""
from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from leagueboards.core.errors import FetchResult, NetworkError, RateLimitError, UpstreamHttpError
from leagueboards.core.limiter import ConcurrencyLimiter
from leagueboards.core.retry import BackoffPolicy, retry_call
from leagueboards.pipeline.models import FixtureStatistics
from leagueboards.providers.base import BoardDataProvider

logger = logging.getLogger(__name__)

CORNER_METRIC = "corner kicks"
YELLOW_METRIC = "yellow cards"
RED_METRIC = "red cards"

_INT_PATTERN = re.compile(r"-?\d+")


def _metric_value(value: Any) -> int | None:
    """Upstream reports ``null`` for a metric that happened zero times."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    stripped = str(value).strip()
    if _INT_PATTERN.fullmatch(stripped):
        return int(stripped)
    return None


def _sum_metric(rows: list[dict[str, Any]], metric: str) -> int | None:
    total: int | None = None
    for row in rows:
        for stat in (row or {}).get("statistics") or []:
            if str((stat or {}).get("type") or "").strip().lower() != metric:
                continue
            value = _metric_value((stat or {}).get("value"))
            if value is not None:
                total = (total or 0) + value
    return total


def corners_from_statistics(rows: list[dict[str, Any]]) -> int | None:
    if not rows:
        return None
    return _sum_metric(rows, CORNER_METRIC)


def cards_from_statistics(rows: list[dict[str, Any]]) -> int | None:
    if not rows:
        return None
    yellow = _sum_metric(rows, YELLOW_METRIC)
    red = _sum_metric(rows, RED_METRIC)
    if yellow is None and red is None:
        return None
    return (yellow or 0) + (red or 0)


def count_card_events(rows: list[dict[str, Any]]) -> tuple[int, int]:
    """(yellow, red) counts; a second yellow counts as a red card."""
    yellow = 0
    red = 0
    for event in rows:
        if str((event or {}).get("type") or "").strip().lower() != "card":
            continue
        detail = str((event or {}).get("detail") or "").lower()
        if "red" in detail or "second" in detail:
            red += 1
        else:
            yellow += 1
    return yellow, red


def _is_transient(result: FetchResult) -> bool:
    error = result.error
    if result.ok or error is None:
        return False
    if isinstance(error, (RateLimitError, NetworkError)):
        return True
    return isinstance(error, UpstreamHttpError) and (error.status or 0) >= 500


def _statistics_pending(result: FetchResult) -> bool:
    return _is_transient(result) or (result.ok and not result.rows)


class StatFetcher:
    def __init__(
        self,
        provider: BoardDataProvider,
        *,
        limiter: ConcurrencyLimiter | None = None,
        retry_policy: BackoffPolicy | None = None,
    ) -> None:
        self.provider = provider
        self.limiter = limiter or ConcurrencyLimiter(2)
        self.retry_policy = retry_policy or BackoffPolicy(max_attempts=3, base_delay=0.5, max_delay=2.0, linear=True)

    def stats_for(self, fixture_ids: Iterable[int]) -> dict[int, FixtureStatistics]:
        unique = sorted({fixture_id for fixture_id in fixture_ids if fixture_id})
        if not unique:
            return {}
        results = self.limiter.map(self.fetch_one, unique)
        stats = dict(zip(unique, results))
        logger.info(
            "fixture stats fetched fixtures=%s corners_missing=%s cards_missing=%s",
            len(stats),
            sum(1 for s in stats.values() if s.corners is None),
            sum(1 for s in stats.values() if s.cards is None),
        )
        return stats

    def fetch_one(self, fixture_id: int) -> FixtureStatistics:
        try:
            return self._fetch_one(fixture_id)
        except Exception:
            logger.exception("fixture stats failed fixture_id=%s", fixture_id)
            return FixtureStatistics()

    def _fetch_one(self, fixture_id: int) -> FixtureStatistics:
        statistics = retry_call(
            lambda: self.provider.get_fixture_statistics(fixture_id=fixture_id),
            policy=self.retry_policy,
            should_retry=_statistics_pending,
            label=f"statistics fixture={fixture_id}",
        )
        events = retry_call(
            lambda: self.provider.get_fixture_card_events(fixture_id=fixture_id),
            policy=self.retry_policy,
            should_retry=_is_transient,
            label=f"events fixture={fixture_id}",
        )
        if not statistics.ok:
            logger.warning("statistics unavailable fixture_id=%s error=%s", fixture_id, statistics.error)

        stat_rows = statistics.rows if statistics.ok else []
        corners = corners_from_statistics(stat_rows)

        cards: int | None = None
        if events.ok and events.rows:
            yellow, red = count_card_events(events.rows)
            cards = yellow + red
        if cards is None:
            cards = cards_from_statistics(stat_rows)
        if cards is None and events.ok and stat_rows:
            # both feeds published and neither lists a card
            cards = 0
        return FixtureStatistics(corners=corners, cards=cards)
