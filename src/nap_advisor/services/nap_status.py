"""Nap status service.

Glues the Oura fetch, the advisory cache and the decision engine together for
the single configured subject.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

import structlog

from nap_advisor.core.config import settings
from nap_advisor.schemas.advisory import Advisory, DetailedRecommendations
from nap_advisor.schemas.sleep import (
    SleepHistory,
    SleepHistoryEntry,
    SleepHistorySummary,
    SleepSession,
)
from nap_advisor.services.advisory import (
    build_recommendations,
    build_time_info,
    compute_advisory,
)
from nap_advisor.services.cache import AdvisoryCache
from nap_advisor.services.classifiers import classify_time_window, local_now, quality_label

logger = structlog.get_logger()


class SleepSessionFetcher(Protocol):
    """Source of sleep sessions (the Oura client in production)."""

    async def fetch_recent_sessions(self, today: date) -> list[SleepSession]: ...

    async def fetch_sessions(self, start_date: date, end_date: date) -> list[SleepSession]: ...


def utc_now() -> datetime:
    """Current instant in UTC."""
    return datetime.now(UTC)


class NapStatusService:
    """Service producing the subject's current nap advisory.

    The advisory is cached for a few minutes. A cached advisory is only reused
    while the local day and time window it was computed for are still
    current, so crossing into the nap window always produces a fresh answer.
    """

    def __init__(
        self,
        fetcher: SleepSessionFetcher,
        cache: AdvisoryCache[Advisory] | None = None,
        tz: ZoneInfo | None = None,
        subject_key: str | None = None,
        ttl_seconds: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize nap status service.

        Args:
            fetcher: Sleep session source
            cache: Advisory cache (a new one is created if omitted)
            tz: Subject's timezone (defaults to settings)
            subject_key: Cache key for the subject (defaults to settings)
            ttl_seconds: Cache TTL (defaults to settings)
            clock: Returns the current instant (injectable for tests)
        """
        self.fetcher = fetcher
        self.ttl_seconds = ttl_seconds or settings.cache_ttl_seconds
        self.cache = cache if cache is not None else AdvisoryCache(self.ttl_seconds)
        self.tz = tz or settings.get_timezone()
        self.subject_key = subject_key or settings.subject_key
        self.clock = clock
        self._refresh_lock = asyncio.Lock()
        self.logger = logger.bind(service="nap_status")

    def _is_current(self, advisory: Advisory, now: datetime) -> bool:
        """Check whether a cached advisory still describes ``now``."""
        local = local_now(now, self.tz)
        generated_local = local_now(advisory.generated_at, self.tz)
        return (
            generated_local.date() == local.date()
            and advisory.time_window == classify_time_window(local.hour)
        )

    def get_cached(self) -> Advisory | None:
        """Get the cached advisory if it is still current."""
        cached = self.cache.get(self.subject_key)
        if cached is None:
            return None
        if not self._is_current(cached, self.clock()):
            self.logger.info(
                "Discarding cached advisory from an earlier window",
                cached_window=cached.time_window.value,
            )
            self.cache.delete(self.subject_key)
            return None
        return cached

    async def get_status(self) -> tuple[Advisory, bool]:
        """Get the current advisory.

        Returns:
            Tuple of (advisory, served_from_cache)

        Raises:
            OuraAPIError: If sleep data could not be fetched
        """
        cached = self.get_cached()
        if cached is not None:
            self.logger.debug("Serving cached advisory")
            return cached, True

        async with self._refresh_lock:
            # Another request may have refreshed while we waited
            cached = self.get_cached()
            if cached is not None:
                return cached, True
            return await self._compute_and_cache(), False

    async def refresh(self) -> Advisory:
        """Fetch fresh data and replace the cached advisory.

        Raises:
            OuraAPIError: If sleep data could not be fetched
        """
        async with self._refresh_lock:
            return await self._compute_and_cache()

    async def _compute_and_cache(self) -> Advisory:
        now = self.clock()
        today = local_now(now, self.tz).date()

        self.logger.info("Fetching sleep data", today=today.isoformat())
        sessions = await self.fetcher.fetch_recent_sessions(today)

        advisory = compute_advisory(sessions, now, self.tz)
        self.cache.set(self.subject_key, advisory, self.ttl_seconds)

        self.logger.info(
            "Nap status calculated",
            sessions=len(sessions),
            sleep_category=advisory.sleep_category.value,
            time_window=advisory.time_window.value,
            needs_nap=advisory.needs_nap,
            has_napped_today=advisory.has_napped_today,
        )
        return advisory

    async def get_recommendations(self) -> DetailedRecommendations:
        """Get the current advisory with concrete tips."""
        advisory, _ = await self.get_status()
        time_info = build_time_info(self.clock(), self.tz)
        return DetailedRecommendations(
            advisory=advisory,
            recommendations=build_recommendations(advisory, time_info),
            time_info=time_info,
        )

    async def get_sleep_history(self, days: int = 7) -> SleepHistory:
        """Get sleep sessions for the ``days`` days ending yesterday.

        Args:
            days: Number of days in the window

        Returns:
            History entries (oldest first) with averages
        """
        today = local_now(self.clock(), self.tz).date()
        end_date = today - timedelta(days=1)
        start_date = end_date - timedelta(days=days - 1)

        sessions = await self.fetcher.fetch_sessions(start_date, end_date)
        history = [
            SleepHistoryEntry(
                date=s.day,
                type=s.type,
                sleep_hours=round(s.sleep_hours, 1),
                score=s.quality_score,
                quality=quality_label(s.quality_score),
                efficiency=s.efficiency_percent,
            )
            for s in sorted(sessions, key=lambda s: s.day)
        ]

        return SleepHistory(
            start_date=start_date,
            end_date=end_date,
            history=history,
            summary=summarize_history(history),
        )

    def clear_cache(self) -> None:
        """Drop every cached advisory."""
        self.cache.flush()


def summarize_history(history: list[SleepHistoryEntry]) -> SleepHistorySummary:
    """Compute averages over history entries."""
    if not history:
        return SleepHistorySummary(average_sleep=0.0, average_score=0, total_days=0)

    total_sleep = sum(entry.sleep_hours for entry in history)
    total_score = sum(entry.score or 0 for entry in history)
    return SleepHistorySummary(
        average_sleep=round(total_sleep / len(history), 1),
        average_score=round(total_score / len(history)),
        total_days=len(history),
    )
