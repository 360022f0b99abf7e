"""Tests for the nap status service."""

from datetime import date

import pytest

from nap_advisor.schemas.advisory import SleepCategory, TimeWindow
from nap_advisor.schemas.sleep import SessionType, SleepHistoryEntry
from nap_advisor.services.fetch_errors import (
    FetchError,
    FetchErrorType,
    OuraAPIError,
)
from nap_advisor.services.nap_status import NapStatusService, summarize_history
from tests.fixtures.sleep_data import (
    TODAY,
    YESTERDAY,
    FakeFetcher,
    FakeMonotonic,
    FixedClock,
    at_local,
    make_session,
)


def auth_error() -> OuraAPIError:
    return OuraAPIError(
        FetchError(
            error_type=FetchErrorType.AUTH_FAILURE,
            message="Oura API token is invalid or expired",
            details={},
        )
    )


async def test_get_status_fetches_then_caches(
    nap_service: NapStatusService, fetcher: FakeFetcher
) -> None:
    """Test the first call fetches and the second is served from cache."""
    fetcher.sessions = [make_session(hours=5.0)]

    first, first_cached = await nap_service.get_status()
    second, second_cached = await nap_service.get_status()

    assert first_cached is False
    assert second_cached is True
    assert second == first
    assert fetcher.recent_calls == [TODAY]
    assert first.sleep_category == SleepCategory.STRUGGLING


async def test_cache_expires_after_ttl(
    nap_service: NapStatusService,
    fetcher: FakeFetcher,
    monotonic: FakeMonotonic,
    clock: FixedClock,
) -> None:
    """Test a new fetch happens once the TTL has passed."""
    await nap_service.get_status()
    monotonic.advance(300)
    clock.advance(minutes=5)

    _, cached = await nap_service.get_status()

    assert cached is False
    assert len(fetcher.recent_calls) == 2


async def test_window_change_invalidates_cache(
    nap_service: NapStatusService,
    fetcher: FakeFetcher,
    clock: FixedClock,
) -> None:
    """Test crossing into the nap window recomputes even within the TTL."""
    fetcher.sessions = [make_session(hours=5.0)]
    clock.now = at_local(13, 58)
    morning, _ = await nap_service.get_status()
    assert morning.needs_nap is False

    clock.now = at_local(14, 1)
    afternoon, cached = await nap_service.get_status()

    assert cached is False
    assert afternoon.time_window == TimeWindow.NAP
    assert afternoon.needs_nap is True


async def test_day_change_invalidates_cache(
    nap_service: NapStatusService,
    fetcher: FakeFetcher,
    clock: FixedClock,
) -> None:
    """Test a cached advisory from yesterday is not reused."""
    clock.now = at_local(21, 58, day=YESTERDAY)
    await nap_service.get_status()

    clock.now = at_local(10, 0)
    _, cached = await nap_service.get_status()

    assert cached is False
    assert fetcher.recent_calls == [YESTERDAY, TODAY]


async def test_fetch_error_propagates_and_is_not_cached(
    nap_service: NapStatusService, fetcher: FakeFetcher
) -> None:
    """Test upstream failures surface to the caller and leave the cache empty."""
    fetcher.error = auth_error()

    with pytest.raises(OuraAPIError) as exc_info:
        await nap_service.get_status()

    assert exc_info.value.error_type == FetchErrorType.AUTH_FAILURE
    assert nap_service.get_cached() is None


async def test_no_sessions_is_no_data_not_error(nap_service: NapStatusService) -> None:
    """Test an empty fetch is an advisory, not a failure."""
    advisory, _ = await nap_service.get_status()

    assert advisory.sleep_category == SleepCategory.NO_DATA
    assert advisory.needs_nap is False


async def test_refresh_replaces_cache(nap_service: NapStatusService, fetcher: FakeFetcher) -> None:
    """Test refresh always fetches and updates the cached advisory."""
    fetcher.sessions = [make_session(hours=7.0)]
    await nap_service.get_status()

    fetcher.sessions = [make_session(hours=3.0)]
    refreshed = await nap_service.refresh()
    current, cached = await nap_service.get_status()

    assert refreshed.sleep_category == SleepCategory.SEVERELY_DEPRIVED
    assert cached is True
    assert current == refreshed
    assert len(fetcher.recent_calls) == 2


async def test_clear_cache(nap_service: NapStatusService, fetcher: FakeFetcher) -> None:
    """Test clearing the cache forces the next request to fetch."""
    await nap_service.get_status()

    nap_service.clear_cache()
    _, cached = await nap_service.get_status()

    assert cached is False
    assert len(fetcher.recent_calls) == 2


async def test_get_recommendations(
    nap_service: NapStatusService, fetcher: FakeFetcher, clock: FixedClock
) -> None:
    """Test recommendations bundle the advisory, tips and local time."""
    fetcher.sessions = [make_session(hours=3.0)]
    clock.now = at_local(15, 10)

    result = await nap_service.get_recommendations()

    assert result.advisory.needs_nap is True
    assert result.recommendations[0] == "Take a 20-30 minute nap now"
    assert result.time_info.formatted == "3:10 PM"
    assert result.time_info.is_nap_time is True


async def test_sleep_history(nap_service: NapStatusService, fetcher: FakeFetcher) -> None:
    """Test history covers the days ending yesterday, oldest first."""
    fetcher.sessions = [
        make_session(hours=8.0, day=YESTERDAY, quality_score=90),
        make_session(hours=6.0, day=date(2026, 1, 12), quality_score=70),
        make_session(hours=7.0, day=TODAY, quality_score=80),
    ]

    history = await nap_service.get_sleep_history(days=7)

    assert fetcher.range_calls == [(date(2026, 1, 8), YESTERDAY)]
    assert history.start_date == date(2026, 1, 8)
    assert history.end_date == YESTERDAY
    assert [entry.date for entry in history.history] == [date(2026, 1, 12), YESTERDAY]
    assert history.history[1].quality == "Excellent"
    assert history.summary.total_days == 2
    assert history.summary.average_sleep == 7.0
    assert history.summary.average_score == 80


async def test_sleep_history_single_day(nap_service: NapStatusService, fetcher: FakeFetcher) -> None:
    """Test a one-day history is just yesterday."""
    await nap_service.get_sleep_history(days=1)

    assert fetcher.range_calls == [(YESTERDAY, YESTERDAY)]


def test_summarize_history_empty() -> None:
    """Test averages of an empty history are zero."""
    summary = summarize_history([])

    assert summary.total_days == 0
    assert summary.average_sleep == 0.0
    assert summary.average_score == 0


def test_summarize_history_missing_scores() -> None:
    """Test missing scores count as zero in the average."""
    entries = [
        SleepHistoryEntry(
            date=YESTERDAY,
            type=SessionType.MAIN_SLEEP,
            sleep_hours=6.5,
            score=None,
            quality="Unknown",
            efficiency=None,
        ),
        SleepHistoryEntry(
            date=TODAY,
            type=SessionType.MAIN_SLEEP,
            sleep_hours=7.5,
            score=80,
            quality="Good",
            efficiency=90,
        ),
    ]

    summary = summarize_history(entries)

    assert summary.average_sleep == 7.0
    assert summary.average_score == 40
