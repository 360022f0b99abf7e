"""Tests for the background advisory refresh."""

from nap_advisor.services.fetch_errors import FetchError, FetchErrorType, OuraAPIError
from nap_advisor.services.nap_status import NapStatusService
from nap_advisor.services.scheduler import RefreshScheduler
from tests.fixtures.sleep_data import FakeFetcher, make_session


async def test_run_refresh_warms_cache(nap_service: NapStatusService, fetcher: FakeFetcher) -> None:
    """Test a refresh run caches a fresh advisory and records its outcome."""
    fetcher.sessions = [make_session(hours=7.0)]
    scheduler = RefreshScheduler(nap_service, interval_minutes=5)

    await scheduler.run_refresh()

    assert nap_service.get_cached() is not None
    assert scheduler.last_run_at is not None
    assert scheduler.last_run_stats is not None
    assert scheduler.last_run_stats["sleep_category"] == "sufficient"
    assert scheduler.last_run_stats["needs_nap"] is False


async def test_run_refresh_records_fetch_error(
    nap_service: NapStatusService, fetcher: FakeFetcher
) -> None:
    """Test an upstream failure is recorded and does not raise."""
    fetcher.error = OuraAPIError(
        FetchError(
            error_type=FetchErrorType.RATE_LIMITED,
            message="Too many requests to Oura API. Please try again later.",
            details={},
            retry_after_seconds=60,
        )
    )
    scheduler = RefreshScheduler(nap_service, interval_minutes=5)

    await scheduler.run_refresh()

    assert scheduler.last_run_at is None
    assert scheduler.last_run_stats is not None
    assert scheduler.last_run_stats["error_type"] == "rate_limited"
    assert nap_service.get_cached() is None


async def test_run_refresh_survives_unexpected_error(
    nap_service: NapStatusService, fetcher: FakeFetcher
) -> None:
    """Test a crash inside the job is contained."""
    fetcher.error = RuntimeError("boom")
    scheduler = RefreshScheduler(nap_service, interval_minutes=5)

    await scheduler.run_refresh()

    assert scheduler.last_run_stats is not None
    assert scheduler.last_run_stats["error"] == "boom"


def test_status_before_start(nap_service: NapStatusService) -> None:
    """Test the monitoring status of an idle scheduler."""
    scheduler = RefreshScheduler(nap_service, interval_minutes=7)

    status = scheduler.get_status()

    assert status == {
        "is_running": False,
        "interval_minutes": 7,
        "next_run_at": None,
        "last_run_at": None,
        "last_run_stats": None,
    }


async def test_start_and_stop(nap_service: NapStatusService) -> None:
    """Test the scheduler reports a next run while running."""
    scheduler = RefreshScheduler(nap_service, interval_minutes=5)

    await scheduler.start()
    try:
        status = scheduler.get_status()
        assert status["is_running"] is True
        assert status["next_run_at"] is not None
    finally:
        await scheduler.stop()

    assert scheduler.get_status()["is_running"] is False
