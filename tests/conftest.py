"""Shared test fixtures."""

from collections.abc import Iterator

import pytest

from nap_advisor.core.config import Environment, settings
from nap_advisor.services.cache import AdvisoryCache
from nap_advisor.services.nap_status import NapStatusService
from tests.fixtures.sleep_data import DENVER, FakeFetcher, FakeMonotonic, FixedClock, at_local


@pytest.fixture(autouse=True)
def isolated_settings() -> Iterator[None]:
    """Reset settings touched by tests to known values."""
    saved = (
        settings.environment,
        settings.api_key,
        settings.cache_ttl_seconds,
        settings.refresh_enabled,
    )
    settings.environment = Environment.PRODUCTION
    settings.api_key = None
    settings.cache_ttl_seconds = 300
    settings.refresh_enabled = False
    yield
    (
        settings.environment,
        settings.api_key,
        settings.cache_ttl_seconds,
        settings.refresh_enabled,
    ) = saved


@pytest.fixture
def clock() -> FixedClock:
    """Clock fixed at 10:00 Denver time."""
    return FixedClock(at_local(10))


@pytest.fixture
def monotonic() -> FakeMonotonic:
    """Fake monotonic clock for the cache."""
    return FakeMonotonic()


@pytest.fixture
def fetcher() -> FakeFetcher:
    """Fetcher with no sessions."""
    return FakeFetcher()


@pytest.fixture
def nap_service(
    fetcher: FakeFetcher, clock: FixedClock, monotonic: FakeMonotonic
) -> NapStatusService:
    """Nap status service wired to fakes."""
    return NapStatusService(
        fetcher=fetcher,
        cache=AdvisoryCache(default_ttl_seconds=300, clock=monotonic),
        tz=DENVER,
        subject_key="test_subject",
        ttl_seconds=300,
        clock=clock,
    )
