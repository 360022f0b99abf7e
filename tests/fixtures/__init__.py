"""Test fixtures for nap-advisor."""

from tests.fixtures.sleep_data import (
    DENVER,
    TODAY,
    YESTERDAY,
    FakeFetcher,
    FakeMonotonic,
    FixedClock,
    at_local,
    make_session,
    oura_record,
)

__all__ = [
    "DENVER",
    "TODAY",
    "YESTERDAY",
    "FakeFetcher",
    "FakeMonotonic",
    "FixedClock",
    "at_local",
    "make_session",
    "oura_record",
]
