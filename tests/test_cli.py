"""CLI tests."""

import json

import pytest
from typer.testing import CliRunner

from nap_advisor import __version__
from nap_advisor.cli import app
from nap_advisor.services.fetch_errors import FetchError, FetchErrorType, OuraAPIError
from nap_advisor.services.nap_status import NapStatusService
from tests.fixtures.sleep_data import FakeFetcher, make_session

runner = CliRunner()


def test_version() -> None:
    """Test the version command."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_status_prints_advisory(
    monkeypatch: pytest.MonkeyPatch, nap_service: NapStatusService, fetcher: FakeFetcher
) -> None:
    """Test the status command prints the advisory as JSON."""
    fetcher.sessions = [make_session(hours=5.0)]
    monkeypatch.setattr("nap_advisor.app.build_nap_service", lambda: nap_service)

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["sleep_category"] == "struggling"
    assert data["time_window"] == "pre-nap"


def test_status_reports_fetch_error(
    monkeypatch: pytest.MonkeyPatch, nap_service: NapStatusService, fetcher: FakeFetcher
) -> None:
    """Test the status command exits non-zero when Oura cannot be reached."""
    fetcher.error = OuraAPIError(
        FetchError(
            error_type=FetchErrorType.NOT_CONFIGURED,
            message="Oura API token not configured",
            details={},
        )
    )
    monkeypatch.setattr("nap_advisor.app.build_nap_service", lambda: nap_service)

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 1
