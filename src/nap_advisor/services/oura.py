"""Oura API v2 client.

Fetches sleep sessions for the subject's ring. Oura assigns sleep to the day
it ENDS, so last night's sleep is dated today; fetching a few days back plus
one day ahead captures split sessions, late syncs and same-day naps.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

import httpx
import structlog

from nap_advisor.core.config import settings
from nap_advisor.schemas.sleep import SleepSession
from nap_advisor.services.fetch_errors import (
    FetchError,
    FetchErrorHandler,
    FetchErrorType,
    OuraAPIError,
)
from nap_advisor.transformers.sleep import SleepTransformer

logger = structlog.get_logger()

SLEEP_ENDPOINT = "/usercollection/sleep"
PERSONAL_INFO_ENDPOINT = "/usercollection/personal_info"

# Upper bound on next_token pages followed for one request
MAX_PAGES = 10


class OuraClient:
    """Async client for the Oura sleep endpoints.

    Usage:
        client = OuraClient(token)
        sessions = await client.fetch_recent_sessions(today)
    """

    def __init__(
        self,
        access_token: str | None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Oura client.

        Args:
            access_token: Oura personal access token
            base_url: API base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            transport: Optional httpx transport (used by tests)
        """
        self.access_token = access_token
        self.base_url = (base_url or settings.oura_api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.oura_timeout_seconds
        self.transport = transport
        self.error_handler = FetchErrorHandler()
        self.logger = logger.bind(service="oura")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self.transport,
        )

    def _require_token(self) -> None:
        if not self.access_token:
            raise OuraAPIError(
                FetchError(
                    error_type=FetchErrorType.NOT_CONFIGURED,
                    message="Oura API token not configured",
                    details={},
                )
            )

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """GET an endpoint and decode its JSON body.

        Raises:
            OuraAPIError: On any transport, status or decoding failure
        """
        context: dict[str, Any] = {"endpoint": endpoint}
        if params:
            context.update({k: v for k, v in params.items() if k != "next_token"})
        try:
            response = await client.get(endpoint, params=params)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise OuraAPIError(self.error_handler.classify(e, context=context)) from e

        if not isinstance(body, dict):
            raise OuraAPIError(
                self.error_handler.classify(
                    ValueError(f"Expected JSON object, got {type(body).__name__}"),
                    context=context,
                )
            )
        return body

    async def fetch_sleep_records(self, start_date: date, end_date: date) -> list[dict[str, Any]]:
        """Fetch raw sleep records for an inclusive date range, following pagination.

        Raises:
            OuraAPIError: If the token is missing or the request fails
        """
        self._require_token()
        params = {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()}
        records: list[dict[str, Any]] = []

        async with self._client() as client:
            for _ in range(MAX_PAGES):
                body = await self._get_json(client, SLEEP_ENDPOINT, params)
                data = body.get("data")
                if isinstance(data, list):
                    records.extend(data)
                next_token = body.get("next_token")
                if not next_token:
                    break
                params = {**params, "next_token": next_token}
            else:
                self.logger.warning("Stopped following sleep pagination", max_pages=MAX_PAGES)

        self.logger.info(
            "Fetched sleep records",
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            records=len(records),
        )
        return records

    async def fetch_sessions(self, start_date: date, end_date: date) -> list[SleepSession]:
        """Fetch sleep sessions for an inclusive date range."""
        records = await self.fetch_sleep_records(start_date, end_date)
        return SleepTransformer.transform_many(records)

    async def fetch_recent_sessions(self, today: date) -> list[SleepSession]:
        """Fetch sessions from a few days before ``today`` through tomorrow."""
        start_date = today - timedelta(days=settings.sleep_lookback_days)
        end_date = today + timedelta(days=1)
        return await self.fetch_sessions(start_date, end_date)

    async def get_personal_info(self) -> dict[str, Any]:
        """Fetch the ring owner's personal info."""
        self._require_token()
        async with self._client() as client:
            return await self._get_json(client, PERSONAL_INFO_ENDPOINT)

    async def validate_token(self) -> bool:
        """Check whether the configured token is accepted by Oura.

        Returns:
            True if valid, False if Oura rejects it

        Raises:
            OuraAPIError: For failures other than authentication
        """
        try:
            await self.get_personal_info()
        except OuraAPIError as e:
            if e.error_type == FetchErrorType.AUTH_FAILURE:
                return False
            raise
        return True
