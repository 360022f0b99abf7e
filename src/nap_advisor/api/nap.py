"""Nap advisory API endpoints."""

from typing import Annotated, Any

import structlog
from litestar import Request, Response, Router, get, post
from litestar.datastructures import State
from litestar.params import Parameter
from litestar.status_codes import HTTP_200_OK, HTTP_403_FORBIDDEN

from nap_advisor.core.auth import api_key_guard
from nap_advisor.core.config import settings
from nap_advisor.services.fetch_errors import FetchErrorType, OuraAPIError
from nap_advisor.services.nap_status import NapStatusService

logger = structlog.get_logger()

# Response body "error" title per error type
ERROR_TITLES = {
    FetchErrorType.AUTH_FAILURE: "Authentication failed",
    FetchErrorType.RATE_LIMITED: "Rate limit exceeded",
    FetchErrorType.NETWORK_UNAVAILABLE: "Service unavailable",
    FetchErrorType.API_ERROR: "Upstream error",
    FetchErrorType.INVALID_RESPONSE: "Upstream error",
    FetchErrorType.NOT_CONFIGURED: "Configuration error",
}


def get_service(state: State) -> NapStatusService:
    """Get the nap status service stored on application state."""
    service: NapStatusService = state.nap_service
    return service


def error_response(error: OuraAPIError) -> Response[dict[str, Any]]:
    """Convert a classified Oura failure into an API error response."""
    body: dict[str, Any] = {
        "error": ERROR_TITLES[error.error_type],
        "error_type": error.error_type.value,
        "message": error.error.message,
    }
    headers: dict[str, str] = {}
    if error.error.retry_after_seconds is not None:
        body["retry_after"] = error.error.retry_after_seconds
        headers["Retry-After"] = str(error.error.retry_after_seconds)

    return Response(content=body, status_code=error.error.http_status, headers=headers)


@get("/nap-status", status_code=HTTP_200_OK)
async def get_nap_status(request: Request[Any, Any, Any], state: State) -> Response[dict[str, Any]]:
    """Get the current nap advisory.

    Served from a short-lived cache when possible; cached responses carry
    ``cached: true`` and the time they were computed. Missing sleep data is a
    normal 200 with ``sleep_category: "no-data"``.

    Example response:
    ```json
    {
      "needs_nap": true,
      "nap_priority": "maybe",
      "message": "Maybe Nap Time",
      "sleep_hours": 5.2,
      "sleep_category": "struggling",
      "time_window": "nap",
      "has_napped_today": false,
      "cached": false
    }
    ```
    """
    log = logger.bind(path=request.url.path, user_agent=request.headers.get("User-Agent"))
    service = get_service(state)

    try:
        advisory, cached = await service.get_status()
    except OuraAPIError as e:
        log.warning("Nap status request failed", **e.error.to_log_dict())
        return error_response(e)

    body = advisory.model_dump(mode="json")
    body["cached"] = cached
    if cached:
        body["cache_time"] = body["generated_at"]

    log.info("Nap status served", message=advisory.message, cached=cached)
    return Response(content=body, status_code=HTTP_200_OK)


@get("/nap-recommendations", status_code=HTTP_200_OK)
async def get_nap_recommendations(state: State) -> Response[dict[str, Any]]:
    """Get the current advisory with concrete tips and local time info."""
    service = get_service(state)

    try:
        recommendations = await service.get_recommendations()
    except OuraAPIError as e:
        return error_response(e)

    return Response(content=recommendations.model_dump(mode="json"), status_code=HTTP_200_OK)


@get("/sleep-history", status_code=HTTP_200_OK)
async def get_sleep_history(
    state: State,
    days: Annotated[int, Parameter(query="days", default=7, ge=1, le=30)] = 7,
) -> Response[dict[str, Any]]:
    """Get sleep sessions for the last ``days`` days (ending yesterday).

    Example:
        GET /api/sleep-history?days=14
    """
    service = get_service(state)

    try:
        history = await service.get_sleep_history(days=days)
    except OuraAPIError as e:
        return error_response(e)

    return Response(content=history.model_dump(mode="json"), status_code=HTTP_200_OK)


@post("/cache/clear", status_code=HTTP_200_OK)
async def clear_cache(state: State) -> Response[dict[str, str]]:
    """Clear the advisory cache (development only)."""
    if not settings.is_development():
        return Response(
            content={"error": "Not available in production"},
            status_code=HTTP_403_FORBIDDEN,
        )

    get_service(state).clear_cache()
    return Response(content={"message": "Cache cleared successfully"}, status_code=HTTP_200_OK)


# Router for nap endpoints
nap_router = Router(
    path="/",
    route_handlers=[
        get_nap_status,
        get_nap_recommendations,
        get_sleep_history,
        clear_cache,
    ],
    guards=[api_key_guard],
    tags=["Nap"],
)
