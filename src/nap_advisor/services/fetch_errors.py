"""Fetch error handler for consistent classification of Oura API failures.

The advisory engine never sees transport errors. Every failure talking to the
Oura API is classified here into a FetchErrorType, wrapped in an OuraAPIError
and turned into an HTTP status by the API layer.

Error Classification:

    AUTH_FAILURE (401): Token missing, invalid, expired or revoked
    RATE_LIMITED (429): Oura rate limit hit, retry after the given delay
    NETWORK_UNAVAILABLE (503): Oura unreachable, timed out or returned 5xx
    API_ERROR (502): Any other non-success response
    INVALID_RESPONSE (502): Response body was not the expected JSON
    NOT_CONFIGURED (500): No Oura token configured, nothing was requested
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
import structlog

logger = structlog.get_logger()

DEFAULT_RATE_LIMIT_RETRY_SECONDS = 60


class FetchErrorType(str, Enum):
    """Category of upstream fetch failure."""

    AUTH_FAILURE = "auth_failure"
    RATE_LIMITED = "rate_limited"
    NETWORK_UNAVAILABLE = "network_unavailable"
    API_ERROR = "api_error"
    INVALID_RESPONSE = "invalid_response"
    NOT_CONFIGURED = "not_configured"


# HTTP status returned to our own clients for each error type
HTTP_STATUS_FOR_ERROR: dict[FetchErrorType, int] = {
    FetchErrorType.AUTH_FAILURE: 401,
    FetchErrorType.RATE_LIMITED: 429,
    FetchErrorType.NETWORK_UNAVAILABLE: 503,
    FetchErrorType.API_ERROR: 502,
    FetchErrorType.INVALID_RESPONSE: 502,
    FetchErrorType.NOT_CONFIGURED: 500,
}


@dataclass
class FetchError:
    """Structured fetch error with classification and retry info.

    Attributes:
        error_type: Categorized error type
        message: Human-readable error message
        details: Additional error context as dict
        retry_after_seconds: Seconds to wait before retrying (None if no retry)
        original_exception: The exception that caused this error
    """

    error_type: FetchErrorType
    message: str
    details: dict[str, Any]
    retry_after_seconds: int | None = None
    original_exception: Exception | None = None

    @property
    def http_status(self) -> int:
        """HTTP status code to report to API clients."""
        return HTTP_STATUS_FOR_ERROR[self.error_type]

    def to_log_dict(self) -> dict[str, Any]:
        """Convert to dict for structured logging."""
        return {
            "error_type": self.error_type.value,
            "message": self.message,
            "retry_after_seconds": self.retry_after_seconds,
            **self.details,
        }


class OuraAPIError(Exception):
    """Raised by the Oura client for any classified fetch failure."""

    def __init__(self, error: FetchError) -> None:
        """Initialize with the classified error."""
        super().__init__(error.message)
        self.error = error

    @property
    def error_type(self) -> FetchErrorType:
        """Category of the failure."""
        return self.error.error_type


class FetchErrorHandler:
    """Classifies exceptions raised while fetching from the Oura API.

    Usage:
        handler = FetchErrorHandler()

        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise OuraAPIError(handler.classify(e, context={"endpoint": url})) from e
    """

    def __init__(self) -> None:
        """Initialize error handler."""
        self.logger = logger.bind(component="fetch_error_handler")

    def classify(
        self,
        exception: Exception,
        context: dict[str, Any] | None = None,
    ) -> FetchError:
        """Classify an exception into a FetchError.

        Args:
            exception: The exception to classify
            context: Additional context (endpoint, date range, etc.)

        Returns:
            FetchError with classification and retry info
        """
        context = context or {}

        if isinstance(exception, httpx.HTTPStatusError):
            return self._handle_http_status(exception, context)
        if isinstance(exception, httpx.TimeoutException):
            return self._handle_unreachable(exception, context, "Request to Oura API timed out")
        if isinstance(exception, httpx.TransportError):
            return self._handle_unreachable(exception, context, "Unable to connect to Oura API")
        if isinstance(exception, ValueError):
            return self._handle_invalid_response(exception, context)

        return self._handle_unknown_error(exception, context)

    def _handle_http_status(
        self,
        exception: httpx.HTTPStatusError,
        context: dict[str, Any],
    ) -> FetchError:
        """Handle non-success responses from the Oura API."""
        status_code = exception.response.status_code
        retry_after = None

        if status_code in (401, 403):
            error_type = FetchErrorType.AUTH_FAILURE
            message = "Oura API token is invalid or expired"
        elif status_code == 429:
            error_type = FetchErrorType.RATE_LIMITED
            retry_after = _parse_retry_after(exception.response)
            message = "Too many requests to Oura API. Please try again later."
        elif status_code >= 500:
            error_type = FetchErrorType.NETWORK_UNAVAILABLE
            message = "Oura API is unavailable. Please try again later."
        else:
            error_type = FetchErrorType.API_ERROR
            message = f"Oura API error: {status_code} {exception.response.reason_phrase}"

        self.logger.error(
            "Oura API status error",
            status_code=status_code,
            error_type=error_type.value,
            **context,
        )

        return FetchError(
            error_type=error_type,
            message=message,
            details={
                "status_code": status_code,
                "url": str(exception.request.url),
                **context,
            },
            retry_after_seconds=retry_after,
            original_exception=exception,
        )

    def _handle_unreachable(
        self,
        exception: httpx.HTTPError,
        context: dict[str, Any],
        message: str,
    ) -> FetchError:
        """Handle timeouts and connection failures."""
        self.logger.warning(message, error=str(exception), **context)

        return FetchError(
            error_type=FetchErrorType.NETWORK_UNAVAILABLE,
            message=f"{message}. Please try again later.",
            details={"error": str(exception), **context},
            original_exception=exception,
        )

    def _handle_invalid_response(
        self,
        exception: ValueError,
        context: dict[str, Any],
    ) -> FetchError:
        """Handle bodies that are not valid JSON."""
        self.logger.error(
            "Invalid Oura API response",
            error_type=type(exception).__name__,
            error=str(exception),
            **context,
        )

        return FetchError(
            error_type=FetchErrorType.INVALID_RESPONSE,
            message="Oura API returned an unreadable response",
            details={"error": str(exception)[:500], **context},
            original_exception=exception,
        )

    def _handle_unknown_error(
        self,
        exception: Exception,
        context: dict[str, Any],
    ) -> FetchError:
        """Handle unknown/unexpected errors."""
        self.logger.exception(
            "Unexpected Oura fetch error",
            error_type=type(exception).__name__,
            error=str(exception),
            **context,
        )

        return FetchError(
            error_type=FetchErrorType.API_ERROR,
            message=f"Unexpected error: {type(exception).__name__}: {exception}",
            details={
                "error_type": type(exception).__name__,
                "error": str(exception)[:500],
                **context,
            },
            original_exception=exception,
        )


def _parse_retry_after(response: httpx.Response) -> int:
    """Read Retry-After seconds from a 429 response."""
    value = response.headers.get("Retry-After")
    if value and value.isdigit():
        return int(value)
    return DEFAULT_RATE_LIMIT_RETRY_SECONDS
