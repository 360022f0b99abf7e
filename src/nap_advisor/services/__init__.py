"""Application services."""

from nap_advisor.services.advisory import compute_advisory, get_cached_or_compute, resolve
from nap_advisor.services.cache import AdvisoryCache
from nap_advisor.services.fetch_errors import FetchErrorHandler, FetchErrorType, OuraAPIError
from nap_advisor.services.nap_status import NapStatusService
from nap_advisor.services.oura import OuraClient
from nap_advisor.services.scheduler import RefreshScheduler

__all__ = [
    "AdvisoryCache",
    "FetchErrorHandler",
    "FetchErrorType",
    "NapStatusService",
    "OuraAPIError",
    "OuraClient",
    "RefreshScheduler",
    "compute_advisory",
    "get_cached_or_compute",
    "resolve",
]
