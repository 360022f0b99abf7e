"""Health check endpoint."""

from litestar import Router, get
from litestar.datastructures import State
from litestar.status_codes import HTTP_200_OK

from nap_advisor import __version__


@get("/health", status_code=HTTP_200_OK, sync_to_thread=False)
def health_check(state: State) -> dict[str, object]:
    """Health check endpoint.

    Returns:
        Status, version, cache statistics and refresh scheduler state
    """
    service = state.get("nap_service")
    scheduler = state.get("refresh_scheduler")

    return {
        "status": "ok",
        "version": __version__,
        "cache": service.cache.stats() if service else None,
        "refresh": scheduler.get_status() if scheduler else None,
    }


health_router = Router(path="/", route_handlers=[health_check])
