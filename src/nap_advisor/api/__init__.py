"""API routes."""

from litestar import Router

from nap_advisor.api.health import health_router
from nap_advisor.api.nap import nap_router
from nap_advisor.core.config import settings

api_router = Router(path=settings.api_prefix, route_handlers=[nap_router])

# Export: health (root), api (prefixed)
api_routers = [health_router, api_router]

__all__ = ["api_routers"]
