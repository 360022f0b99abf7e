"""Litestar application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from litestar import Litestar
from litestar.config.cors import CORSConfig
from litestar.datastructures import State
from litestar.openapi import OpenAPIConfig

from nap_advisor import __version__
from nap_advisor.api import api_routers
from nap_advisor.core.config import settings
from nap_advisor.routes import root_redirect
from nap_advisor.services.cache import AdvisoryCache
from nap_advisor.services.nap_status import NapStatusService
from nap_advisor.services.oura import OuraClient
from nap_advisor.services.scheduler import RefreshScheduler

logging.basicConfig(format="%(message)s", level=settings.log_level)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


def build_nap_service() -> NapStatusService:
    """Create the nap status service from settings."""
    return NapStatusService(
        fetcher=OuraClient(settings.oura_api_token),
        cache=AdvisoryCache(default_ttl_seconds=settings.cache_ttl_seconds),
    )


@asynccontextmanager
async def lifespan(app: Litestar) -> AsyncIterator[None]:
    """Application lifespan manager.

    Starts the background advisory refresh when enabled and a token is
    configured, and stops it on shutdown.
    """
    logger.info(
        "Starting nap-advisor",
        version=__version__,
        environment=settings.environment.value,
        timezone=settings.timezone,
        oura_token="SET" if settings.oura_api_token else "MISSING",
        refresh_enabled=settings.refresh_enabled,
    )

    scheduler: RefreshScheduler | None = None
    if settings.refresh_enabled and settings.oura_api_token:
        scheduler = RefreshScheduler(app.state.nap_service)
        app.state.refresh_scheduler = scheduler
        await scheduler.start()
    else:
        logger.info("Advisory refresh disabled")

    yield

    if scheduler is not None:
        await scheduler.stop()
    logger.info("Shutdown complete")


def create_app(nap_service: NapStatusService | None = None) -> Litestar:
    """Create Litestar application.

    Args:
        nap_service: Service to serve advisories from (built from settings if omitted)

    Returns:
        Configured Litestar app instance
    """
    cors_config = None
    if settings.is_development():
        # Vite dev server for the frontend
        cors_config = CORSConfig(
            allow_origins=["http://localhost:5173"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_credentials=True,
        )

    return Litestar(
        route_handlers=[root_redirect, *api_routers],
        lifespan=[lifespan],
        state=State({"nap_service": nap_service or build_nap_service()}),
        cors_config=cors_config,
        openapi_config=OpenAPIConfig(
            title="nap-advisor API",
            version=__version__,
            description="Does Emily need a nap? Advisory from last night's Oura sleep data",
        ),
        debug=settings.log_level == "DEBUG",
    )


# Application instance
app = create_app()
