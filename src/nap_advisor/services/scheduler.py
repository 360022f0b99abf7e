"""Background advisory refresh using APScheduler.

Keeps the cached advisory warm so page loads rarely wait on the Oura API.

Configuration:
    REFRESH_ENABLED: Enable/disable background refresh
    REFRESH_INTERVAL_MINUTES: How often to refresh (default: 5)

Usage:
    # In app startup
    scheduler = RefreshScheduler(nap_service)
    await scheduler.start()

    # In app shutdown
    await scheduler.stop()
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from nap_advisor.core.config import settings
from nap_advisor.services.fetch_errors import OuraAPIError

if TYPE_CHECKING:
    from apscheduler.job import Job

    from nap_advisor.services.nap_status import NapStatusService

logger = structlog.get_logger()


class RefreshScheduler:
    """Periodically recompute and re-cache the nap advisory.

    Attributes:
        service: Nap status service to refresh
        scheduler: APScheduler instance
        is_running: Whether scheduler is currently running
        last_run_at: Timestamp of last refresh
        last_run_stats: Outcome of last refresh
    """

    def __init__(
        self,
        service: NapStatusService,
        interval_minutes: int | None = None,
    ) -> None:
        """Initialize refresh scheduler.

        Args:
            service: Nap status service to refresh
            interval_minutes: Refresh interval (defaults to settings)
        """
        self.service = service
        self.interval_minutes = interval_minutes or settings.refresh_interval_minutes
        self.scheduler = AsyncIOScheduler()
        self.is_running = False
        self.last_run_at: datetime | None = None
        self.last_run_stats: dict[str, object] | None = None
        self._refresh_job: Job | None = None
        self.logger = logger.bind(component="refresh_scheduler")

    async def start(self) -> None:
        """Start the background scheduler."""
        if self.is_running:
            self.logger.warning("Scheduler already running")
            return

        self.logger.info("Starting refresh scheduler", interval_minutes=self.interval_minutes)

        self._refresh_job = self.scheduler.add_job(
            self.run_refresh,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id="refresh_nap_status",
            name="Refresh nap advisory",
            replace_existing=True,
            max_instances=1,  # Prevent overlapping runs
            next_run_time=datetime.now(UTC),  # Warm the cache right away
        )

        self.scheduler.start()
        self.is_running = True

        self.logger.info("Refresh scheduler started")

    async def stop(self) -> None:
        """Stop the background scheduler."""
        if not self.is_running:
            return

        self.logger.info("Stopping refresh scheduler")

        self.scheduler.shutdown(wait=False)
        self.is_running = False

        self.logger.info("Refresh scheduler stopped")

    async def run_refresh(self) -> None:
        """Refresh the advisory once.

        Failures are logged and recorded; the next interval tries again.
        """
        start_time = datetime.now(UTC)

        try:
            advisory = await self.service.refresh()
        except OuraAPIError as e:
            self.logger.warning("Advisory refresh failed", **e.error.to_log_dict())
            self.last_run_stats = {
                "error_type": e.error_type.value,
                "error": str(e),
                "timestamp": start_time.isoformat(),
            }
            return
        except Exception as e:
            self.logger.exception("Advisory refresh crashed", error=str(e))
            self.last_run_stats = {
                "error": str(e),
                "timestamp": start_time.isoformat(),
            }
            return

        end_time = datetime.now(UTC)
        self.last_run_at = end_time
        self.last_run_stats = {
            "sleep_category": advisory.sleep_category.value,
            "time_window": advisory.time_window.value,
            "needs_nap": advisory.needs_nap,
            "duration_ms": int((end_time - start_time).total_seconds() * 1000),
        }
        self.logger.info("Advisory refresh complete", **self.last_run_stats)

    def get_status(self) -> dict[str, object]:
        """Get scheduler status for monitoring."""
        next_run = None
        if self._refresh_job and self.is_running:
            next_run_time = self._refresh_job.next_run_time
            if next_run_time:
                next_run = next_run_time.isoformat()

        return {
            "is_running": self.is_running,
            "interval_minutes": self.interval_minutes,
            "next_run_at": next_run,
            "last_run_at": self.last_run_at.isoformat() if self.last_run_at else None,
            "last_run_stats": self.last_run_stats,
        }
