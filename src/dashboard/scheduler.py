"""
Dashboard refresh scheduler.

Manages the periodic refresh job:
- Immediate refresh on start
- Refresh every `refresh_interval_seconds` afterwards
- At most one refresh in flight (an overrunning cycle skips the next trigger)

Uses APScheduler's asyncio scheduler so refreshes run on the app's event loop.
"""

from datetime import datetime
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from src.dashboard.config import DashboardConfig

REFRESH_JOB_ID = "dashboard_refresh"


class RefreshScheduler:
    """Interval scheduler for snapshot refreshes."""

    def __init__(self, config: DashboardConfig):
        """
        Initialize scheduler.

        Args:
            config: Dashboard configuration (refresh interval)
        """
        self.config = config
        self.scheduler = AsyncIOScheduler()

        # Job callback (set by the synchronizer)
        self._refresh_callback: Optional[Callable[[], Awaitable]] = None

        self._is_running = False

    @property
    def interval_seconds(self) -> int:
        return self.config.refresh_interval_seconds

    def set_callbacks(self, refresh: Optional[Callable[[], Awaitable]] = None) -> None:
        """
        Set job callbacks.

        Args:
            refresh: Coroutine function running one synchronization cycle
        """
        self._refresh_callback = refresh

    def setup_jobs(self) -> None:
        """Configure the refresh job."""
        if not self._refresh_callback:
            logger.warning("No refresh callback set, scheduler has nothing to run")
            return

        self.scheduler.add_job(
            self._run_refresh,
            IntervalTrigger(seconds=self.interval_seconds),
            id=REFRESH_JOB_ID,
            name="Dashboard Refresh",
            next_run_time=datetime.now(),
            max_instances=1,
            coalesce=True,
            misfire_grace_time=self.interval_seconds,
            replace_existing=True,
        )

    # ── Job Runners (with error handling) ────────────────────────────────

    async def _run_refresh(self) -> None:
        """Run refresh with error handling."""
        if self._refresh_callback:
            try:
                await self._refresh_callback()
            except Exception as e:
                logger.error(f"Dashboard refresh error: {e}")

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self) -> None:
        """Start the scheduler. Must be called with a running event loop."""
        if not self._is_running:
            self.setup_jobs()
            self.scheduler.start()
            self._is_running = True
            logger.info(f"Scheduler started | Refresh: every {self.interval_seconds}s")

    def stop(self) -> None:
        """Stop the scheduler and drop pending jobs."""
        if self._is_running:
            self.scheduler.remove_all_jobs()
            self.scheduler.shutdown(wait=False)
            self._is_running = False
            logger.info("Scheduler stopped")

    def get_next_run_time(self) -> Optional[datetime]:
        """Next scheduled refresh, None when stopped."""
        job = self.scheduler.get_job(REFRESH_JOB_ID) if self._is_running else None
        return job.next_run_time if job else None

    def get_jobs(self) -> list[dict]:
        """Get list of scheduled jobs with next run times."""
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
            }
            for job in self.scheduler.get_jobs()
        ]

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._is_running
