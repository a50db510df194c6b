"""
Trading dashboard service.

Wires the agent gateway, snapshot store, synchronizer and web app together.

Architecture:
- httpx async client for the six agent API resources
- APScheduler interval job for the periodic refresh
- FastAPI app serving the snapshot, metrics and page
"""

import asyncio
import signal
from typing import Optional

from loguru import logger

from src.core.gateway import DataGateway
from src.core.models import Snapshot
from src.core.store import SnapshotStore
from src.dashboard.config import DashboardConfig, get_dashboard_config
from src.dashboard.synchronizer import StateSynchronizer


class DashboardService:
    """
    Dashboard controller.

    Flow: Scheduler -> Synchronizer -> Gateway (x6) -> Store -> Web app
    """

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        gateway: Optional[DataGateway] = None,
    ):
        """
        Initialize dashboard service.

        Args:
            config: Dashboard configuration (uses default if None)
            gateway: Agent gateway (built from config if None)
        """
        self.config = config or get_dashboard_config()

        self.gateway = gateway or DataGateway(
            base_url=self.config.api_base_url,
            timeout=self.config.request_timeout_seconds,
        )
        self.store = SnapshotStore(Snapshot.initial(self.config.portfolio_baseline_value))
        self.synchronizer = StateSynchronizer(
            gateway=self.gateway,
            store=self.store,
            config=self.config,
        )

        self._running = False
        self._shutdown_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start periodic refresh and wait until shutdown is requested."""
        logger.info("Starting trading dashboard...")
        logger.info(f"  Agent API: {self.config.api_base_url}")
        logger.info(f"  Refresh: every {self.config.refresh_interval_seconds}s")
        logger.info(f"  Baseline portfolio: {self.config.portfolio_baseline_value:,.2f}")

        self.synchronizer.start()
        self._running = True

        await self._shutdown_event.wait()

    async def stop(self) -> None:
        """Stop refreshing and release the HTTP client."""
        if not self._running and self._shutdown_event.is_set():
            return

        logger.info("Stopping trading dashboard...")
        self._running = False
        self.synchronizer.stop()
        await self.gateway.close()

        logger.info("Trading dashboard stopped")
        self._shutdown_event.set()

    def request_shutdown(self) -> None:
        """Request shutdown (called from signal handler)."""
        asyncio.create_task(self.stop())

    async def refresh_once(self) -> Snapshot:
        """Run a single synchronization cycle without the scheduler."""
        try:
            return await self.synchronizer.synchronize()
        finally:
            await self.gateway.close()


def setup_signal_handlers(service: DashboardService) -> None:
    """Setup signal handlers for graceful shutdown."""

    def handle_signal(signum, frame):
        logger.warning(f"Received signal {signum}, shutting down...")
        service.request_shutdown()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)


async def run_dashboard(config: Optional[DashboardConfig] = None) -> None:
    """Run the dashboard refresh loop without the web server."""
    service = DashboardService(config)
    setup_signal_handlers(service)
    await service.start()


if __name__ == "__main__":
    asyncio.run(run_dashboard())
