"""
State synchronizer.

Fetches all six agent resources concurrently, merges them with defaults into
one Snapshot and publishes it to the SnapshotStore. Runs on the refresh
scheduler and on demand (manual refresh from the dashboard).
"""

import asyncio
from datetime import datetime
from typing import Any, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from src.core.gateway import DataGateway
from src.core.models import (
    PerformancePoint,
    Portfolio,
    Position,
    Resource,
    Snapshot,
    StrategyStat,
    Trade,
    WatchlistItem,
)
from src.core.store import SnapshotStore
from src.dashboard.config import DashboardConfig
from src.dashboard.scheduler import RefreshScheduler
from src.metrics.calculations import next_update_time

ModelT = TypeVar("ModelT", bound=BaseModel)


class StateSynchronizer:
    """
    Periodic snapshot builder.

    Cycle:
    1. Fire one gateway request per resource, wait for all to settle
    2. Parse each payload, absent or malformed -> default, invalid rows dropped
    3. apiConnected = portfolio object was available
    4. Publish the complete snapshot (never a partial one)

    Lifetime is scoped: once stopped, the instance issues no more requests.
    """

    def __init__(
        self,
        gateway: DataGateway,
        store: SnapshotStore,
        config: DashboardConfig,
    ):
        """
        Initialize synchronizer.

        Args:
            gateway: Agent API gateway
            store: Read model the snapshots are published to
            config: Dashboard configuration (interval, portfolio baseline)
        """
        self.gateway = gateway
        self.store = store
        self.config = config
        self.scheduler = RefreshScheduler(config)
        self.scheduler.set_callbacks(refresh=self._run_cycle)

        self._stopped = False
        self._cycle_count = 0

    @property
    def baseline_portfolio(self) -> Portfolio:
        return Portfolio.baseline(self.config.portfolio_baseline_value)

    @property
    def cycle_count(self) -> int:
        """Number of snapshots published by this instance."""
        return self._cycle_count

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    # ── Synchronization ─────────────────────────────────────────────────

    async def synchronize(self) -> Snapshot:
        """
        Run one synchronization cycle.

        Returns:
            The new snapshot, or the current one if the synchronizer is stopped
        """
        if self._stopped:
            logger.debug("[SYNC] Synchronizer stopped, skipping refresh")
            return self.store.current

        resources = list(Resource)
        results = await asyncio.gather(
            *(self.gateway.fetch_resource(resource) for resource in resources),
            return_exceptions=True,
        )

        payloads: dict[Resource, Any] = {}
        for resource, result in zip(resources, results):
            if isinstance(result, BaseException):
                logger.warning(f"[SYNC] {resource.value} fetch failed: {result!r}")
                result = None
            payloads[resource] = result

        snapshot = self.build_snapshot(payloads)

        if self._stopped:
            # Stopped while requests were in flight
            logger.debug("[SYNC] Discarding snapshot from cycle finished after stop")
            return snapshot

        self.store.publish(snapshot)
        self._cycle_count += 1

        logger.info(
            f"[SYNC] {'connected' if snapshot.api_connected else 'DISCONNECTED'} | "
            f"{len(snapshot.positions)} positions, {len(snapshot.today_trades)} trades, "
            f"{len(snapshot.watchlist)} watchlist, {len(snapshot.strategy_stats)} strategies, "
            f"{len(snapshot.performance)} points"
        )
        return snapshot

    def build_snapshot(self, payloads: dict[Resource, Any]) -> Snapshot:
        """
        Merge raw payloads into a Snapshot.

        Args:
            payloads: Resource -> parsed JSON (None = absent). Missing keys count as absent.

        Returns:
            Snapshot stamped with the current time
        """
        portfolio = self._parse_portfolio(payloads.get(Resource.PORTFOLIO))

        return Snapshot(
            portfolio=portfolio if portfolio is not None else self.baseline_portfolio,
            positions=self._parse_collection(
                Resource.POSITIONS, payloads.get(Resource.POSITIONS), Position, key="id"
            ),
            today_trades=self._parse_collection(
                Resource.TODAY_TRADES, payloads.get(Resource.TODAY_TRADES), Trade
            ),
            watchlist=self._parse_collection(
                Resource.WATCHLIST, payloads.get(Resource.WATCHLIST), WatchlistItem, key="ticker"
            ),
            strategy_stats=self._parse_collection(
                Resource.STRATEGIES, payloads.get(Resource.STRATEGIES), StrategyStat, key="name"
            ),
            performance=self._parse_collection(
                Resource.PERFORMANCE, payloads.get(Resource.PERFORMANCE), PerformancePoint
            ),
            api_connected=portfolio is not None,
            last_update=datetime.now(),
        )

    @staticmethod
    def _parse_portfolio(payload: Any) -> Optional[Portfolio]:
        """Any object payload counts as connected. Unusable fields read as 0."""
        if payload is None:
            return None

        if not isinstance(payload, dict):
            logger.warning(
                f"[SYNC] Expected an object from {Resource.PORTFOLIO.value}, "
                f"got {type(payload).__name__}, using baseline"
            )
            return None

        try:
            return Portfolio.model_validate(payload)
        except ValidationError as e:
            invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
            logger.warning(
                f"[SYNC] Invalid {Resource.PORTFOLIO.value} fields read as 0: "
                f"{', '.join(sorted(map(str, invalid)))}"
            )

        usable = {
            k: v
            for k, v in payload.items()
            if k not in invalid and to_camel(str(k)) not in invalid
        }
        return Portfolio.model_validate(usable)

    @staticmethod
    def _parse_collection(
        resource: Resource,
        payload: Any,
        model: Type[ModelT],
        key: Optional[str] = None,
    ) -> tuple[ModelT, ...]:
        """Parse a list payload item by item. Invalid items are dropped."""
        if payload is None:
            return ()

        if not isinstance(payload, list):
            logger.warning(
                f"[SYNC] Expected a list from {resource.value}, got {type(payload).__name__}"
            )
            return ()

        items = []
        seen = set()
        for index, raw in enumerate(payload):
            try:
                item = model.model_validate(raw)
            except ValidationError as e:
                logger.warning(
                    f"[SYNC] Invalid item #{index} in {resource.value}, dropped: "
                    f"{e.error_count()} errors"
                )
                continue

            if key is not None:
                # Keys identify rows in the dashboard, keep the first of any duplicates
                value = getattr(item, key)
                if value in seen:
                    logger.warning(f"[SYNC] Duplicate {key}={value!r} in {resource.value}, dropped")
                    continue
                seen.add(value)

            items.append(item)
        return tuple(items)

    # ── Lifecycle ───────────────────────────────────────────────────────

    async def _run_cycle(self) -> None:
        await self.synchronize()

    def start(self) -> None:
        """Refresh now and then every refresh interval. Needs a running event loop."""
        if self._stopped:
            raise RuntimeError("Synchronizer was stopped and cannot be restarted")
        self.scheduler.start()

    def stop(self) -> None:
        """Cancel the periodic refresh. No requests are issued afterwards."""
        self._stopped = True
        self.scheduler.stop()

    def next_refresh_time(self) -> datetime:
        """When the next scheduled refresh is due."""
        next_run = self.scheduler.get_next_run_time()
        if next_run is not None:
            return next_run
        return next_update_time(self.store.current, self.config.refresh_interval_seconds)
