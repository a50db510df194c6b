"""
Pytest fixtures for dashboard tests.
"""

import asyncio
from typing import Any, Optional

import httpx
import pytest

from src.core.gateway import DataGateway
from src.core.models import Snapshot
from src.core.store import SnapshotStore
from src.dashboard.config import DashboardConfig
from src.dashboard.synchronizer import StateSynchronizer

AGENT_URL = "http://agent.test/api"


class FakeAgent:
    """In-process stand-in for the trading agent API."""

    def __init__(self, payloads: dict[str, Any]):
        self.payloads = payloads
        self.statuses: dict[str, int] = {}  # path -> forced HTTP status
        self.bodies: dict[str, bytes] = {}  # path -> raw (non-JSON) body
        self.unreachable: set[str] = set()
        self.timeouts: set[str] = set()
        self.calls: list[str] = []
        self.gate: Optional[asyncio.Event] = None  # hold responses until set

    async def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len("/api"):]
        self.calls.append(path)

        if self.gate is not None:
            await self.gate.wait()

        if path in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if path in self.timeouts:
            raise httpx.ReadTimeout("timed out", request=request)
        if path in self.statuses:
            return httpx.Response(self.statuses[path], json={"error": "unavailable"})
        if path in self.bodies:
            return httpx.Response(200, content=self.bodies[path])
        if path not in self.payloads:
            return httpx.Response(404)
        return httpx.Response(200, json=self.payloads[path])

    def fail_all(self) -> None:
        self.unreachable.update(self.payloads)


@pytest.fixture
def agent_payloads() -> dict[str, Any]:
    """Healthy agent responses for all six resources."""
    return {
        "/portfolio": {
            "totalValue": 10523.4,
            "dayChange": 123.4,
            "dayChangePercent": 1.19,
            "totalReturn": 5.23,
            "openPositions": 2,
            "closedToday": 2,
            "initialCapital": 10000,
        },
        "/positions": [
            {
                "id": 1,
                "ticker": "NVDA",
                "type": "buy",
                "strategy": "Momentum",
                "entry": 120.5,
                "current": 132.3,
                "leverage": 2,
                "pnl": 9.79,
                "confidence": 0.82,
            },
            {
                "id": 2,
                "ticker": "TSLA",
                "type": "sell",
                "strategy": "Mean Reversion",
                "entry": 240.0,
                "current": 247.2,
                "leverage": 1,
                "pnl": -3.0,
                "confidence": 0.64,
            },
        ],
        "/trades/today": [
            {"ticker": "AAPL", "type": "buy", "price": 189.2, "pnl": 5, "status": "closed"},
            {"ticker": "AMD", "type": "sell", "price": 160.1, "pnl": -2, "status": "closed"},
            {"ticker": "NVDA", "type": "buy", "price": 120.5, "pnl": None, "status": "open"},
        ],
        "/watchlist": [
            {"ticker": "MSFT", "price": 415.3, "change": 0.85},
            {"ticker": "META", "price": 502.1, "change": -1.2},
        ],
        "/strategies": [
            {"name": "Momentum", "trades": 12, "winRate": 58.3, "avgReturn": 2.1},
            {"name": "Mean Reversion", "trades": 8, "winRate": 42.0, "avgReturn": -0.4},
        ],
        "/performance": [
            {"time": "09:30", "value": 10400},
            {"time": "10:00", "value": 10455.5},
            {"time": "10:30", "value": 10523.4},
        ],
    }


@pytest.fixture
def fake_agent(agent_payloads) -> FakeAgent:
    return FakeAgent(agent_payloads)


@pytest.fixture
def gateway(fake_agent) -> DataGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_agent.handle))
    return DataGateway(AGENT_URL, timeout=5.0, client=client)


@pytest.fixture
def dashboard_config() -> DashboardConfig:
    return DashboardConfig(
        api_base_url=AGENT_URL,
        refresh_interval_seconds=30,
        portfolio_baseline_value=10000.0,
        currency="USD",
        currency_locale="en_US",
    )


@pytest.fixture
def store(dashboard_config) -> SnapshotStore:
    return SnapshotStore(Snapshot.initial(dashboard_config.portfolio_baseline_value))


@pytest.fixture
def synchronizer(gateway, store, dashboard_config) -> StateSynchronizer:
    return StateSynchronizer(gateway=gateway, store=store, config=dashboard_config)
