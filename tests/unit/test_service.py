"""
Tests for the dashboard service wiring.
"""

import asyncio
import signal

import pytest

from src.dashboard.main import DashboardService, setup_signal_handlers


@pytest.fixture
def service(dashboard_config, gateway) -> DashboardService:
    return DashboardService(config=dashboard_config, gateway=gateway)


class TestDashboardService:
    """Tests for DashboardService."""

    def test_initial_state(self, service):
        """Test the store starts with the configured baseline."""
        assert service.store.current.portfolio.total_value == 10000.0
        assert service.store.is_loaded is False
        assert service.synchronizer.store is service.store

    @pytest.mark.asyncio
    async def test_refresh_once(self, service, fake_agent):
        snapshot = await service.refresh_once()

        assert snapshot.api_connected is True
        assert service.store.current is snapshot
        assert len(fake_agent.calls) == 6

    @pytest.mark.asyncio
    async def test_start_and_stop(self, service, fake_agent):
        """Test start refreshes, stop ends refreshing and returns control."""
        task = asyncio.create_task(service.start())

        loop = asyncio.get_running_loop()
        deadline = loop.time() + 3.0
        while not service.store.is_loaded:
            assert loop.time() < deadline, "first refresh did not happen"
            await asyncio.sleep(0.01)

        assert service.is_running is True

        await service.stop()
        await asyncio.wait_for(task, timeout=1.0)
        calls = len(fake_agent.calls)
        await service.synchronizer.synchronize()

        assert service.is_running is False
        assert service.synchronizer.is_stopped is True
        assert len(fake_agent.calls) == calls


class TestSignalHandling:
    """Tests for graceful shutdown on SIGINT/SIGTERM."""

    @pytest.mark.asyncio
    async def test_signal_stops_service(self, service, fake_agent, monkeypatch):
        handlers = {}

        def register(signum, handler):
            handlers[signum] = handler

        monkeypatch.setattr(signal, "signal", register)

        setup_signal_handlers(service)
        assert set(handlers) == {signal.SIGINT, signal.SIGTERM}

        task = asyncio.create_task(service.start())
        loop = asyncio.get_running_loop()
        deadline = loop.time() + 3.0
        while not service.store.is_loaded:
            assert loop.time() < deadline, "first refresh did not happen"
            await asyncio.sleep(0.01)

        handlers[signal.SIGTERM](signal.SIGTERM, None)
        await asyncio.wait_for(task, timeout=1.0)

        assert service.is_running is False
        assert service.synchronizer.is_stopped is True
