#!/usr/bin/env python3
"""
Trading dashboard CLI entry point.

Usage:
    python scripts/run_dashboard.py            # Run refresh loop + web server
    python scripts/run_dashboard.py --help     # Show help
    python scripts/run_dashboard.py --once     # Fetch once and print a summary
    python scripts/run_dashboard.py --no-server  # Refresh loop without web server
"""

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.dashboard.config import DashboardConfig, get_dashboard_config
from src.dashboard.main import DashboardService, run_dashboard
from src.metrics.calculations import summarize
from src.metrics.formatting import format_signed_pnl


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="TradeForge Dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_dashboard.py                 # Start the dashboard
    python scripts/run_dashboard.py --dry-run       # Show configuration and exit
    python scripts/run_dashboard.py --once          # One refresh, print summary
    python scripts/run_dashboard.py --no-server     # Refresh loop only, no web server

Environment variables (or in .env):
    API_BASE_URL              - Trading agent API base URL
    REFRESH_INTERVAL_SECONDS  - Poll interval (default: 30)
    PORTFOLIO_BASELINE_VALUE  - Portfolio value shown while disconnected
    DASHBOARD_PORT            - Web server port (default: 8080)
        """,
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show configuration and exit without running",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Synchronize once, print the snapshot summary and exit",
    )

    parser.add_argument(
        "--no-server",
        action="store_true",
        help="Run the refresh loop without the web server (Ctrl+C to stop)",
    )

    return parser.parse_args()


def configure_logging(config: DashboardConfig) -> None:
    logger.remove()
    logger.add(sys.stderr, level=config.log_level)


def show_config(config: DashboardConfig):
    """Display current configuration."""
    print("=" * 60)
    print("DASHBOARD CONFIGURATION")
    print("=" * 60)
    print()
    print(f"Agent API:        {config.api_base_url}")
    print(f"Request Timeout:  {config.request_timeout_seconds}s")
    print(f"Refresh Interval: {config.refresh_interval_seconds}s")
    print(f"Baseline Value:   {config.portfolio_baseline_value:,.2f}")
    print(f"Currency:         {config.currency} ({config.currency_locale})")
    print(f"Web Server:       {config.dashboard_host}:{config.dashboard_port}")
    print(f"Log Level:        {config.log_level}")
    print()
    print("=" * 60)


async def show_once(config: DashboardConfig):
    """Run one synchronization and display the result."""
    service = DashboardService(config)
    snapshot = await service.refresh_once()
    metrics = summarize(snapshot, currency=config.currency, locale=config.currency_locale)

    print("=" * 60)
    print("AGENT " + ("CONNECTED" if snapshot.api_connected else "DISCONNECTED"))
    print("=" * 60)
    print()
    print(f"Portfolio Value: {metrics.portfolio_value}")
    print(f"Day Change:      {metrics.day_change} ({metrics.day_change_percent})")
    print(f"Open Positions:  {metrics.open_positions} ({metrics.profitable_positions} in profit)")
    print(f"Today's Trades:  {metrics.trades_today} ({metrics.closed_today} closed)")
    print(
        f"Win Rate Today:  {metrics.win_rate_today}% "
        f"({metrics.winning_trades} / {metrics.closed_trades} wins)"
    )
    print()

    if snapshot.positions:
        print("Positions:")
        print("-" * 60)
        for p in snapshot.positions:
            side = "L" if p.is_long else "S"
            print(f"  {side} {p.ticker:8} {p.strategy or '':20} {format_signed_pnl(p.pnl or 0):>10}")
        print()

    print(f"Last update: {snapshot.last_update.strftime('%H:%M:%S')}")
    print("=" * 60)


async def run_with_api(config: DashboardConfig):
    """Run the refresh loop with the web server."""
    import uvicorn
    from src.dashboard.api import create_app

    service = DashboardService(config)
    app = create_app(service.synchronizer, config)

    api_config = uvicorn.Config(
        app,
        host=config.dashboard_host,
        port=config.dashboard_port,
        log_level="warning",
    )
    api_server = uvicorn.Server(api_config)

    service_task = asyncio.create_task(service.start())
    try:
        await api_server.serve()
    finally:
        await service.stop()
        await service_task


def main():
    """Main entry point."""
    args = parse_args()
    config = get_dashboard_config()
    configure_logging(config)

    if args.dry_run:
        show_config(config)
        return 0

    if args.once:
        asyncio.run(show_once(config))
        return 0

    if args.no_server:
        print("Starting refresh loop (no web server), press Ctrl+C to stop")
        asyncio.run(run_dashboard(config))
        return 0

    print("Starting trading dashboard...")
    print(f"Dashboard: http://localhost:{config.dashboard_port}")
    print("Press Ctrl+C to stop")
    print()

    try:
        asyncio.run(run_with_api(config))
    except KeyboardInterrupt:
        print("\nShutdown requested...")
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
