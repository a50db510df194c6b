"""
Derived dashboard statistics.

Pure functions over a Snapshot. All of them are total: empty collections,
missing P&L values and zero denominators produce 0 rather than errors.
"""

import math
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Optional

from src.core.models import Snapshot, Trade
from src.metrics.formatting import format_currency, format_percent


def value_or_zero(x: Optional[float]) -> float:
    return x if x is not None else 0.0


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def closed_trades(snapshot: Snapshot) -> list[Trade]:
    """Today's trades that have been closed."""
    return [t for t in snapshot.today_trades if t.is_closed]


def closed_trade_count(snapshot: Snapshot) -> int:
    return len(closed_trades(snapshot))


def winning_trade_count(snapshot: Snapshot) -> int:
    """Closed trades with positive P&L."""
    return sum(1 for t in closed_trades(snapshot) if value_or_zero(t.pnl) > 0)


def win_rate_today(snapshot: Snapshot) -> int:
    """
    Win rate of today's closed trades.

    Returns:
        Percentage of closed trades with pnl > 0, rounded half-up.
        0 when nothing has closed yet (open trades are ignored).
    """
    closed = closed_trade_count(snapshot)
    if closed == 0:
        return 0
    return round_half_up(winning_trade_count(snapshot) / closed * 100)


def profitable_position_count(snapshot: Snapshot) -> int:
    """Open positions currently in profit."""
    return sum(1 for p in snapshot.positions if value_or_zero(p.pnl) > 0)


def trade_count(snapshot: Snapshot) -> int:
    return len(snapshot.today_trades)


def next_update_time(snapshot: Snapshot, interval_seconds: float) -> datetime:
    """When the snapshot is due to be refreshed."""
    return snapshot.last_update + timedelta(seconds=interval_seconds)


def performance_domain(
    snapshot: Snapshot, padding: float = 100.0
) -> Optional[tuple[float, float]]:
    """
    Y-axis range for the intraday performance chart.

    Returns:
        (min - padding, max + padding), or None without data points
    """
    if not snapshot.performance:
        return None
    values = [value_or_zero(p.value) for p in snapshot.performance]
    return (min(values) - padding, max(values) + padding)


@dataclass
class DashboardMetrics:
    """Stat-card figures derived from one snapshot."""

    portfolio_value: str
    day_change: str
    day_change_percent: str
    day_change_positive: bool
    total_return: str
    open_positions: int
    profitable_positions: int
    trades_today: int
    closed_today: int
    closed_trades: int
    winning_trades: int
    win_rate_today: int

    def to_dict(self) -> dict:
        return asdict(self)


def summarize(
    snapshot: Snapshot,
    currency: str = "USD",
    locale: str = "de_DE",
) -> DashboardMetrics:
    """
    Compute all stat-card figures for a snapshot.

    Args:
        snapshot: Snapshot to summarize
        currency: ISO currency code for money values
        locale: Locale for money formatting

    Returns:
        DashboardMetrics
    """
    portfolio = snapshot.portfolio
    return DashboardMetrics(
        portfolio_value=format_currency(portfolio.total_value, currency, locale),
        day_change=format_currency(portfolio.day_change, currency, locale),
        day_change_percent=format_percent(portfolio.day_change_percent),
        day_change_positive=portfolio.day_change >= 0,
        total_return=format_percent(portfolio.total_return),
        open_positions=portfolio.open_positions,
        profitable_positions=profitable_position_count(snapshot),
        trades_today=trade_count(snapshot),
        closed_today=portfolio.closed_today,
        closed_trades=closed_trade_count(snapshot),
        winning_trades=winning_trade_count(snapshot),
        win_rate_today=win_rate_today(snapshot),
    )
