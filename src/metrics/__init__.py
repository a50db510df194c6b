"""Derived statistics and display formatting."""

from .calculations import (
    DashboardMetrics,
    profitable_position_count,
    summarize,
    win_rate_today,
)
from .formatting import format_currency, format_percent

__all__ = [
    "DashboardMetrics",
    "summarize",
    "win_rate_today",
    "profitable_position_count",
    "format_currency",
    "format_percent",
]
