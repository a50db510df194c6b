"""
Render-ready rows for the dashboard page.

Turns a Snapshot into the labels the HTML tables show, so the page script
only has to place strings.
"""

from typing import Optional

from src.core.models import Snapshot
from src.metrics.calculations import performance_domain, round_half_up, value_or_zero
from src.metrics.formatting import format_currency, format_price, format_signed_pnl


def build_view(
    snapshot: Snapshot,
    currency: str = "USD",
    locale: str = "de_DE",
) -> dict:
    """Rows for positions, trades, watchlist, strategies and the chart."""
    return {
        "positions": [
            {
                "id": p.id,
                "ticker": p.ticker,
                "side": "L" if p.is_long else "S",
                "strategy": p.strategy or "",
                "leverage": f"{p.leverage:g}x" if p.leverage is not None else "",
                "confidence": f"{round_half_up((p.confidence or 0) * 100)}%",
                "entry": format_price(p.entry),
                "current": format_price(p.current),
                "pnl": format_signed_pnl(p.pnl or 0),
                "positive": (p.pnl or 0) >= 0,
            }
            for p in snapshot.positions
        ],
        "trades": [
            {
                "ticker": t.ticker,
                "type": t.type.value.upper(),
                "price": format_price(t.price),
                "pnl": format_signed_pnl(t.pnl, decimals=1),
                "open": t.pnl is None,
                "positive": t.pnl is not None and t.pnl > 0,
            }
            for t in snapshot.today_trades
        ],
        "watchlist": [
            {
                "ticker": w.ticker,
                "price": format_price(w.price),
                "change": f"{'+' if value_or_zero(w.change) > 0 else ''}{_number(w.change)}%",
                "positive": (w.change or 0) >= 0,
            }
            for w in snapshot.watchlist
        ],
        "strategies": [
            {
                "name": s.name,
                "winRate": f"{_number(s.win_rate)}% WR",
                "winRatePositive": (s.win_rate or 0) >= 50,
                "detail": f"{s.trades or 0} trades • Ø {_number(s.avg_return)}%",
            }
            for s in snapshot.strategy_stats
        ],
        "chart": {
            "labels": [p.time for p in snapshot.performance],
            "values": [value_or_zero(p.value) for p in snapshot.performance],
            "formatted": [
                format_currency(value_or_zero(p.value), currency, locale)
                for p in snapshot.performance
            ],
            "domain": performance_domain(snapshot),
        },
    }


def _number(value: Optional[float]) -> str:
    return f"{value or 0:g}"
