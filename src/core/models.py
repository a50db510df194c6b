"""
Snapshot data model.

Typed view of the six agent API resources plus the merged Snapshot that one
synchronization cycle produces. Wire format is camelCase JSON; Python
attributes are snake_case.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class TradeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class Resource(str, Enum):
    """Agent API resources, valued by their relative endpoint path."""

    PORTFOLIO = "/portfolio"
    POSITIONS = "/positions"
    TODAY_TRADES = "/trades/today"
    WATCHLIST = "/watchlist"
    STRATEGIES = "/strategies"
    PERFORMANCE = "/performance"


class WireModel(BaseModel):
    """Base for immutable models parsed from camelCase agent payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Portfolio(WireModel):
    """Account-level figures for the header stat cards."""

    total_value: float = 0.0
    day_change: float = 0.0
    day_change_percent: float = 0.0
    total_return: float = 0.0
    open_positions: int = 0
    closed_today: int = 0
    initial_capital: float = 0.0

    @field_validator("*", mode="before")
    @classmethod
    def null_as_zero(cls, v):
        """Agent sends null for figures it has not computed yet."""
        return 0 if v is None else v

    @classmethod
    def baseline(cls, value: float) -> "Portfolio":
        """Fallback portfolio used while the agent is unreachable."""
        return cls(total_value=value, initial_capital=value)


class Position(WireModel):
    """An open position as reported by the agent."""

    id: Union[int, str]
    ticker: str
    type: TradeSide
    strategy: Optional[str] = None
    entry: Optional[float] = None
    current: Optional[float] = None
    leverage: Optional[float] = None
    pnl: Optional[float] = None  # percent
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @property
    def is_long(self) -> bool:
        return self.type == TradeSide.BUY


class Trade(WireModel):
    """A trade executed today. pnl is None while the trade is still open."""

    ticker: str
    type: TradeSide
    price: Optional[float] = None
    pnl: Optional[float] = None
    status: TradeStatus = TradeStatus.OPEN

    @property
    def is_closed(self) -> bool:
        return self.status == TradeStatus.CLOSED


class WatchlistItem(WireModel):
    ticker: str
    price: Optional[float] = None
    change: Optional[float] = None  # percent


class StrategyStat(WireModel):
    name: str
    trades: Optional[int] = None
    win_rate: Optional[float] = None  # percent
    avg_return: Optional[float] = None  # percent


class PerformancePoint(WireModel):
    time: str
    value: Optional[float] = None


class Snapshot(WireModel):
    """
    Complete dashboard state produced by one synchronization cycle.

    Collections are tuples and never None; portfolio is always concrete.
    A Snapshot is never mutated, a new cycle replaces it wholesale.
    """

    portfolio: Portfolio
    positions: tuple[Position, ...] = ()
    today_trades: tuple[Trade, ...] = ()
    watchlist: tuple[WatchlistItem, ...] = ()
    strategy_stats: tuple[StrategyStat, ...] = ()
    performance: tuple[PerformancePoint, ...] = ()
    api_connected: bool = False
    last_update: datetime

    @classmethod
    def initial(cls, baseline_value: float) -> "Snapshot":
        """Default snapshot shown before the first cycle completes."""
        return cls(
            portfolio=Portfolio.baseline(baseline_value),
            last_update=datetime.now(),
        )

    def to_dict(self) -> dict:
        """JSON-ready camelCase representation."""
        return self.model_dump(mode="json", by_alias=True)
