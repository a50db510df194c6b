"""Display formatting for money and percentages. None is treated as 0."""

from typing import Optional

from babel.numbers import format_currency as babel_format_currency


def format_currency(
    value: Optional[float],
    currency: str = "USD",
    locale: str = "de_DE",
) -> str:
    """
    Locale-aware money string.

    >>> format_currency(1234.5, "USD", "en_US")
    '$1,234.50'
    """
    return babel_format_currency(value or 0, currency, locale=locale)


def format_percent(value: Optional[float]) -> str:
    """Signed percentage with two decimals, "+" for zero and up."""
    # + 0.0 folds -0.0 into 0.0
    return f"{float(value or 0) + 0.0:+.2f}%"


def format_signed_pnl(value: Optional[float], decimals: int = 2) -> str:
    """P&L label for table rows. None means the trade is still open."""
    if value is None:
        return "OPEN"
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_price(value: Optional[float]) -> str:
    return f"${value or 0:.2f}"
