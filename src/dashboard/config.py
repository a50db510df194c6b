"""
Dashboard-specific configuration.

Extends base Settings with refresh cadence, portfolio fallback baseline,
display formatting and HTTP server parameters.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from config.settings import Settings


class DashboardConfig(Settings):
    """
    Trading dashboard configuration.

    Polls the agent API every refresh interval and serves the merged
    snapshot to the browser page.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Refresh Settings ────────────────────────────────────────────────

    refresh_interval_seconds: int = Field(
        default=30,
        ge=1,
        le=3600,
        description="How often to poll the agent API for all resources",
    )

    # ── Portfolio Fallback ──────────────────────────────────────────────

    portfolio_baseline_value: float = Field(
        default=10000.0,
        ge=0.0,
        description="Total value and initial capital shown when the portfolio resource is unavailable",
    )

    # ── Display Formatting ──────────────────────────────────────────────

    currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO 4217 currency code for money values",
    )
    currency_locale: str = Field(
        default="de_DE",
        description="Locale used to format money values (e.g. de_DE, en_US)",
    )

    # ── HTTP Server ─────────────────────────────────────────────────────

    dashboard_host: str = Field(default="0.0.0.0")
    dashboard_port: int = Field(default=8080, ge=1, le=65535)


def get_dashboard_config() -> DashboardConfig:
    """Get dashboard configuration instance."""
    return DashboardConfig()
