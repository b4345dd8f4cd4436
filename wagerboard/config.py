"""Application configuration."""

import os
from dataclasses import dataclass

DEFAULT_SHEET_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vTD-izNeTjWAsznv7WwIwLm6kWHMp0GEk580Dzr_192u4bkrJHNDaMf9GMJCHsK2CPK_B1Lc4nxojon"
    "/pub?output=csv"
)
DEFAULT_PROXY_PREFIX = "https://cors-anywhere.herokuapp.com/"


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # API settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Published spreadsheet export
    sheet_url: str = DEFAULT_SHEET_URL
    # Fallback prefix used when the direct export is unusable
    sheet_proxy_prefix: str = DEFAULT_PROXY_PREFIX
    request_timeout_seconds: float = 30.0

    # Refresh policy
    min_request_interval_ms: int = 5000
    refresh_interval_ms: int = 30000
    rate_limited_interval_ms: int = 60000
    max_errors_before_stop: int = 2

    # Rendering
    min_display_rows: int = 5
    coin_icon_url: str = "images/rust-magic-coin.svg"

    @property
    def proxy_url(self) -> str:
        """Full URL of the proxied export."""
        return f"{self.sheet_proxy_prefix}{self.sheet_url}"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            sheet_url=os.getenv("SHEET_URL", DEFAULT_SHEET_URL),
            sheet_proxy_prefix=os.getenv("SHEET_PROXY_PREFIX", DEFAULT_PROXY_PREFIX),
            request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30")),
            min_request_interval_ms=int(os.getenv("MIN_REQUEST_INTERVAL_MS", "5000")),
            refresh_interval_ms=int(os.getenv("REFRESH_INTERVAL_MS", "30000")),
            rate_limited_interval_ms=int(os.getenv("RATE_LIMITED_INTERVAL_MS", "60000")),
            max_errors_before_stop=int(os.getenv("MAX_ERRORS_BEFORE_STOP", "2")),
            min_display_rows=int(os.getenv("MIN_DISPLAY_ROWS", "5")),
            coin_icon_url=os.getenv("COIN_ICON_URL", "images/rust-magic-coin.svg"),
        )
