"""
Client Configuration

Settings for the market-data client, read from environment variables or a
.env file through pydantic-settings (so "REQUEST_TIMEOUT=abc" fails at startup
rather than mid-request).

What lives here:
- Base URLs of the primary API, Binance and CoinGecko
- The tracked symbols, as a comma-separated string plus a parsed list
- The per-attempt request timeout and the log level

Usage:
    from core.config import settings

    print(settings.primary_api_base_url)
    print(settings.symbols_list)  # ["BTC", "ETH", "XRP"]
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


VALID_TIMEFRAMES = ["1D", "1W", "1M", "3M", "1Y"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """
    Application Settings

    Values are automatically loaded from environment variables or .env file.

    Attributes:
        primary_api_base_url: Base URL of the internal market-data API (tried first)
        binance_base_url: Base URL of the Binance spot REST API (exchange-ticker fallback)
        coingecko_base_url: Base URL of the CoinGecko REST API (aggregator-index fallback)
        coingecko_api_key: Optional CoinGecko demo key for higher rate limits
        tracked_symbols: Comma-separated canonical tickers shown on the dashboard
        default_timeframe: Timeframe used when the caller does not pick one
        request_timeout: Upper bound (seconds) for a single provider attempt
        log_level: Logging level
    """

    # ============================================
    # Upstream Providers
    # ============================================

    primary_api_base_url: str = Field(
        default="http://localhost:3000/api",
        description="Internal market-data API base URL"
    )

    binance_base_url: str = Field(
        default="https://api.binance.com/api/v3",
        description="Binance spot REST API base URL"
    )

    coingecko_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        description="CoinGecko REST API base URL"
    )

    coingecko_api_key: str = Field(
        default="",
        description="CoinGecko demo API key (optional)"
    )

    # ============================================
    # Dashboard Configuration
    # ============================================

    tracked_symbols: str = Field(
        default="BTC,ETH,XRP",
        description="Comma-separated list of canonical asset tickers"
    )

    default_timeframe: str = Field(
        default="1M",
        description="Default chart/prediction timeframe"
    )

    # ============================================
    # Performance
    # ============================================

    request_timeout: float = Field(
        default=10.0,
        description="Timeout for a single provider attempt in seconds"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False
    )

    @property
    def symbols_list(self) -> List[str]:
        """
        Convert comma-separated symbols string to a list.

        Example:
            >>> settings.symbols_list
            ['BTC', 'ETH', 'XRP']
        """
        return [s.strip().upper() for s in self.tracked_symbols.split(",") if s.strip()]

    def get_coingecko_headers(self) -> dict:
        """
        Get HTTP headers for CoinGecko requests.

        The public API works without a key; the demo key only lifts rate limits.
        """
        headers = {"Accept": "application/json"}
        if self.coingecko_api_key:
            headers["x-cg-demo-api-key"] = self.coingecko_api_key
        return headers


# ============================================
# Global Settings Instance
# ============================================

settings = Settings()


# ============================================
# Configuration Validation
# ============================================

def validate_configuration(config: Settings = None) -> None:
    """
    Validate critical configuration settings.

    Args:
        config: Settings to check (defaults to the global instance)

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    # logging.py imports config.py, so the logger is imported lazily
    from core.logging import logger
    from core.schemas import AssetSymbol

    config = config or settings

    if not config.symbols_list:
        raise ValueError("TRACKED_SYMBOLS must contain at least one symbol")

    supported = [s.value for s in AssetSymbol]
    for symbol in config.symbols_list:
        if symbol not in supported:
            raise ValueError(
                f"Unsupported symbol '{symbol}' in TRACKED_SYMBOLS. "
                f"Must be one of: {', '.join(supported)}"
            )

    if config.default_timeframe not in VALID_TIMEFRAMES:
        raise ValueError(
            f"Invalid DEFAULT_TIMEFRAME: '{config.default_timeframe}'. "
            f"Must be one of: {', '.join(VALID_TIMEFRAMES)}"
        )

    if config.request_timeout <= 0:
        raise ValueError(f"REQUEST_TIMEOUT must be positive, got {config.request_timeout}")

    if config.log_level.upper() not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid LOG_LEVEL: '{config.log_level}'. "
            f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    logger.info("Configuration validated successfully")
    logger.info(f"Tracking symbols: {', '.join(config.symbols_list)}")
    logger.info(f"Primary API: {config.primary_api_base_url}")
    logger.info(f"Fallbacks: {config.binance_base_url} -> {config.coingecko_base_url}")
    logger.info(f"Request timeout: {config.request_timeout}s")
