"""
Configuration Management Module

This module handles loading, validating, and providing access to application configuration
from environment variables (.env file).

Uses Pydantic Settings for automatic validation and type conversion.

Key Features:
- Loads configuration from .env file
- Provides type-safe access to configuration values
- Converts comma-separated strings to lists (hosts, symbols, origins)
- Validates upstream hosts against the set of known exchange hostnames

Usage:
    from core.config import settings

    print(settings.upstream_hosts_list)   # ['data-api.binance.vision', 'api1.binance.com', ...]
    print(settings.ticker_symbols_list)   # ['BTCUSDT', 'ETHUSDT', ...]
"""

import re
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


# Public market-data hostnames serving the same /api/v3 surface.
# Several of them are reachable from networks where api.binance.com is blocked.
KNOWN_UPSTREAM_HOSTS = frozenset({
    "api.binance.com",
    "api1.binance.com",
    "api2.binance.com",
    "api3.binance.com",
    "api4.binance.com",
    "data-api.binance.vision",
    "data.binance.com",
})


def _split_csv(value: str, upper: bool = False) -> List[str]:
    items = [item.strip() for item in value.split(",") if item.strip()]
    return [item.upper() for item in items] if upper else items


class Settings(BaseSettings):
    """
    Application Settings

    Values are automatically loaded from environment variables or .env file.

    Attributes:
        upstream_hosts: Ordered upstream hostnames (primary first, then failover)
        api_prefix: API version prefix every upstream path must start with
        request_timeout: Maximum wait per upstream host, in seconds
        user_agent: User-Agent sent upstream (avoids bot filtering)
        ticker_symbols: Allow-list for the 24h ticker endpoint
        exchange_info_symbols: Allow-list for the exchange metadata endpoint
        default_kline_symbol: Symbol used when /klines gets none
        default_kline_interval: Interval used when /klines gets none
        default_kline_limit: Candle count used when /klines gets none
        cors_origins: Exact origins allowed to call the proxy
        cors_origin_regex: Wildcard-subdomain pattern for allowed origins
        app_host: Host address for the server
        app_port: Port number for the server
        environment: Current environment (development, production)
        log_level: Logging level
    """

    # ============================================
    # Upstream Configuration
    # ============================================

    upstream_hosts: str = Field(
        default="data-api.binance.vision,api1.binance.com,api2.binance.com",
        description="Comma-separated upstream hostnames, tried in order"
    )

    api_prefix: str = Field(
        default="/api/v3",
        description="API version prefix for upstream paths"
    )

    request_timeout: float = Field(
        default=10.0,
        description="Upstream request timeout in seconds (per host)"
    )

    user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        description="User-Agent header sent upstream"
    )

    # ============================================
    # Symbol Allow-Lists
    # ============================================

    ticker_symbols: str = Field(
        default=(
            "BTCUSDT,ETHUSDT,BNBUSDT,SOLUSDT,XRPUSDT,ADAUSDT,AVAXUSDT,DOGEUSDT,"
            "DOTUSDT,MATICUSDT,LINKUSDT,LTCUSDT,UNIUSDT,ATOMUSDT,SHIBUSDT"
        ),
        description="Comma-separated symbols kept by the ticker endpoint"
    )

    exchange_info_symbols: str = Field(
        default="BTCUSDT,ETHUSDT,BNBUSDT,SOLUSDT",
        description="Comma-separated symbols kept by the exchange info endpoint"
    )

    # ============================================
    # Kline Defaults
    # ============================================

    default_kline_symbol: str = Field(default="BTCUSDT")

    default_kline_interval: str = Field(default="1h")

    default_kline_limit: int = Field(default=60)

    # ============================================
    # CORS Configuration
    # ============================================

    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5000,https://crypto-simulator-front.onrender.com",
        description="Comma-separated list of allowed CORS origins"
    )

    cors_origin_regex: str = Field(
        default=r"https?://.+\.onrender\.com",
        description="Origins fully matching this pattern are allowed"
    )

    # ============================================
    # Application Configuration
    # ============================================

    app_host: str = Field(
        default="0.0.0.0",
        description="Server host address"
    )

    app_port: int = Field(
        default=3001,
        description="Server port"
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, production)"
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

    # ============================================
    # List Properties
    # ============================================

    @property
    def upstream_hosts_list(self) -> List[str]:
        """
        Upstream hostnames in failover order.

        Example:
            >>> settings.upstream_hosts_list
            ['data-api.binance.vision', 'api1.binance.com', 'api2.binance.com']
        """
        return [host.lower() for host in _split_csv(self.upstream_hosts)]

    @property
    def ticker_symbols_list(self) -> List[str]:
        return _split_csv(self.ticker_symbols, upper=True)

    @property
    def exchange_info_symbols_list(self) -> List[str]:
        return _split_csv(self.exchange_info_symbols, upper=True)

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Convert comma-separated CORS origins string to a list.

        Example:
            >>> settings.cors_origins_list
            ['http://localhost:3000', 'http://localhost:5000', 'https://crypto-simulator-front.onrender.com']
        """
        return _split_csv(self.cors_origins)


# ============================================
# Global Settings Instance
# ============================================

settings = Settings()


# ============================================
# Configuration Validation
# ============================================

def validate_configuration(config: Optional[Settings] = None) -> None:
    """
    Validate critical configuration settings on application startup.

    Args:
        config: Settings to validate (defaults to the global instance)

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    # logging.py imports config.py, so the logger is imported lazily
    from core.logging import logger

    config = config or settings

    hosts = config.upstream_hosts_list
    if not hosts:
        raise ValueError("UPSTREAM_HOSTS must contain at least one hostname")

    for host in hosts:
        if host not in KNOWN_UPSTREAM_HOSTS:
            raise ValueError(
                f"Unknown upstream host: '{host}'. "
                f"Must be one of: {', '.join(sorted(KNOWN_UPSTREAM_HOSTS))}"
            )

    if not config.api_prefix.startswith("/"):
        raise ValueError(f"API_PREFIX must start with '/': {config.api_prefix}")

    if config.request_timeout <= 0:
        raise ValueError(f"REQUEST_TIMEOUT must be positive: {config.request_timeout}")

    for name, symbols in (
        ("TICKER_SYMBOLS", config.ticker_symbols_list),
        ("EXCHANGE_INFO_SYMBOLS", config.exchange_info_symbols_list),
    ):
        if not symbols:
            raise ValueError(f"{name} must contain at least one symbol")

    if not config.default_kline_symbol.isupper():
        raise ValueError(
            f"DEFAULT_KLINE_SYMBOL '{config.default_kline_symbol}' must be uppercase"
        )

    try:
        re.compile(config.cors_origin_regex)
    except re.error as e:
        raise ValueError(f"Invalid CORS_ORIGIN_REGEX: {e}")

    if not (1 <= config.app_port <= 65535):
        raise ValueError(f"Invalid port number: {config.app_port}. Must be between 1 and 65535")

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.log_level.upper() not in valid_log_levels:
        raise ValueError(
            f"Invalid LOG_LEVEL: '{config.log_level}'. "
            f"Must be one of: {', '.join(valid_log_levels)}"
        )

    logger.info("Configuration validated successfully")
    logger.info(f"Upstream hosts: {', '.join(hosts)}")
    logger.info(f"Ticker allow-list: {', '.join(config.ticker_symbols_list)}")
    logger.info(f"Request timeout: {config.request_timeout}s")
    logger.info(f"Environment: {config.environment}")
    logger.info(f"Log level: {config.log_level.upper()}")
