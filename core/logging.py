"""
Unified Logging Configuration

This module sets up a centralized logging system for the entire application.
All modules should import and use the logger from this module instead of
using print() statements.

Usage:
    from core.logging import logger, get_logger

    logger.info("Server started")

    log = get_logger(__name__)
    log.debug("Detailed debugging information")

Configuration:
    Log level is controlled by the LOG_LEVEL setting in .env file (default INFO).
"""

import logging
import sys
from typing import Optional


def setup_logging(
    log_level: str = "INFO",
    log_format: Optional[str] = None,
    include_timestamp: bool = True,
    include_module: bool = True
) -> logging.Logger:
    """
    Configure and return the application logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string (uses default if None)
        include_timestamp: Include timestamp in log messages
        include_module: Include logger name in log messages

    Returns:
        logging.Logger: Configured logger instance

    Example:
        >>> logger = setup_logging(log_level="DEBUG")
        >>> logger.info("Application started")
        2024-01-01 12:00:00 [INFO] marketproxy: Application started
    """
    if log_format is None:
        format_parts = []

        if include_timestamp:
            format_parts.append("%(asctime)s")

        format_parts.append("[%(levelname)s]")

        if include_module:
            format_parts.append("%(name)s")

        format_parts.append("%(message)s")

        log_format = " ".join(format_parts)

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True
    )

    logger = logging.getLogger("marketproxy")
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return logger


# ============================================
# Initialize Logger with Settings
# ============================================

from core.config import settings  # noqa: E402

logger = setup_logging(log_level=settings.log_level)


# ============================================
# Convenience Functions
# ============================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Args:
        name: Name for the logger (typically __name__)

    Returns:
        logging.Logger: Logger instance under the "marketproxy" namespace

    Example:
        # In core/fetcher.py:
        logger = get_logger(__name__)   # "marketproxy.core.fetcher"
    """
    return logging.getLogger(f"marketproxy.{name}")


# ============================================
# Log Helper Functions
# ============================================

def log_upstream_request(host: str, path: str) -> None:
    """
    Log an outbound upstream request.

    Example:
        >>> log_upstream_request("api1.binance.com", "/api/v3/ticker/price")
        [DEBUG] Upstream Request: api1.binance.com /api/v3/ticker/price
    """
    logger.debug(f"Upstream Request: {host} {path}")


def log_upstream_response(host: str, path: str, status: int, response_time: Optional[float] = None) -> None:
    """
    Log an upstream response with status and timing information.

    Example:
        >>> log_upstream_response("api1.binance.com", "/api/v3/klines", 200, 0.342)
        [DEBUG] Upstream Response: api1.binance.com /api/v3/klines | Status: 200 | Time: 0.342s
    """
    time_str = f" | Time: {response_time:.3f}s" if response_time is not None else ""
    logger.debug(f"Upstream Response: {host} {path} | Status: {status}{time_str}")


logger.debug("Logging system initialized")
