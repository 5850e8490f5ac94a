"""
Unified Logging Configuration

One "cryptodash" logger hierarchy for the whole client. Modules get a child
logger through get_logger(__name__) and never print().

Usage:
    from core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Fetched 96 candles from binance")

What is logged at each level:
    DEBUG    - Outbound requests, session lifecycle
    INFO     - Which provider served an operation
    WARNING  - A provider attempt failed and the cascade moved on
    ERROR    - A whole fallback chain was exhausted

The level comes from LOG_LEVEL (see core.config) and can be changed at
runtime with set_log_level().
"""

import logging
import sys

from core.config import settings


ROOT_LOGGER_NAME = "cryptodash"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(log_level: str = "INFO", log_format: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Configure stdout logging and return the client's root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            unknown names fall back to INFO
        log_format: logging format string

    Example:
        >>> logger = setup_logging(log_level="DEBUG")
        >>> logger.info("Dashboard refresh started")
        2024-01-01 12:00:00 [INFO] cryptodash Dashboard refresh started
    """
    logging.basicConfig(
        level=_level(log_level),
        format=log_format,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True
    )

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(_level(log_level))
    return root


logger = setup_logging(log_level=settings.log_level)


def get_logger(name: str) -> logging.Logger:
    """
    Child logger of "cryptodash".

    Example:
        # In providers/binance/__init__.py:
        logger = get_logger(__name__)  # "cryptodash.providers.binance"
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_log_level(level: str) -> None:
    """Change the log level at runtime (e.g. from a --log-level flag)."""
    logger.setLevel(_level(level))
    logging.getLogger().setLevel(_level(level))


# ============================================
# Cascade Helpers
# ============================================

def log_request_failure(url: str, reason: str) -> None:
    """
    Log an outbound request that will surface as TransportError.

    Example:
        >>> log_request_failure("https://api.binance.com/api/v3/klines", "HTTP 429")
        [WARNING] Request failed: https://api.binance.com/api/v3/klines | HTTP 429
    """
    logger.warning(f"Request failed: {url} | {reason}")


def log_provider_fallback(operation: str, provider: str, reason: str) -> None:
    """
    Log a failed provider attempt before the next provider is tried.

    Example:
        >>> log_provider_fallback("history", "primary", "HTTP 503")
        [WARNING] Fallback: history | primary failed: HTTP 503
    """
    logger.warning(f"Fallback: {operation} | {provider} failed: {reason}")


def log_chain_exhausted(operation: str, attempted: int) -> None:
    logger.error(f"Exhausted: {operation} | all {attempted} provider(s) failed")
