"""
HTTP Transport

A single outbound GET returning decoded JSON or raising TransportError.

The transport knows nothing about providers or business rules. It does not
retry: retry policy belongs to the fallback chain in MarketDataClient. Every
attempt is bounded by the configured request timeout, so a stalled upstream
fails the attempt instead of blocking the cascade.

Usage:
    async with Transport(timeout=5) as transport:
        payload = await transport.fetch("https://api.binance.com/api/v3/klines",
                                        params={"symbol": "BTCUSDT", "interval": "1h"})
"""

import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp

from core.config import settings
from core.errors import TransportError
from core.logging import get_logger, log_request_failure


MESSAGE_KEYS = ("message", "msg", "error", "error_message")


def extract_error_message(body: str, status: int) -> str:
    """
    Build a human-readable message for a non-success response.

    Order of preference:
        1. A message field in a JSON body ("message", "msg", "error",
           or the same keys one level down, e.g. CoinGecko's
           {"status": {"error_message": ...}})
        2. The raw body text
        3. "status N"

    Example:
        >>> extract_error_message('{"code": -1121, "msg": "Invalid symbol."}', 400)
        'Invalid symbol.'
    """
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        candidates = [payload] + [v for v in payload.values() if isinstance(v, dict)]
        for candidate in candidates:
            for key in MESSAGE_KEYS:
                value = candidate.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()

    text = body.strip()
    if text:
        return text[:500]

    return f"status {status}"


def decode_lenient(raw: bytes, charset: str) -> str:
    """Decode an error body for display; bad bytes and unknown charsets never raise."""
    try:
        return raw.decode(charset, errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


class Transport:
    """
    Async HTTP transport over one aiohttp ClientSession.

    Attributes:
        timeout: Total timeout for one request in seconds
        session: aiohttp ClientSession (created on __aenter__)

    Example:
        >>> async with Transport() as transport:
        ...     data = await transport.fetch("http://localhost:3000/api/markets",
        ...                                  params={"symbols": "BTC,ETH"})
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.logger = get_logger(__name__)
        self.session: Optional[aiohttp.ClientSession] = None

    # ============================================
    # Context Manager for Session Management
    # ============================================

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        self.logger.debug("Transport session created")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("Transport session closed")

    # ============================================
    # Request
    # ============================================

    async def fetch(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Issue a GET request and decode the JSON body.

        Args:
            url: Absolute URL
            params: Optional query parameters
            headers: Optional request headers

        Returns:
            Decoded JSON (dict or list)

        Raises:
            TransportError: On network error, timeout, non-2xx status,
                or a body that cannot be decoded as text or JSON
            RuntimeError: If used outside 'async with'
        """
        if not self.session:
            raise RuntimeError("Transport session not initialized. Use 'async with' statement.")

        self.logger.debug(f"GET {url} | Params: {params}")

        try:
            async with self.session.get(url, params=params, headers=headers) as resp:
                status = resp.status
                charset = resp.charset or "utf-8"
                raw = await resp.read()
        except asyncio.TimeoutError as e:
            log_request_failure(url, f"timeout after {self.timeout}s")
            raise TransportError(url, f"timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            log_request_failure(url, str(e) or type(e).__name__)
            raise TransportError(url, f"{type(e).__name__}: {e}") from e

        if not 200 <= status < 300:
            message = extract_error_message(decode_lenient(raw, charset), status)
            log_request_failure(url, f"HTTP {status}: {message}")
            raise TransportError(url, message, status=status)

        try:
            data = json.loads(raw.decode(charset))
        except (UnicodeDecodeError, LookupError) as e:
            log_request_failure(url, f"undecodable body: {e}")
            raise TransportError(url, f"undecodable body: {e}", status=status) from e
        except ValueError as e:
            log_request_failure(url, f"invalid JSON: {e}")
            raise TransportError(url, f"invalid JSON body: {e}", status=status) from e

        self.logger.debug(f"GET {url} - Success (HTTP {status})")
        return data
