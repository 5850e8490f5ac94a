"""Error taxonomy for the market-data client.

TransportError is the only retryable failure: the orchestrator turns it into
"try the next provider". ConfigurationError means the caller asked a provider
for something outside its static tables and always propagates.
AllProvidersExhausted is the terminal failure callers handle.
"""

from typing import Optional


class MarketDataError(Exception):
    """Base exception for all market-data client errors."""


class TransportError(MarketDataError):
    """Raised when a request fails at the network, HTTP or decode level."""

    def __init__(self, url: str, message: str, status: Optional[int] = None):
        self.url = url
        self.message = message
        self.status = status
        super().__init__(message)

    def __str__(self) -> str:
        if self.status is not None:
            return f"HTTP {self.status} from {self.url}: {self.message}"
        return f"{self.url}: {self.message}"


class ConfigurationError(MarketDataError):
    """Raised when a symbol or timeframe is outside a provider's supported set."""


class AllProvidersExhausted(MarketDataError):
    """Raised when every provider in an operation's chain has failed."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} failed: all providers exhausted")
