"""
Provider Interface — Abstract Contract for All Market-Data Upstreams

This module defines the abstract base class every provider adapter implements.
The orchestrator works with MarketDataProvider, not with Binance or CoinGecko
directly, so providers can be reordered or swapped without touching it.

Each adapter:
    - Resolves AssetSymbol/Timeframe to its own identifiers via static tables
      (raising ConfigurationError for anything outside them)
    - Builds the provider-specific request and delegates to Transport
    - Hands the raw payload to its normalizer

Capabilities System:
    Each provider declares which operations it supports via `capabilities`.
    Unsupported operations raise NotImplementedError and are never put in
    that operation's fallback chain.

    Example:
        capabilities = {
            "snapshots": True,
            "history": True,
            "prediction": False,  # CoinGecko has no forecast endpoint
        }
"""

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from core.errors import ConfigurationError, TransportError
from core.schemas import (
    AssetSymbol,
    HistoricalCandle,
    MarketSnapshot,
    PredictionResult,
    Timeframe,
)
from core.transport import Transport


# ============================================
# Canonical Coercion
# ============================================

def coerce_symbol(value: Union[AssetSymbol, str]) -> AssetSymbol:
    """
    Convert a ticker string to AssetSymbol.

    Raises:
        ConfigurationError: If the ticker is not a tracked asset

    Example:
        >>> coerce_symbol("eth")
        <AssetSymbol.ETH: 'ETH'>
    """
    if isinstance(value, AssetSymbol):
        return value
    try:
        return AssetSymbol(str(value).strip().upper())
    except ValueError:
        supported = ", ".join(s.value for s in AssetSymbol)
        raise ConfigurationError(f"Unsupported symbol '{value}'. Supported: {supported}")


def coerce_timeframe(value: Union[Timeframe, str]) -> Timeframe:
    """
    Convert a timeframe string to Timeframe.

    Raises:
        ConfigurationError: If the timeframe is unknown
    """
    if isinstance(value, Timeframe):
        return value
    try:
        return Timeframe(str(value).strip().upper())
    except ValueError:
        supported = ", ".join(t.value for t in Timeframe)
        raise ConfigurationError(f"Unsupported timeframe '{value}'. Supported: {supported}")


class MarketDataProvider(ABC):
    """
    Abstract Base Class for Provider Adapters

    Class Attributes:
        name: Unique provider identifier (lowercase, e.g. "binance")
        capabilities: Which of the three operations this provider supports
        SYMBOL_MAP: Default canonical symbol -> provider identifier table
        TIMEFRAME_MAP: Default canonical timeframe -> provider parameters table

    Instance Attributes:
        transport: Shared Transport used for every request
        base_url: Provider base URL
        symbol_map: Read-only symbol table in use (defaults to SYMBOL_MAP)
    """

    name: str

    capabilities: Dict[str, bool] = {
        "snapshots": False,
        "history": False,
        "prediction": False,
    }

    SYMBOL_MAP: Mapping[AssetSymbol, str] = {}
    TIMEFRAME_MAP: Mapping[Timeframe, Any] = {}

    def __init__(
        self,
        transport: Transport,
        base_url: str,
        symbol_map: Optional[Mapping[AssetSymbol, str]] = None,
    ):
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.symbol_map = MappingProxyType(dict(symbol_map if symbol_map is not None else self.SYMBOL_MAP))
        self.timeframe_map = MappingProxyType(dict(self.TIMEFRAME_MAP))

    # ============================================
    # Identifier Resolution
    # ============================================

    def resolve_symbol(self, symbol: Union[AssetSymbol, str]) -> str:
        """
        Map a canonical symbol to this provider's identifier.

        Raises:
            ConfigurationError: If the symbol is not in this provider's table
        """
        canonical = coerce_symbol(symbol)
        try:
            return self.symbol_map[canonical]
        except KeyError:
            raise ConfigurationError(f"{self.name} does not support symbol {canonical.value}")

    def resolve_symbols(self, symbols: Iterable[Union[AssetSymbol, str]]) -> Dict[str, AssetSymbol]:
        """Map several canonical symbols, returning provider id -> canonical symbol."""
        return {self.resolve_symbol(s): coerce_symbol(s) for s in symbols}

    def resolve_timeframe(self, timeframe: Union[Timeframe, str]) -> Any:
        """
        Map a canonical timeframe to this provider's request parameters.

        Raises:
            ConfigurationError: If the timeframe is not in this provider's table
        """
        canonical = coerce_timeframe(timeframe)
        try:
            return self.timeframe_map[canonical]
        except KeyError:
            raise ConfigurationError(f"{self.name} does not support timeframe {canonical.value}")

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def supports(self, operation: str) -> bool:
        return self.capabilities.get(operation, False)

    # ============================================
    # Normalization Guard
    # ============================================

    def normalize(self, url: str, normalizer: Callable[..., Any], *args: Any) -> Any:
        """
        Run a normalizer over a raw payload.

        A payload that does not match the provider's documented schema is an
        upstream failure, so it surfaces as TransportError and the cascade
        moves on. Normalizers report such payloads as ValueError (pydantic
        ValidationError included); any other exception is a bug and propagates.
        """
        try:
            return normalizer(*args)
        except (ValidationError, ValueError) as e:
            raise TransportError(url, f"unexpected {self.name} response shape: {e}") from e

    # ============================================
    # Operations
    # ============================================

    @abstractmethod
    async def get_snapshots(self, symbols: List[AssetSymbol]) -> List[MarketSnapshot]:
        """
        Fetch a market snapshot for each requested symbol.

        Returns:
            Snapshots in the order the symbols were requested

        Raises:
            ConfigurationError: If a symbol is outside this provider's table
            TransportError: On any upstream failure
        """
        ...

    @abstractmethod
    async def get_history(self, symbol: AssetSymbol, timeframe: Timeframe) -> List[HistoricalCandle]:
        """
        Fetch candles covering the timeframe, ascending by timestamp.

        Raises:
            ConfigurationError: If the symbol/timeframe is unsupported
            TransportError: On any upstream failure
        """
        ...

    async def get_prediction(self, symbol: AssetSymbol, timeframe: Timeframe) -> PredictionResult:
        """
        Fetch an upstream price forecast.

        Raises:
            NotImplementedError: If this provider has no forecast endpoint
        """
        raise NotImplementedError(f"{self.name} does not provide predictions")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}')>"
