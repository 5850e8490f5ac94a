"""
Market Data Client — Fallback Orchestrator

This module is the single entry point callers use for quotes, history and
predictions. It owns the fixed, per-operation fallback chains and always
returns canonical types, whichever provider answered.

Fallback Chains:
    snapshots   primary -> binance -> coingecko
    history     primary -> binance -> coingecko
    prediction  primary -> local heuristic (over history from the history chain)

Error Policy:
    - TransportError: logged, next provider tried
    - ConfigurationError: propagates immediately, no further provider is tried
    - AllProvidersExhausted: raised once a chain runs out

Providers within one chain are awaited strictly one after another.
Independent operations (a dashboard refresh) may run concurrently.

Example Usage:
    async with MarketDataClient.create() as client:
        snapshots = await client.get_snapshots(["BTC", "ETH"])
        candles = await client.get_history("ETH", "1M")
        forecast = await client.get_prediction("ETH", "1M")
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

from core.config import settings
from core.errors import AllProvidersExhausted, ConfigurationError, TransportError
from core.logging import get_logger, log_chain_exhausted, log_provider_fallback
from core.prediction import predict_from_history
from core.provider_interface import MarketDataProvider, coerce_symbol, coerce_timeframe
from core.schemas import (
    AssetInfo,
    AssetSymbol,
    DashboardState,
    HistoricalCandle,
    MarketSnapshot,
    OperationResult,
    OperationStatus,
    PredictionResult,
    Timeframe,
)
from core.transport import Transport


logger = get_logger(__name__)

T = TypeVar("T")

SymbolLike = Union[AssetSymbol, str]
TimeframeLike = Union[Timeframe, str]


class MarketDataClient:
    """
    Fallback orchestrator over an ordered list of providers per operation.

    Attributes:
        snapshot_providers: Chain tried by get_snapshots
        history_providers: Chain tried by get_history
        prediction_providers: Chain tried by get_prediction before the heuristic
        tracked_symbols: Default symbols for snapshots and the asset catalogue

    Example:
        >>> async with MarketDataClient.create() as client:
        ...     state = await client.refresh_dashboard(selected="BTC", timeframe="1M")
        ...     print(state.markets.status, state.history.status, state.prediction.status)
    """

    def __init__(
        self,
        snapshot_providers: Sequence[MarketDataProvider],
        history_providers: Sequence[MarketDataProvider],
        prediction_providers: Sequence[MarketDataProvider],
        transport: Optional[Transport] = None,
        tracked_symbols: Optional[Sequence[SymbolLike]] = None,
    ):
        """
        Args:
            snapshot_providers: Providers for snapshots, in priority order
            history_providers: Providers for history, in priority order
            prediction_providers: Providers for predictions, in priority order
            transport: Transport whose session this client opens and closes
                (None if the caller manages it)
            tracked_symbols: Defaults to TRACKED_SYMBOLS from settings

        Raises:
            ConfigurationError: If a provider is placed in a chain for an
                operation it does not support
        """
        self.snapshot_providers = self._check_chain("snapshots", snapshot_providers)
        self.history_providers = self._check_chain("history", history_providers)
        self.prediction_providers = self._check_chain("prediction", prediction_providers)
        self.transport = transport

        symbols = tracked_symbols if tracked_symbols is not None else settings.symbols_list
        self.tracked_symbols = tuple(coerce_symbol(s) for s in symbols)

    @classmethod
    def create(cls, timeout: Optional[float] = None) -> "MarketDataClient":
        """
        Build a client with the standard three-tier chains over one transport.

        Args:
            timeout: Per-attempt timeout in seconds (defaults to REQUEST_TIMEOUT)
        """
        # Providers import core, so they are imported here
        from providers import BinanceProvider, CoinGeckoProvider, PrimaryAPIProvider

        transport = Transport(timeout=timeout)
        primary = PrimaryAPIProvider(transport)
        binance = BinanceProvider(transport)
        coingecko = CoinGeckoProvider(transport)

        return cls(
            snapshot_providers=[primary, binance, coingecko],
            history_providers=[primary, binance, coingecko],
            prediction_providers=[primary],
            transport=transport,
        )

    @staticmethod
    def _check_chain(operation: str, providers: Sequence[MarketDataProvider]) -> tuple:
        for provider in providers:
            if not provider.supports(operation):
                raise ConfigurationError(f"{provider.name} cannot serve {operation}")
        return tuple(providers)

    # ============================================
    # Lifecycle
    # ============================================

    async def __aenter__(self):
        if self.transport is not None:
            await self.transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.transport is not None:
            await self.transport.__aexit__(exc_type, exc_val, exc_tb)

    # ============================================
    # Cascade
    # ============================================

    async def _cascade(
        self,
        operation: str,
        providers: Sequence[MarketDataProvider],
        call: Callable[[MarketDataProvider], Awaitable[T]],
    ) -> T:
        """
        Try each provider in order and return the first success.

        Only TransportError moves on to the next provider; anything else
        (ConfigurationError included) propagates unchanged.

        Raises:
            AllProvidersExhausted: If every provider raised TransportError
        """
        for provider in providers:
            try:
                result = await call(provider)
            except TransportError as e:
                log_provider_fallback(operation, provider.name, str(e))
                continue

            logger.info(f"{operation} served by {provider.name}")
            return result

        log_chain_exhausted(operation, len(providers))
        raise AllProvidersExhausted(operation)

    # ============================================
    # Operations
    # ============================================

    async def get_snapshots(self, symbols: Optional[Sequence[SymbolLike]] = None) -> List[MarketSnapshot]:
        """
        Fetch market snapshots, in the order requested.

        Args:
            symbols: Canonical tickers (defaults to the tracked symbols)

        Raises:
            ConfigurationError: Unknown or unsupported symbol
            AllProvidersExhausted: Every snapshot provider failed
        """
        requested = [coerce_symbol(s) for s in (symbols if symbols is not None else self.tracked_symbols)]
        if not requested:
            return []
        return await self._cascade(
            "snapshots",
            self.snapshot_providers,
            lambda provider: provider.get_snapshots(requested),
        )

    async def get_history(self, symbol: SymbolLike, timeframe: TimeframeLike) -> List[HistoricalCandle]:
        """
        Fetch candles for one asset, ascending by timestamp.

        Raises:
            ConfigurationError: Unknown or unsupported symbol/timeframe
            AllProvidersExhausted: Every history provider failed
        """
        canonical = coerce_symbol(symbol)
        frame = coerce_timeframe(timeframe)
        return await self._cascade(
            "history",
            self.history_providers,
            lambda provider: provider.get_history(canonical, frame),
        )

    async def get_prediction(self, symbol: SymbolLike, timeframe: TimeframeLike) -> PredictionResult:
        """
        Fetch a forecast, falling back to the local momentum heuristic.

        The heuristic runs over candles fetched through the history chain;
        it only runs after that fetch has completed.

        Raises:
            ConfigurationError: Unknown or unsupported symbol/timeframe
            AllProvidersExhausted: No prediction provider answered and no
                history was available for the heuristic
        """
        canonical = coerce_symbol(symbol)
        frame = coerce_timeframe(timeframe)

        try:
            return await self._cascade(
                "prediction",
                self.prediction_providers,
                lambda provider: provider.get_prediction(canonical, frame),
            )
        except AllProvidersExhausted:
            logger.warning(f"No prediction service reachable for {canonical.value}, using local heuristic")

        try:
            candles = await self.get_history(canonical, frame)
        except AllProvidersExhausted as e:
            raise AllProvidersExhausted("prediction") from e

        if not candles:
            logger.error(f"No history for {canonical.value} {frame.value}; heuristic cannot run")
            raise AllProvidersExhausted("prediction")

        return predict_from_history(canonical, frame, candles)

    def list_assets(self) -> List[AssetInfo]:
        """Catalogue of tracked assets."""
        return [AssetInfo(symbol=s, name=s.display_name) for s in self.tracked_symbols]

    # ============================================
    # Dashboard Refresh
    # ============================================

    async def refresh_dashboard(
        self,
        symbols: Optional[Sequence[SymbolLike]] = None,
        selected: SymbolLike = AssetSymbol.BTC,
        timeframe: TimeframeLike = None,
    ) -> DashboardState:
        """
        Run snapshots, history and prediction concurrently.

        Each operation settles on its own: exhaustion in one marks only that
        operation as error. An unknown symbol or timeframe is rejected before
        any request. A ConfigurationError raised by an adapter mid-refresh
        cancels the operations still running, then propagates.

        Args:
            symbols: Snapshot symbols (defaults to the tracked symbols)
            selected: Asset for history and prediction
            timeframe: Horizon (defaults to DEFAULT_TIMEFRAME)
        """
        requested = [coerce_symbol(s) for s in (symbols if symbols is not None else self.tracked_symbols)]
        canonical = coerce_symbol(selected)
        frame = coerce_timeframe(timeframe or settings.default_timeframe)

        logger.info(f"Refreshing dashboard: {canonical.value} {frame.value}")

        tasks = [
            asyncio.ensure_future(_settle(self.get_snapshots(requested))),
            asyncio.ensure_future(_settle(self.get_history(canonical, frame))),
            asyncio.ensure_future(_settle(self.get_prediction(canonical, frame))),
        ]
        try:
            markets, history, prediction = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return DashboardState(
            selected=canonical,
            timeframe=frame,
            markets=markets,
            history=history,
            prediction=prediction,
        )


async def _settle(operation: Awaitable) -> OperationResult:
    try:
        data = await operation
    except AllProvidersExhausted as e:
        return OperationResult(status=OperationStatus.ERROR, error=str(e))
    return OperationResult(status=OperationStatus.SUCCESS, data=data)
