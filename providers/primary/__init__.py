"""
Internal API Provider

First tier of every fallback chain and the only upstream with a forecast
endpoint.

Endpoints Used:
    - GET /markets?symbols=BTC,ETH,XRP
    - GET /history?symbol=BTC&timeframe=1M
    - GET /prediction?symbol=BTC&timeframe=1M
"""

from typing import List

from core.config import settings
from core.logging import get_logger
from core.provider_interface import MarketDataProvider
from core.schemas import (
    AssetSymbol,
    HistoricalCandle,
    MarketSnapshot,
    PredictionResult,
    Timeframe,
)
from core.transport import Transport
from . import normalizer


logger = get_logger(__name__)


class PrimaryAPIProvider(MarketDataProvider):
    """
    Adapter for the internal market-data API.

    The internal API uses canonical tickers and timeframe labels as-is, so its
    tables are identity maps over the tracked set.

    Example:
        >>> async with Transport() as transport:
        ...     primary = PrimaryAPIProvider(transport)
        ...     candles = await primary.get_history(AssetSymbol.BTC, Timeframe.ONE_MONTH)
    """

    name = "primary"
    capabilities = {
        "snapshots": True,
        "history": True,
        "prediction": True,
    }

    SYMBOL_MAP = {symbol: symbol.value for symbol in AssetSymbol}
    TIMEFRAME_MAP = {timeframe: timeframe.value for timeframe in Timeframe}

    def __init__(self, transport: Transport, base_url: str = None, symbol_map=None):
        super().__init__(transport, base_url or settings.primary_api_base_url, symbol_map)

    async def get_snapshots(self, symbols: List[AssetSymbol]) -> List[MarketSnapshot]:
        ids = self.resolve_symbols(symbols)
        url = self.url("/markets")

        logger.info(f"Fetching snapshots from {self.name}: {', '.join(ids)}")
        payload = await self.transport.fetch(url, params={"symbols": ",".join(ids)})

        return self.normalize(url, normalizer.normalize_snapshots, payload, list(ids.values()))

    async def get_history(self, symbol: AssetSymbol, timeframe: Timeframe) -> List[HistoricalCandle]:
        params = {
            "symbol": self.resolve_symbol(symbol),
            "timeframe": self.resolve_timeframe(timeframe),
        }
        url = self.url("/history")

        logger.info(f"Fetching history from {self.name}: {params['symbol']} {params['timeframe']}")
        payload = await self.transport.fetch(url, params=params)

        candles = self.normalize(url, normalizer.normalize_history, payload)
        logger.info(f"Fetched {len(candles)} candles from {self.name}")
        return candles

    async def get_prediction(self, symbol: AssetSymbol, timeframe: Timeframe) -> PredictionResult:
        params = {
            "symbol": self.resolve_symbol(symbol),
            "timeframe": self.resolve_timeframe(timeframe),
        }
        url = self.url("/prediction")

        logger.info(f"Fetching prediction from {self.name}: {params['symbol']} {params['timeframe']}")
        payload = await self.transport.fetch(url, params=params)

        return self.normalize(url, normalizer.normalize_prediction, payload)
