"""
Binance Spot Provider (exchange-ticker tier)

Second tier for snapshots and history. Binance has no forecast endpoint.

API Documentation:
    https://binance-docs.github.io/apidocs/spot/en/

Endpoints Used:
    - GET /ticker/24hr?symbols=["BTCUSDT","ETHUSDT"]  (weight scales with symbol count)
    - GET /klines?symbol=BTCUSDT&interval=4h&limit=180

Rate Limits:
    Weight-based (6000 per minute on spot). The fallback chain never issues
    requests to two providers at once, and this adapter never retries.
"""

import json
from typing import List

from core.config import settings
from core.logging import get_logger
from core.provider_interface import MarketDataProvider
from core.schemas import AssetSymbol, HistoricalCandle, MarketSnapshot, Timeframe
from core.transport import Transport
from . import normalizer


logger = get_logger(__name__)

# Binance spot caps /klines at 1000 rows
MAX_KLINES = 1000


class BinanceProvider(MarketDataProvider):
    """
    Adapter for Binance spot market data, quoted in USDT.

    Timeframes map to an (interval, limit) pair sized to cover the horizon:

        1D -> 15m x 96     1W -> 1h x 168     1M -> 4h x 180
        3M -> 1d x 90      1Y -> 1d x 365

    Example:
        >>> async with Transport() as transport:
        ...     binance = BinanceProvider(transport)
        ...     snapshots = await binance.get_snapshots([AssetSymbol.BTC, AssetSymbol.ETH])
    """

    name = "binance"
    capabilities = {
        "snapshots": True,
        "history": True,
        "prediction": False,
    }

    SYMBOL_MAP = {
        AssetSymbol.BTC: "BTCUSDT",
        AssetSymbol.ETH: "ETHUSDT",
        AssetSymbol.XRP: "XRPUSDT",
    }

    TIMEFRAME_MAP = {
        Timeframe.ONE_DAY: ("15m", 96),
        Timeframe.ONE_WEEK: ("1h", 168),
        Timeframe.ONE_MONTH: ("4h", 180),
        Timeframe.THREE_MONTHS: ("1d", 90),
        Timeframe.ONE_YEAR: ("1d", 365),
    }

    def __init__(self, transport: Transport, base_url: str = None, symbol_map=None):
        super().__init__(transport, base_url or settings.binance_base_url, symbol_map)

    async def get_snapshots(self, symbols: List[AssetSymbol]) -> List[MarketSnapshot]:
        ids = self.resolve_symbols(symbols)
        url = self.url("/ticker/24hr")

        # Binance expects a compact JSON array: ["BTCUSDT","ETHUSDT"]
        params = {"symbols": json.dumps(list(ids), separators=(",", ":"))}

        logger.info(f"Fetching 24h tickers from {self.name}: {params['symbols']}")
        payload = await self.transport.fetch(url, params=params)

        return self.normalize(url, normalizer.normalize_snapshots, payload, ids)

    async def get_history(self, symbol: AssetSymbol, timeframe: Timeframe) -> List[HistoricalCandle]:
        interval, limit = self.resolve_timeframe(timeframe)
        params = {
            "symbol": self.resolve_symbol(symbol),
            "interval": interval,
            "limit": min(limit, MAX_KLINES),
        }
        url = self.url("/klines")

        logger.info(f"Fetching klines from {self.name}: {params['symbol']} {interval} (limit={params['limit']})")
        payload = await self.transport.fetch(url, params=params)

        candles = self.normalize(url, normalizer.normalize_klines, payload)
        logger.info(f"Fetched {len(candles)} candles from {self.name}")
        return candles
