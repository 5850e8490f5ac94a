"""
CoinGecko Provider (aggregator-index tier)

Last tier for snapshots and history. CoinGecko has no forecast endpoint and
its chart endpoint returns single price points, not OHLC.

API Documentation:
    https://docs.coingecko.com/reference/introduction

Endpoints Used:
    - GET /coins/markets?vs_currency=usd&ids=bitcoin,ethereum&price_change_percentage=24h
    - GET /coins/{id}/market_chart?vs_currency=usd&days=30

Rate Limits:
    The public API allows roughly 30 calls/minute; a demo key
    (COINGECKO_API_KEY) raises that.
"""

from typing import List

from core.config import settings
from core.logging import get_logger
from core.provider_interface import MarketDataProvider
from core.schemas import AssetSymbol, HistoricalCandle, MarketSnapshot, Timeframe
from core.transport import Transport
from . import normalizer


logger = get_logger(__name__)


class CoinGeckoProvider(MarketDataProvider):
    """
    Adapter for CoinGecko market data in USD.

    Timeframes map to a `days` window; CoinGecko picks the granularity
    (5-minute points for 1 day, hourly up to 90 days, daily beyond).
    """

    name = "coingecko"
    capabilities = {
        "snapshots": True,
        "history": True,
        "prediction": False,
    }

    SYMBOL_MAP = {
        AssetSymbol.BTC: "bitcoin",
        AssetSymbol.ETH: "ethereum",
        AssetSymbol.XRP: "ripple",
    }

    TIMEFRAME_MAP = {
        Timeframe.ONE_DAY: 1,
        Timeframe.ONE_WEEK: 7,
        Timeframe.ONE_MONTH: 30,
        Timeframe.THREE_MONTHS: 90,
        Timeframe.ONE_YEAR: 365,
    }

    VS_CURRENCY = "usd"

    def __init__(self, transport: Transport, base_url: str = None, symbol_map=None):
        super().__init__(transport, base_url or settings.coingecko_base_url, symbol_map)

    async def get_snapshots(self, symbols: List[AssetSymbol]) -> List[MarketSnapshot]:
        ids = self.resolve_symbols(symbols)
        url = self.url("/coins/markets")
        params = {
            "vs_currency": self.VS_CURRENCY,
            "ids": ",".join(ids),
            "price_change_percentage": "24h",
        }

        logger.info(f"Fetching markets from {self.name}: {params['ids']}")
        payload = await self.transport.fetch(url, params=params, headers=settings.get_coingecko_headers())

        return self.normalize(url, normalizer.normalize_markets, payload, ids)

    async def get_history(self, symbol: AssetSymbol, timeframe: Timeframe) -> List[HistoricalCandle]:
        coin_id = self.resolve_symbol(symbol)
        days = self.resolve_timeframe(timeframe)
        url = self.url(f"/coins/{coin_id}/market_chart")
        params = {"vs_currency": self.VS_CURRENCY, "days": days}

        logger.info(f"Fetching market chart from {self.name}: {coin_id} (days={days})")
        payload = await self.transport.fetch(url, params=params, headers=settings.get_coingecko_headers())

        candles = self.normalize(url, normalizer.normalize_market_chart, payload)
        logger.info(f"Fetched {len(candles)} price points from {self.name}")
        return candles
