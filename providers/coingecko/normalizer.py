"""
CoinGecko Normalizer

Response Formats:
    GET /coins/markets
        [{"id": "bitcoin", "symbol": "btc", "name": "Bitcoin",
          "current_price": 50000.12, "price_change_percentage_24h": -1.3,
          "total_volume": 2.5e10, "market_cap": 9.8e11}]

        Any numeric field may be null for thinly tracked coins; nulls become 0.

    GET /coins/{id}/market_chart
        {"prices": [[1704067200000, 42283.58], ...],
         "market_caps": [...], "total_volumes": [...]}

market_chart carries single price points, not OHLC. Each point becomes a
candle with open = high = low = close.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, TypeAdapter

from core.schemas import ASSET_NAMES, AssetSymbol, HistoricalCandle, MarketSnapshot
from core.utils.time import to_utc_datetime


SOURCE = "coingecko"


class CoinGeckoMarket(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    current_price: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    total_volume: Optional[float] = None
    market_cap: Optional[float] = None


class CoinGeckoMarketChart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    prices: List[Tuple[float, float]]


_markets_adapter = TypeAdapter(List[CoinGeckoMarket])


def normalize_markets(payload, ids: Dict[str, AssetSymbol]) -> List[MarketSnapshot]:
    """
    Map a /coins/markets payload to snapshots.

    Args:
        payload: Raw market list
        ids: CoinGecko id -> canonical symbol, in requested order

    Raises:
        ValueError: If the payload is malformed or a requested coin is missing
    """
    markets = {m.id: m for m in _markets_adapter.validate_python(payload)}

    snapshots = []
    for coin_id, symbol in ids.items():
        market = markets.get(coin_id)
        if market is None:
            raise ValueError(f"no market row for {coin_id}")
        snapshots.append(
            MarketSnapshot(
                source=SOURCE,
                symbol=symbol,
                name=ASSET_NAMES[symbol],
                price_usd=market.current_price or 0.0,
                change_24h_pct=market.price_change_percentage_24h or 0.0,
                volume_24h_usd=market.total_volume or 0.0,
                market_cap_usd=market.market_cap or 0.0,
            )
        )
    return snapshots


def normalize_market_chart(payload) -> List[HistoricalCandle]:
    """Map a /market_chart payload to flat candles ascending by timestamp."""
    chart = CoinGeckoMarketChart.model_validate(payload)
    candles = [
        HistoricalCandle(
            source=SOURCE,
            timestamp=to_utc_datetime(timestamp),
            open=price,
            high=price,
            low=price,
            close=price,
        )
        for timestamp, price in chart.prices
    ]
    return sorted(candles, key=lambda c: c.timestamp)
