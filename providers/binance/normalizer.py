"""
Binance Normalizer

Binance reports prices and volumes as decimal strings and klines as
fixed-position arrays. Strings are parsed with float(), which round-trips the
decimal text exactly (e.g. "50000.12" -> 50000.12).

Response Formats:
    GET /ticker/24hr?symbols=["BTCUSDT"]
        [{"symbol": "BTCUSDT", "lastPrice": "50000.12",
          "priceChangePercent": "1.250", "quoteVolume": "1234567.89", ...}]

    GET /klines
        [
          [
            1499040000000,      // Open time (ms)
            "0.01634000",       // Open
            "0.80000000",       // High
            "0.01575800",       // Low
            "0.01577100",       // Close
            "148976.11427815",  // Volume
            1499644799999,      // Close time
            ...
          ]
        ]

Binance has no market cap and no display names: market cap is 0 and the
name comes from the canonical asset table.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from core.schemas import ASSET_NAMES, AssetSymbol, HistoricalCandle, MarketSnapshot
from core.utils.time import to_utc_datetime


SOURCE = "binance"


class BinanceTicker24hr(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: str
    last_price: float = Field(..., alias="lastPrice")
    price_change_percent: float = Field(0.0, alias="priceChangePercent")
    quote_volume: float = Field(0.0, alias="quoteVolume")


class BinanceKline(BaseModel):
    open_time: int
    open: float
    high: float
    low: float
    close: float

    @classmethod
    def from_row(cls, row: list) -> "BinanceKline":
        if not isinstance(row, (list, tuple)) or len(row) < 5:
            raise ValueError(f"malformed kline row: {row!r}")
        return cls(open_time=row[0], open=row[1], high=row[2], low=row[3], close=row[4])


_tickers_adapter = TypeAdapter(List[BinanceTicker24hr])


def normalize_snapshots(payload, ids: Dict[str, AssetSymbol]) -> List[MarketSnapshot]:
    """
    Map a /ticker/24hr payload to snapshots.

    Args:
        payload: Raw ticker list
        ids: Binance symbol -> canonical symbol, in requested order

    Raises:
        ValueError: If the payload is malformed or a requested ticker is missing
    """
    tickers = {t.symbol: t for t in _tickers_adapter.validate_python(payload)}

    snapshots = []
    for binance_symbol, symbol in ids.items():
        ticker = tickers.get(binance_symbol)
        if ticker is None:
            raise ValueError(f"no ticker row for {binance_symbol}")
        snapshots.append(
            MarketSnapshot(
                source=SOURCE,
                symbol=symbol,
                name=ASSET_NAMES[symbol],
                price_usd=ticker.last_price,
                change_24h_pct=ticker.price_change_percent,
                volume_24h_usd=ticker.quote_volume,
                market_cap_usd=0.0,
            )
        )
    return snapshots


def normalize_klines(payload) -> List[HistoricalCandle]:
    """Map a /klines payload to candles ascending by open time."""
    if not isinstance(payload, list):
        raise ValueError(f"expected kline array, got {type(payload).__name__}")

    klines = [BinanceKline.from_row(row) for row in payload]
    candles = [
        HistoricalCandle(
            source=SOURCE,
            timestamp=to_utc_datetime(k.open_time),
            open=k.open,
            high=k.high,
            low=k.low,
            close=k.close,
        )
        for k in klines
    ]
    return sorted(candles, key=lambda c: c.timestamp)
