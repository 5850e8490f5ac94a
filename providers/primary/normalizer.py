"""
Internal API Normalizer

The internal API already speaks the canonical shape, but in camelCase JSON
with nullable numbers. These schemas pin the fields we read so a contract
change fails validation instead of passing missing values through.

Response Formats:
    GET /markets
        [{"symbol": "BTC", "name": "Bitcoin", "priceUsd": 50000.12,
          "change24hPct": 1.2, "volume24hUsd": 3.1e10, "marketCapUsd": 9.8e11}]

    GET /history
        [{"timestamp": "2024-01-01T12:00:00Z", "open": 1, "high": 2, "low": 0.5, "close": 1.5}]

    GET /prediction
        {"symbol": "BTC", "horizon": "1M", "predictedPriceUsd": 52000,
         "confidencePct": 71, "direction": "up", "lastModelRun": "2024-01-01T00:00:00Z"}
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from core.schemas import (
    ASSET_NAMES,
    AssetSymbol,
    Direction,
    HistoricalCandle,
    MarketSnapshot,
    PredictionResult,
)


SOURCE = "primary"


class PrimaryModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PrimarySnapshot(PrimaryModel):
    symbol: str
    name: Optional[str] = None
    price_usd: float = Field(..., alias="priceUsd")
    change_24h_pct: Optional[float] = Field(None, alias="change24hPct")
    volume_24h_usd: Optional[float] = Field(None, alias="volume24hUsd")
    market_cap_usd: Optional[float] = Field(None, alias="marketCapUsd")


class PrimaryCandle(PrimaryModel):
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float


class PrimaryPrediction(PrimaryModel):
    symbol: AssetSymbol
    horizon: str
    predicted_price_usd: float = Field(..., alias="predictedPriceUsd")
    confidence_pct: Optional[float] = Field(None, alias="confidencePct")
    direction: Direction
    last_model_run: datetime = Field(..., alias="lastModelRun")


_snapshots_adapter = TypeAdapter(List[PrimarySnapshot])
_candles_adapter = TypeAdapter(List[PrimaryCandle])


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_snapshots(payload, symbols: List[AssetSymbol]) -> List[MarketSnapshot]:
    """
    Map a /markets payload to snapshots in the requested symbol order.

    Raises:
        ValueError: If the payload is malformed or a requested symbol is missing
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected market array, got {type(payload).__name__}")

    # Only requested rows are validated; the API may list assets we do not track
    wanted = {symbol.value for symbol in symbols}
    requested_rows = [
        raw for raw in payload
        if isinstance(raw, dict) and str(raw.get("symbol", "")).upper() in wanted
    ]
    rows = {row.symbol.upper(): row for row in _snapshots_adapter.validate_python(requested_rows)}

    snapshots = []
    for symbol in symbols:
        row = rows.get(symbol.value)
        if row is None:
            raise ValueError(f"no market row for {symbol.value}")
        snapshots.append(
            MarketSnapshot(
                source=SOURCE,
                symbol=symbol,
                name=row.name or ASSET_NAMES[symbol],
                price_usd=row.price_usd,
                change_24h_pct=row.change_24h_pct or 0.0,
                volume_24h_usd=row.volume_24h_usd or 0.0,
                market_cap_usd=row.market_cap_usd or 0.0,
            )
        )
    return snapshots


def normalize_history(payload) -> List[HistoricalCandle]:
    """Map a /history payload to candles ascending by timestamp."""
    rows = _candles_adapter.validate_python(payload)
    candles = [
        HistoricalCandle(
            source=SOURCE,
            timestamp=_as_utc(row.timestamp),
            open=row.open,
            high=row.high,
            low=row.low,
            close=row.close,
        )
        for row in rows
    ]
    return sorted(candles, key=lambda c: c.timestamp)


def normalize_prediction(payload) -> PredictionResult:
    """Map a /prediction payload; a missing confidence becomes 0."""
    row = PrimaryPrediction.model_validate(payload)
    return PredictionResult(
        source=SOURCE,
        symbol=row.symbol,
        horizon=row.horizon,
        predicted_price_usd=row.predicted_price_usd,
        confidence_pct=row.confidence_pct or 0.0,
        direction=row.direction,
        generated_at=_as_utc(row.last_model_run),
    )
