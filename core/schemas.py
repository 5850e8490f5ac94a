"""
Canonical Data Schemas

This module defines the provider-agnostic types every operation returns.

Key Principle:
    Regardless of which upstream answered (internal API, Binance, CoinGecko)
    or whether the prediction came from the local heuristic, the caller
    receives exactly these shapes.

Models:
    - MarketSnapshot: price, 24h change, volume and market cap for one asset
    - HistoricalCandle: one sampled interval (open/high/low/close)
    - PredictionResult: forecast price, confidence and direction
    - AssetInfo: catalogue entry for a tracked asset
    - OperationResult / DashboardState: per-operation outcome of a dashboard refresh

All value records are frozen; they are constructed fresh per request.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, Field, ConfigDict


# ============================================
# Enumerations
# ============================================

class AssetSymbol(str, Enum):
    """Closed set of tracked canonical tickers."""

    BTC = "BTC"
    ETH = "ETH"
    XRP = "XRP"

    @property
    def display_name(self) -> str:
        return ASSET_NAMES[self]


class Timeframe(str, Enum):
    """Chart/prediction horizon selectable on the dashboard."""

    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    ONE_YEAR = "1Y"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


ASSET_NAMES = {
    AssetSymbol.BTC: "Bitcoin",
    AssetSymbol.ETH: "Ethereum",
    AssetSymbol.XRP: "XRP",
}


# ============================================
# Canonical Value Records
# ============================================

class CanonicalModel(BaseModel):
    """
    Base model for all canonical records.

    Records are immutable and carry the name of the provider that produced
    them so callers can tell which tier of the cascade answered.
    """

    source: str = Field(
        default="primary",
        description="Provider that produced this record",
        examples=["primary", "binance", "coingecko", "heuristic"]
    )

    model_config = ConfigDict(frozen=True)


class MarketSnapshot(CanonicalModel):
    """
    Market Snapshot

    Attributes:
        symbol: Canonical ticker
        name: Display name (e.g., "Bitcoin")
        price_usd: Last price in USD
        change_24h_pct: 24h change in percent (e.g., 2.5 means +2.5%)
        volume_24h_usd: 24h traded volume in USD
        market_cap_usd: Market capitalization in USD, 0 when the provider
            does not report it (never estimated)
    """

    symbol: AssetSymbol
    name: str
    price_usd: float = Field(..., ge=0)
    change_24h_pct: float = 0.0
    volume_24h_usd: float = Field(0.0, ge=0)
    market_cap_usd: float = Field(0.0, ge=0)


class HistoricalCandle(CanonicalModel):
    """
    One sampled interval of price history.

    Timestamps are timezone-aware UTC instants. Sequences are ordered
    ascending by timestamp; gaps are left as the provider reported them.
    """

    timestamp: datetime
    open: float = Field(..., ge=0)
    high: float = Field(..., ge=0)
    low: float = Field(..., ge=0)
    close: float = Field(..., ge=0)


class PredictionResult(CanonicalModel):
    """
    Price forecast for one asset over one horizon.

    Attributes:
        symbol: Canonical ticker
        horizon: Horizon label (the timeframe value, e.g. "1M")
        predicted_price_usd: Forecast price, never negative
        confidence_pct: Confidence in percent, bounded [0, 100]
        direction: up / down / flat
        generated_at: When the forecast was produced (UTC)
    """

    symbol: AssetSymbol
    horizon: str
    predicted_price_usd: float = Field(..., ge=0)
    confidence_pct: float = Field(..., ge=0, le=100)
    direction: Direction
    generated_at: datetime


class AssetInfo(BaseModel):
    """Catalogue entry for a tracked asset."""

    symbol: AssetSymbol
    name: str
    quote_asset: str = "USD"
    status: str = "active"

    model_config = ConfigDict(frozen=True)


# ============================================
# Dashboard Refresh State
# ============================================

class OperationStatus(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class OperationResult(BaseModel):
    """
    Outcome of one dashboard operation.

    A failed operation never hides the outcome of its siblings: each
    OperationResult is resolved independently.
    """

    status: OperationStatus = OperationStatus.LOADING
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == OperationStatus.SUCCESS


class DashboardState(BaseModel):
    """Snapshots, history and prediction gathered by one dashboard refresh."""

    selected: AssetSymbol
    timeframe: Timeframe
    markets: OperationResult = Field(default_factory=OperationResult)
    history: OperationResult = Field(default_factory=OperationResult)
    prediction: OperationResult = Field(default_factory=OperationResult)

    @property
    def selected_market(self) -> Optional[MarketSnapshot]:
        """Snapshot of the selected asset, or None if unavailable."""
        if not self.markets.ok or not self.markets.data:
            return None
        for market in self.markets.data:
            if market.symbol == self.selected:
                return market
        return None
