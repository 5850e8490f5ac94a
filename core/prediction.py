"""
Local Prediction Heuristic

Deterministic momentum forecast used when no upstream prediction service
answers. It performs no I/O: the caller supplies the candles.

Formula:
    momentum       = (last_close - first_close) / first_close   (0 if first_close == 0)
    projected_move = momentum * 0.25
    predicted      = max(last_close * (1 + projected_move), 0)
    direction      = up if projected_move > 0.005, down if < -0.005, else flat
    confidence     = min(|momentum| * 100 + 55, 92)

Confidence starts at 55 and never exceeds 92.
"""

from datetime import datetime
from typing import Optional, Sequence, Union

from core.schemas import (
    AssetSymbol,
    Direction,
    HistoricalCandle,
    PredictionResult,
    Timeframe,
)
from core.utils.time import current_utc_datetime


SOURCE = "heuristic"

MOMENTUM_DAMPING = 0.25
DIRECTION_THRESHOLD = 0.005
CONFIDENCE_FLOOR = 55.0
CONFIDENCE_CEILING = 92.0


def compute_momentum(first_close: float, last_close: float) -> float:
    """Fractional change across the window; 0 when the window starts at 0."""
    if first_close == 0:
        return 0.0
    return (last_close - first_close) / first_close


def project_price(last_close: float, momentum: float) -> float:
    """Damped projection of the last close, floored at 0."""
    return max(last_close * (1 + momentum * MOMENTUM_DAMPING), 0.0)


def classify_direction(projected_move: float) -> Direction:
    if projected_move > DIRECTION_THRESHOLD:
        return Direction.UP
    if projected_move < -DIRECTION_THRESHOLD:
        return Direction.DOWN
    return Direction.FLAT


def confidence_from_momentum(momentum: float) -> float:
    return min(abs(momentum) * 100 + CONFIDENCE_FLOOR, CONFIDENCE_CEILING)


def predict_from_history(
    symbol: AssetSymbol,
    timeframe: Union[Timeframe, str],
    candles: Sequence[HistoricalCandle],
    generated_at: Optional[datetime] = None,
) -> PredictionResult:
    """
    Derive a forecast from a candle sequence.

    Args:
        symbol: Asset the candles belong to
        timeframe: Horizon label for the result
        candles: Candles ascending by timestamp (only first/last close are read)
        generated_at: Generation timestamp (defaults to now, UTC)

    Returns:
        PredictionResult with source="heuristic"

    Raises:
        ValueError: If candles is empty

    Example:
        >>> result = predict_from_history(AssetSymbol.BTC, "1M", candles)  # closes 100 -> 110
        >>> result.predicted_price_usd, result.direction, result.confidence_pct
        (112.75, <Direction.UP: 'up'>, 65.0)
    """
    if not candles:
        raise ValueError("cannot predict from an empty candle sequence")

    first_close = candles[0].close
    last_close = candles[-1].close

    momentum = compute_momentum(first_close, last_close)
    projected_move = momentum * MOMENTUM_DAMPING
    predicted_price = project_price(last_close, momentum)

    horizon = timeframe.value if isinstance(timeframe, Timeframe) else str(timeframe)

    return PredictionResult(
        source=SOURCE,
        symbol=symbol,
        horizon=horizon,
        predicted_price_usd=predicted_price,
        confidence_pct=confidence_from_momentum(momentum),
        direction=classify_direction(projected_move),
        generated_at=generated_at or current_utc_datetime(),
    )
