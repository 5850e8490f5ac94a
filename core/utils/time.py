"""
Time Utilities

Binance kline open times and CoinGecko market_chart points are epoch
milliseconds; the internal API sends ISO-8601 strings, which pydantic parses
on its own. Canonical records always carry timezone-aware UTC datetimes.
"""

from datetime import datetime, timezone
from typing import Union


# Epoch seconds stay below this until the year 33658
MILLISECONDS_THRESHOLD = 1e12


def to_utc_datetime(epoch: Union[int, float]) -> datetime:
    """
    Epoch seconds or milliseconds to an aware UTC datetime.

    Raises:
        ValueError: If the value is negative or out of range

    Example:
        >>> to_utc_datetime(1704110400000) == to_utc_datetime(1704110400)
        True
    """
    if epoch < 0:
        raise ValueError(f"Negative epoch value: {epoch}")

    seconds = epoch / 1000.0 if epoch > MILLISECONDS_THRESHOLD else epoch
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OSError, OverflowError, ValueError) as e:
        raise ValueError(f"Epoch value out of range: {epoch} ({e})") from e


def current_utc_datetime() -> datetime:
    return datetime.now(timezone.utc)
