"""
Provider Adapters Package

One subpackage per upstream, each with:
- __init__.py: the adapter class implementing MarketDataProvider
- normalizer.py: raw response schemas and pure mapping functions to canonical types

Fallback order is not decided here; see core.market_data_client.
"""

from providers.primary import PrimaryAPIProvider
from providers.binance import BinanceProvider
from providers.coingecko import CoinGeckoProvider

__all__ = ["PrimaryAPIProvider", "BinanceProvider", "CoinGeckoProvider"]
