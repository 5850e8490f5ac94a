"""
Shared fixtures for the unit tests.

FakeTransport stands in for core.transport.Transport: routes map an exact URL
(without query string) to a payload or an exception, and every call is
recorded so tests can assert on attempt order and request parameters.
"""

import asyncio

import pytest

from core.errors import TransportError
from core.market_data_client import MarketDataClient
from core.schemas import AssetSymbol
from providers import BinanceProvider, CoinGeckoProvider, PrimaryAPIProvider
from tests.payloads import BINANCE_URL, COINGECKO_URL, PRIMARY_URL



class FakeTransport:
    """In-memory Transport replacement."""

    def __init__(self):
        self.routes = {}
        self.delays = {}
        self.calls = []

    def add(self, url, response, delay=0):
        self.routes[url] = response
        self.delays[url] = delay

    def fail(self, url, message="upstream unavailable", status=503, delay=0):
        self.add(url, TransportError(url, message, status=status), delay=delay)

    async def fetch(self, url, params=None, headers=None):
        self.calls.append((url, params))
        if self.delays.get(url):
            await asyncio.sleep(self.delays[url])
        response = self.routes.get(url)
        if response is None:
            raise TransportError(url, "no route", status=404)
        if isinstance(response, Exception):
            raise response
        return response

    def calls_to(self, url):
        return [params for called, params in self.calls if called == url]

    @property
    def urls(self):
        return [url for url, _ in self.calls]


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def primary(fake_transport):
    return PrimaryAPIProvider(fake_transport, base_url=PRIMARY_URL)


@pytest.fixture
def binance(fake_transport):
    return BinanceProvider(fake_transport, base_url=BINANCE_URL)


@pytest.fixture
def coingecko(fake_transport):
    return CoinGeckoProvider(fake_transport, base_url=COINGECKO_URL)


@pytest.fixture
def client(primary, binance, coingecko):
    """Client wired with the standard three-tier chains over FakeTransport."""
    return MarketDataClient(
        snapshot_providers=[primary, binance, coingecko],
        history_providers=[primary, binance, coingecko],
        prediction_providers=[primary],
        tracked_symbols=[AssetSymbol.BTC, AssetSymbol.ETH, AssetSymbol.XRP],
    )
