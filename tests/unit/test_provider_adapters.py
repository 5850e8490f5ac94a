"""
Unit Tests for Provider Adapters

These tests verify that each adapter:
- Maps every canonical symbol/timeframe to a distinct provider identifier
- Builds the provider-specific request
- Raises ConfigurationError outside its static tables
- Turns a schema mismatch into TransportError

Run with:
    pytest tests/unit/test_provider_adapters.py -v
"""

import json

import pytest

from core.errors import ConfigurationError, TransportError
from core.provider_interface import MarketDataProvider, coerce_symbol, coerce_timeframe
from core.schemas import AssetSymbol, Timeframe
from providers import BinanceProvider, CoinGeckoProvider, PrimaryAPIProvider
from tests.payloads import (
    BINANCE_URL,
    COINGECKO_URL,
    PRIMARY_URL,
    BINANCE_KLINES,
    BINANCE_TICKERS,
    COINGECKO_MARKET_CHART,
    COINGECKO_MARKETS,
    PRIMARY_HISTORY,
    PRIMARY_MARKETS,
    PRIMARY_PREDICTION,
)


PROVIDER_CLASSES = [PrimaryAPIProvider, BinanceProvider, CoinGeckoProvider]


# ============================================
# Static Mapping Tables
# ============================================

class TestMappingTables:
    """Symbol/timeframe tables are total and injective"""

    @pytest.mark.parametrize("provider_cls", PROVIDER_CLASSES)
    def test_symbol_map_total(self, provider_cls, fake_transport):
        provider = provider_cls(fake_transport, base_url="http://x.test")
        for symbol in AssetSymbol:
            assert provider.resolve_symbol(symbol)

    @pytest.mark.parametrize("provider_cls", PROVIDER_CLASSES)
    def test_symbol_map_injective(self, provider_cls, fake_transport):
        provider = provider_cls(fake_transport, base_url="http://x.test")
        ids = [provider.resolve_symbol(symbol) for symbol in AssetSymbol]
        assert len(set(ids)) == len(ids)

    @pytest.mark.parametrize("provider_cls", PROVIDER_CLASSES)
    def test_timeframe_map_total_and_injective(self, provider_cls, fake_transport):
        provider = provider_cls(fake_transport, base_url="http://x.test")
        params = [provider.resolve_timeframe(tf) for tf in Timeframe]
        assert len(set(params)) == len(params)

    @pytest.mark.parametrize("provider_cls", PROVIDER_CLASSES)
    def test_tables_are_read_only(self, provider_cls, fake_transport):
        provider = provider_cls(fake_transport, base_url="http://x.test")
        with pytest.raises(TypeError):
            provider.symbol_map[AssetSymbol.BTC] = "OTHER"

    def test_binance_limits_within_max(self):
        for interval, limit in BinanceProvider.TIMEFRAME_MAP.values():
            assert 0 < limit <= 1000

    def test_all_providers_are_market_data_providers(self):
        for cls in PROVIDER_CLASSES:
            assert issubclass(cls, MarketDataProvider)


class TestCoercion:
    """Canonical coercion of caller input"""

    def test_coerce_symbol_accepts_lowercase(self):
        assert coerce_symbol(" eth ") == AssetSymbol.ETH

    def test_coerce_symbol_rejects_untracked(self):
        with pytest.raises(ConfigurationError):
            coerce_symbol("DOGE")

    def test_coerce_timeframe(self):
        assert coerce_timeframe("1m") == Timeframe.ONE_MONTH
        with pytest.raises(ConfigurationError):
            coerce_timeframe("5Y")


class TestNormalizeGuard:
    """Only schema mismatches become TransportError"""

    def test_value_error_becomes_transport_error(self, primary):
        def reject(payload):
            raise ValueError("no market row for BTC")

        with pytest.raises(TransportError) as exc_info:
            primary.normalize(f"{PRIMARY_URL}/markets", reject, [])

        assert "unexpected primary response shape" in exc_info.value.message

    def test_normalizer_bug_propagates(self, primary):
        def broken(payload):
            return payload["missing"]

        with pytest.raises(KeyError):
            primary.normalize(f"{PRIMARY_URL}/markets", broken, {})


# ============================================
# Internal API
# ============================================

class TestPrimaryAPIProvider:

    @pytest.mark.asyncio
    async def test_get_snapshots_sends_csv(self, primary, fake_transport):
        fake_transport.add(f"{PRIMARY_URL}/markets", PRIMARY_MARKETS)

        result = await primary.get_snapshots([AssetSymbol.BTC, AssetSymbol.ETH])

        assert fake_transport.calls_to(f"{PRIMARY_URL}/markets") == [{"symbols": "BTC,ETH"}]
        assert [s.symbol for s in result] == [AssetSymbol.BTC, AssetSymbol.ETH]

    @pytest.mark.asyncio
    async def test_get_history_params(self, primary, fake_transport):
        fake_transport.add(f"{PRIMARY_URL}/history", PRIMARY_HISTORY)

        candles = await primary.get_history(AssetSymbol.BTC, Timeframe.ONE_WEEK)

        assert fake_transport.calls_to(f"{PRIMARY_URL}/history") == [{"symbol": "BTC", "timeframe": "1W"}]
        assert len(candles) == 2

    @pytest.mark.asyncio
    async def test_get_prediction(self, primary, fake_transport):
        fake_transport.add(f"{PRIMARY_URL}/prediction", PRIMARY_PREDICTION)

        result = await primary.get_prediction(AssetSymbol.BTC, Timeframe.ONE_MONTH)

        assert result.predicted_price_usd == 52000.0
        assert result.source == "primary"

    @pytest.mark.asyncio
    async def test_schema_mismatch_is_transport_error(self, primary, fake_transport):
        fake_transport.add(f"{PRIMARY_URL}/prediction", {"symbol": "BTC"})

        with pytest.raises(TransportError):
            await primary.get_prediction(AssetSymbol.BTC, Timeframe.ONE_MONTH)

    @pytest.mark.asyncio
    async def test_restricted_table_raises_configuration_error(self, fake_transport):
        provider = PrimaryAPIProvider(fake_transport, base_url=PRIMARY_URL, symbol_map={AssetSymbol.BTC: "BTC"})

        with pytest.raises(ConfigurationError):
            await provider.get_history(AssetSymbol.XRP, Timeframe.ONE_DAY)
        assert fake_transport.calls == []


# ============================================
# Binance
# ============================================

class TestBinanceProvider:

    @pytest.mark.asyncio
    async def test_get_snapshots_sends_json_array(self, binance, fake_transport):
        fake_transport.add(f"{BINANCE_URL}/ticker/24hr", BINANCE_TICKERS)

        result = await binance.get_snapshots([AssetSymbol.BTC, AssetSymbol.ETH])

        params = fake_transport.calls_to(f"{BINANCE_URL}/ticker/24hr")[0]
        assert json.loads(params["symbols"]) == ["BTCUSDT", "ETHUSDT"]
        assert params["symbols"] == '["BTCUSDT","ETHUSDT"]'
        assert result[0].price_usd == 50000.12
        assert result[0].market_cap_usd == 0.0

    @pytest.mark.asyncio
    async def test_get_history_interval_and_limit(self, binance, fake_transport):
        fake_transport.add(f"{BINANCE_URL}/klines", BINANCE_KLINES)

        candles = await binance.get_history(AssetSymbol.ETH, Timeframe.ONE_MONTH)

        assert fake_transport.calls_to(f"{BINANCE_URL}/klines") == [
            {"symbol": "ETHUSDT", "interval": "4h", "limit": 180}
        ]
        assert len(candles) == 2

    @pytest.mark.asyncio
    async def test_no_prediction_capability(self, binance):
        assert binance.supports("prediction") is False
        with pytest.raises(NotImplementedError):
            await binance.get_prediction(AssetSymbol.BTC, Timeframe.ONE_DAY)

    @pytest.mark.asyncio
    async def test_short_kline_row_is_transport_error(self, binance, fake_transport):
        fake_transport.add(f"{BINANCE_URL}/klines", [[1704110400000, "1.0"]])

        with pytest.raises(TransportError):
            await binance.get_history(AssetSymbol.BTC, Timeframe.ONE_DAY)

    @pytest.mark.asyncio
    async def test_non_array_kline_row_is_transport_error(self, binance, fake_transport):
        fake_transport.add(f"{BINANCE_URL}/klines", [{"openTime": 1704110400000}])

        with pytest.raises(TransportError):
            await binance.get_history(AssetSymbol.BTC, Timeframe.ONE_DAY)

    @pytest.mark.asyncio
    async def test_unknown_symbol_string(self, binance, fake_transport):
        with pytest.raises(ConfigurationError):
            await binance.get_snapshots(["BTC", "SOL"])
        assert fake_transport.calls == []


# ============================================
# CoinGecko
# ============================================

class TestCoinGeckoProvider:

    @pytest.mark.asyncio
    async def test_get_snapshots_params(self, coingecko, fake_transport):
        fake_transport.add(f"{COINGECKO_URL}/coins/markets", COINGECKO_MARKETS)

        result = await coingecko.get_snapshots([AssetSymbol.BTC, AssetSymbol.XRP])

        assert fake_transport.calls_to(f"{COINGECKO_URL}/coins/markets") == [
            {"vs_currency": "usd", "ids": "bitcoin,ripple", "price_change_percentage": "24h"}
        ]
        assert [s.symbol for s in result] == [AssetSymbol.BTC, AssetSymbol.XRP]

    @pytest.mark.asyncio
    async def test_get_history_uses_coin_path_and_days(self, coingecko, fake_transport):
        fake_transport.add(f"{COINGECKO_URL}/coins/ethereum/market_chart", COINGECKO_MARKET_CHART)

        candles = await coingecko.get_history(AssetSymbol.ETH, Timeframe.THREE_MONTHS)

        assert fake_transport.calls_to(f"{COINGECKO_URL}/coins/ethereum/market_chart") == [
            {"vs_currency": "usd", "days": 90}
        ]
        assert all(c.open == c.high == c.low == c.close for c in candles)

    def test_no_prediction_capability(self, coingecko):
        assert coingecko.supports("prediction") is False
