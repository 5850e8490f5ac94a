"""Fixture payloads copied from each upstream's documented response shape."""

PRIMARY_URL = "http://primary.test/api"
BINANCE_URL = "http://binance.test/api/v3"
COINGECKO_URL = "http://coingecko.test/api/v3"

PRIMARY_MARKETS = [
    {
        "symbol": "BTC",
        "name": "Bitcoin",
        "priceUsd": 50000.12,
        "change24hPct": 1.25,
        "volume24hUsd": 31000000000.5,
        "marketCapUsd": 980000000000.0,
    },
    {
        "symbol": "ETH",
        "name": "Ethereum",
        "priceUsd": 2500.5,
        "change24hPct": -0.75,
        "volume24hUsd": 15000000000.0,
        "marketCapUsd": None,
    },
]

PRIMARY_HISTORY = [
    {"timestamp": "2024-01-01T13:00:00Z", "open": 101.0, "high": 112.0, "low": 100.0, "close": 110.0},
    {"timestamp": "2024-01-01T12:00:00Z", "open": 99.0, "high": 101.5, "low": 98.0, "close": 100.0},
]

PRIMARY_PREDICTION = {
    "symbol": "BTC",
    "horizon": "1M",
    "predictedPriceUsd": 52000.0,
    "confidencePct": 71.5,
    "direction": "up",
    "lastModelRun": "2024-01-01T00:00:00Z",
}

BINANCE_TICKERS = [
    {
        "symbol": "BTCUSDT",
        "priceChange": "617.12",
        "priceChangePercent": "1.250",
        "lastPrice": "50000.12",
        "volume": "620.5",
        "quoteVolume": "31025000.75",
        "openTime": 1704024000000,
        "closeTime": 1704110399999,
    },
    {
        "symbol": "ETHUSDT",
        "priceChange": "-18.90",
        "priceChangePercent": "-0.750",
        "lastPrice": "2500.50",
        "volume": "12000.1",
        "quoteVolume": "30006000.00",
        "openTime": 1704024000000,
        "closeTime": 1704110399999,
    },
]

BINANCE_KLINES = [
    [
        1704110400000,
        "42283.58",
        "42554.57",
        "42261.02",
        "42475.23",
        "1271.68108",
        1704124799999,
        "53957008.49",
        47134,
        "682.57581",
        "28968550.67",
        "0",
    ],
    [
        1704124800000,
        "42475.23",
        "42775.00",
        "42431.65",
        "42613.56",
        "1196.37856",
        1704139199999,
        "51001530.77",
        44183,
        "606.34418",
        "25848421.16",
        "0",
    ],
]

COINGECKO_MARKETS = [
    {
        "id": "bitcoin",
        "symbol": "btc",
        "name": "Bitcoin",
        "current_price": 50000.12,
        "market_cap": 980000000000,
        "total_volume": 25000000000.5,
        "price_change_percentage_24h": -1.3,
    },
    {
        "id": "ripple",
        "symbol": "xrp",
        "name": "XRP",
        "current_price": 0.6123,
        "market_cap": None,
        "total_volume": None,
        "price_change_percentage_24h": None,
    },
]

COINGECKO_MARKET_CHART = {
    "prices": [
        [1704067200000, 2281.87],
        [1704153600000, 2352.45],
        [1704240000000, 2209.6],
    ],
    "market_caps": [
        [1704067200000, 274000000000.0],
        [1704153600000, 282000000000.0],
        [1704240000000, 265000000000.0],
    ],
    "total_volumes": [
        [1704067200000, 6800000000.0],
        [1704153600000, 9100000000.0],
        [1704240000000, 15000000000.0],
    ],
}
