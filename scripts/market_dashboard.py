#!/usr/bin/env python3
"""
Fetch one dashboard refresh through the fallback chains and print it.

What it does:
- Requests snapshots for the tracked symbols, history and a prediction for
  the selected symbol, concurrently
- Prints each operation's status and which provider answered
- Prints the snapshot table, the last candles, and the forecast

Exit codes:
    0  every operation succeeded
    1  partial failure
    2  every operation failed

Usage:
  python -m scripts.market_dashboard
  python -m scripts.market_dashboard --symbols BTC,ETH --selected ETH --timeframe 1W
  python -m scripts.market_dashboard --timeout 5 --candles 10
"""

import argparse
import asyncio
import sys
from typing import List

from core.config import settings, validate_configuration
from core.errors import ConfigurationError
from core.logging import set_log_level
from core.market_data_client import MarketDataClient
from core.schemas import DashboardState


def parse_args(argv: List[str] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Print a market dashboard refresh.")
    p.add_argument("--symbols", default=settings.tracked_symbols, help="Comma-separated tickers (default: TRACKED_SYMBOLS)")
    p.add_argument("--selected", default="BTC", help="Asset for history and prediction (default: BTC)")
    p.add_argument("--timeframe", default=settings.default_timeframe, help="1D, 1W, 1M, 3M or 1Y")
    p.add_argument("--timeout", type=float, default=settings.request_timeout, help="Per-provider timeout in seconds")
    p.add_argument("--candles", type=int, default=5, help="Number of trailing candles to print")
    p.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return p.parse_args(argv)


def exit_code(state: DashboardState) -> int:
    results = [state.markets, state.history, state.prediction]
    succeeded = sum(1 for r in results if r.ok)
    if succeeded == len(results):
        return 0
    if succeeded == 0:
        return 2
    return 1


def render(state: DashboardState, candles: int = 5) -> str:
    lines = ["[Status]"]
    for label, result in (("markets", state.markets), ("history", state.history), ("prediction", state.prediction)):
        detail = f" ({result.error})" if result.error else ""
        lines.append(f"  {label:<11} {result.status.value}{detail}")

    if state.markets.ok:
        lines.append("\n[Markets]")
        for m in state.markets.data:
            lines.append(
                f"  {m.symbol.value:<4} {m.name:<10} ${m.price_usd:>14,.4f} "
                f"{m.change_24h_pct:+7.2f}% vol=${m.volume_24h_usd:,.0f} "
                f"mcap=${m.market_cap_usd:,.0f} [{m.source}]"
            )

    if state.history.ok:
        data = state.history.data
        source = data[0].source if data else "-"
        lines.append(f"\n[History {state.selected.value} {state.timeframe.value}] {len(data)} candles [{source}]")
        for c in (data[-candles:] if candles > 0 else []):
            lines.append(
                f"  {c.timestamp.isoformat()} o={c.open:,.4f} h={c.high:,.4f} "
                f"l={c.low:,.4f} c={c.close:,.4f}"
            )

    if state.prediction.ok:
        p = state.prediction.data
        lines.append(f"\n[Prediction {p.symbol.value} {p.horizon}] [{p.source}]")
        lines.append(
            f"  ${p.predicted_price_usd:,.4f} {p.direction.value} "
            f"confidence={p.confidence_pct:.1f}% at {p.generated_at.isoformat()}"
        )

    return "\n".join(lines)


async def run(args: argparse.Namespace) -> int:
    symbols = [s.strip() for s in args.symbols.split(",") if s.strip()]
    async with MarketDataClient.create(timeout=args.timeout) as client:
        state = await client.refresh_dashboard(symbols, selected=args.selected, timeframe=args.timeframe)
    print(render(state, args.candles))
    return exit_code(state)


def main(argv: List[str] = None) -> int:
    args = parse_args(argv)
    if args.log_level:
        set_log_level(args.log_level)

    try:
        validate_configuration()
        return asyncio.run(run(args))
    except (ConfigurationError, ValueError) as e:
        print(f"[Config error] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
