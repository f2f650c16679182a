"""CLI helper to scan one or many symbols for channel breakouts and retests."""

from __future__ import annotations

import argparse
import json
import logging
import random
from dataclasses import asdict
from typing import Any

from adapters.data_providers.binance import make_market_data
from common.symbols import DEFAULT_QUOTE_ASSET, with_quote_asset
from config.logging import setup_logging
from config.settings import load_settings
from core.ports.settings import (
    SettingsProvider,
    get_interval,
    get_log_level,
    get_log_mode,
    get_symbol,
)
from strategies.channel_breakout import (
    ChannelBreakoutConfig,
    ScanResult,
    analyze_symbol,
    load_channel_config,
    scan_symbols,
)
from strategies.channel_breakout.formatting import (
    format_scan_report,
    format_signals,
    format_summary,
    latest_breakout_digest,
    summarize_scan,
    summarize_signals,
    top_opportunities,
)

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scan symbols for regression channel breakouts")
    parser.add_argument("symbols", nargs="*", help="Symbols to scan, e.g. ETHUSDT or BNB")
    parser.add_argument("--interval", help="Candle interval (default from settings)")
    parser.add_argument("--json", action="store_true", help="Print signals as JSON")
    parser.add_argument(
        "--all",
        action="store_true",
        help=f"Scan every trading {DEFAULT_QUOTE_ASSET} perpetual listed by the exchange",
    )
    parser.add_argument("--sample", type=int, help="Scan only this many randomly chosen symbols")
    parser.add_argument(
        "--pause",
        type=float,
        default=0.1,
        help="Seconds to wait between symbols in a multi-symbol scan",
    )
    return parser.parse_args(argv)


def _json_payload(symbol: str, interval: str, signals: list[Any]) -> dict[str, Any]:
    digest = latest_breakout_digest(signals)
    return {
        "symbol": symbol,
        "interval": interval,
        "signals": [signal.to_dict() for signal in signals],
        "latest": {
            "has_breakout": digest.has_breakout,
            "direction": digest.direction,
            "confidence": digest.confidence,
        },
    }


def _scan_payload(interval: str, result: ScanResult) -> dict[str, Any]:
    summary = summarize_scan(result.signals)
    return {
        "interval": interval,
        "symbols": result.symbols,
        "processed": result.processed,
        "failed": result.failed,
        "signals": [signal.to_dict() for signal in result.signals],
        "summary": {**asdict(summary), "unique_symbols": summary.unique_symbols},
        "top": [signal.to_dict() for signal in top_opportunities(result.signals)],
    }


def _run_single(
    args: argparse.Namespace,
    symbol: str,
    interval: str,
    config: ChannelBreakoutConfig,
    settings: SettingsProvider,
) -> int:
    try:
        market_data = make_market_data(settings)
        signals = analyze_symbol(market_data, symbol, interval=interval, config=config)
    except Exception as exc:
        logger.exception("Scan failed for %s: %s", symbol, exc)
        return 1

    if args.json:
        print(json.dumps(_json_payload(symbol, interval, signals), default=str))
    else:
        print(format_signals(signals))
        print(format_summary(summarize_signals(signals), window=config.analysis_window))
    return 0


def _run_multi(
    args: argparse.Namespace,
    symbols: list[str],
    interval: str,
    config: ChannelBreakoutConfig,
    settings: SettingsProvider,
) -> int:
    try:
        market_data = make_market_data(settings)
        if args.all:
            symbols = market_data.list_symbols(DEFAULT_QUOTE_ASSET)
    except Exception as exc:
        logger.exception("Could not prepare scan: %s", exc)
        return 1

    if args.sample is not None and 0 < args.sample < len(symbols):
        symbols = random.sample(symbols, args.sample)
        logger.info("Selected %s random symbols", args.sample)

    result = scan_symbols(market_data, symbols, interval=interval, config=config, pause=args.pause)

    if args.json:
        print(json.dumps(_scan_payload(interval, result), default=str))
    else:
        print(format_scan_report(result.signals, scanned=len(result.symbols), failed=result.failed))

    if result.symbols and result.processed == 0:
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = load_settings()
    setup_logging(level=get_log_level(settings), mode=get_log_mode(settings))

    interval = args.interval or get_interval(settings)
    config = load_channel_config(settings)
    symbols = [with_quote_asset(s) for s in args.symbols if with_quote_asset(s)]

    logger.info(
        "settings symbols=%s all=%s interval=%s channel_length=%s dev_mult=%s window=%s",
        ",".join(symbols) or get_symbol(settings),
        args.all,
        interval,
        config.channel_length,
        config.dev_multiplier,
        config.analysis_window,
    )

    if args.all or len(symbols) > 1:
        return _run_multi(args, symbols, interval, config, settings)
    symbol = symbols[0] if symbols else get_symbol(settings)
    return _run_single(args, symbol, interval, config, settings)


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    raise SystemExit(main())
