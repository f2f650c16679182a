"""Sequential multi-symbol scan over a market data provider."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Iterable

from common.symbols import normalize_symbol
from core.domain.models.Signal import Signal
from core.ports.market_data import MarketDataPort

from .config import DEFAULT_CONFIG, ChannelBreakoutConfig
from .detector import analyze_symbol

logger = logging.getLogger("bot.strategy.channel_breakout.scanner")

# Progress is logged at INFO every this many symbols.
CHECKPOINT_EVERY = 50


@dataclass
class ScanResult:
    symbols: list[str] = field(default_factory=list)
    signals: list[Signal] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def processed(self) -> int:
        return len(self.symbols) - len(self.failed)


def unique_symbols(symbols: Iterable[str]) -> list[str]:
    """Normalize ``symbols`` and drop blanks and repeats, keeping first-seen order."""

    seen: dict[str, None] = {}
    for symbol in symbols:
        sym = normalize_symbol(symbol)
        if sym:
            seen.setdefault(sym, None)
    return list(seen)


def scan_symbols(
    market_data: MarketDataPort,
    symbols: Iterable[str],
    *,
    interval: str = "1h",
    config: ChannelBreakoutConfig = DEFAULT_CONFIG,
    pause: float = 0.0,
) -> ScanResult:
    """Analyze ``symbols`` one at a time and collect their signals.

    A symbol whose fetch or analysis raises is recorded in
    :attr:`ScanResult.failed` and the scan moves on. ``pause`` seconds are
    slept between symbols to stay under exchange rate limits.
    """

    result = ScanResult(symbols=unique_symbols(symbols))
    total = len(result.symbols)

    for pos, symbol in enumerate(result.symbols, start=1):
        if pos > 1 and pause > 0:
            time.sleep(pause)
        try:
            signals = analyze_symbol(market_data, symbol, interval=interval, config=config)
        except Exception as exc:
            result.failed[symbol] = str(exc)
            logger.warning("scan.symbol_failed [%s/%s] symbol=%s error=%s", pos, total, symbol, exc)
            continue

        result.signals.extend(signals)
        logger.info("scan.symbol [%s/%s] symbol=%s signals=%s", pos, total, symbol, len(signals))
        if pos % CHECKPOINT_EVERY == 0:
            logger.info("scan.checkpoint %s/%s symbols, %s signals so far", pos, total, len(result.signals))

    logger.info(
        json.dumps(
            {
                "event": "channel_breakout.multi_scan",
                "interval": interval,
                "symbols": total,
                "processed": result.processed,
                "failed": len(result.failed),
                "signals": len(result.signals),
            }
        )
    )
    return result


__all__ = ["CHECKPOINT_EVERY", "ScanResult", "scan_symbols", "unique_symbols"]
