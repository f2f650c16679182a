"""Signal aggregation: one channel fit, one pass over the analysis window."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Mapping, Sequence

from common.symbols import normalize_symbol
from core.domain.models.Candle import Candle, closes_of
from core.domain.models.Signal import RETEST_FAILED, Signal
from core.ports.market_data import MarketDataPort

from .breakout import classify_breakout
from .config import DEFAULT_CONFIG, ChannelBreakoutConfig
from .momentum import compute_rsi, rsi_allows
from .regression_channel import (
    InsufficientDataError,
    RegressionChannel,
    build_regression_channel,
)
from .retest import classify_retest

logger = logging.getLogger("bot.strategy.channel_breakout")

# Extra history fetched beyond the channel length.
HISTORY_PADDING = 50


def _log(payload: Mapping[str, Any]) -> None:
    logger.info(json.dumps(payload, default=str))


def fit_channel(
    candles: Sequence[Candle],
    config: ChannelBreakoutConfig = DEFAULT_CONFIG,
) -> RegressionChannel:
    """Fit the channel on the candles preceding the analysis window."""

    if len(candles) < config.min_candles:
        raise InsufficientDataError(config.min_candles, len(candles), what="candles")
    closes = closes_of(candles)
    analysis_start = len(candles) - config.analysis_window
    return build_regression_channel(
        closes[analysis_start - config.channel_length : analysis_start],
        config.channel_length,
        config.dev_multiplier,
    )


def _passes_momentum(signal: Signal, config: ChannelBreakoutConfig) -> bool:
    if not config.rsi_filter_enabled:
        return True
    if signal.type == RETEST_FAILED:
        return True
    return rsi_allows(signal.rsi, signal.direction, config)


def detect_signals(
    candles: Sequence[Candle],
    symbol: str,
    config: ChannelBreakoutConfig = DEFAULT_CONFIG,
) -> list[Signal]:
    """Classify the last ``analysis_window`` candles into breakout/retest signals.

    Raises :class:`InsufficientDataError` when fewer than
    ``channel_length + analysis_window`` candles are supplied. Signals are
    returned in candle order; failed retests bypass the RSI veto.
    """

    channel = fit_channel(candles, config)
    closes = closes_of(candles)
    analysis_start = len(candles) - config.analysis_window

    signals: list[Signal] = []
    vetoed = 0
    for index in range(analysis_start, len(candles)):
        rsi = compute_rsi(closes[: index + 1], config.rsi_period)

        for event in (
            classify_breakout(candles, index, channel, symbol, config),
            classify_retest(candles, index, channel, symbol, config),
        ):
            if event is None:
                continue
            event = replace(event, rsi=rsi)
            if not _passes_momentum(event, config):
                vetoed += 1
                logger.debug(
                    "signal.rsi_veto symbol=%s type=%s index=%s rsi=%.2f",
                    symbol,
                    event.type,
                    index,
                    rsi,
                )
                continue
            signals.append(event)

    _log(
        {
            "event": "channel_breakout.scan",
            "symbol": symbol,
            "candles": len(candles),
            "slope": channel.slope,
            "deviation": channel.deviation,
            "upper": channel.upper,
            "lower": channel.lower,
            "signals": len(signals),
            "vetoed": vetoed,
        }
    )
    return signals


def analyze_symbol(
    market_data: MarketDataPort,
    symbol: str,
    *,
    interval: str = "1h",
    config: ChannelBreakoutConfig = DEFAULT_CONFIG,
) -> list[Signal]:
    """Fetch candles for ``symbol`` and return its signals.

    Short histories are logged and yield an empty list instead of raising.
    """

    sym = normalize_symbol(symbol)
    limit = config.channel_length + HISTORY_PADDING
    candles = market_data.fetch_candles(sym, interval, max(limit, config.min_candles))
    try:
        return detect_signals(candles, sym, config)
    except InsufficientDataError as exc:
        logger.warning("channel_breakout.insufficient_data symbol=%s %s", sym, exc)
        return []


__all__ = ["HISTORY_PADDING", "analyze_symbol", "detect_signals", "fit_channel"]
