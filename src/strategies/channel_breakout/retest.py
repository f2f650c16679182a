"""Retest classification of the level broken by a recent breakout."""

from __future__ import annotations

import logging
from typing import Sequence

from core.domain.models.Candle import Candle
from core.domain.models.Signal import (
    RETEST_FAILED,
    RETEST_SUCCESS,
    UP,
    RetestEvent,
    timestamp_from_ms,
)

from .breakout import clamp_unit
from .config import DEFAULT_CONFIG, ChannelBreakoutConfig
from .levels import RecentBreakout, count_level_holds, find_recent_breakout
from .regression_channel import RegressionChannel

logger = logging.getLogger("bot.strategy.channel_breakout")


def bounce_ratio(candle: Candle) -> float:
    """Position of the close inside the candle range, 0 at the low and 1 at the high."""

    candle_range = candle.high - candle.low
    if candle_range <= 0:
        return 0.0
    return (candle.close - candle.low) / candle_range


def rejection_ratio(candle: Candle) -> float:
    """Mirror of :func:`bounce_ratio`: 0 at the high and 1 at the low."""

    candle_range = candle.high - candle.low
    if candle_range <= 0:
        return 0.0
    return (candle.high - candle.close) / candle_range


def _success_confidence(strength: int, ratio: float, config: ChannelBreakoutConfig) -> float:
    # full weight once every candle in the strength lookback held the level
    held = min(strength / config.strength_lookback, 1.0)
    confidence = config.retest_base_confidence + held * config.retest_strength_weight
    if ratio > config.retest_strong_bounce:
        confidence = min(confidence * config.retest_strong_bonus, 1.0)
    return clamp_unit(confidence)


def classify_retest(
    candles: Sequence[Candle],
    index: int,
    channel: RegressionChannel,
    symbol: str,
    config: ChannelBreakoutConfig = DEFAULT_CONFIG,
) -> RetestEvent | None:
    """Return a retest event for ``candles[index]`` or ``None``.

    The candle is only judged when a breakout-qualifying close exists within
    ``config.retest_lookback`` candles before it. Candles hovering around
    the level without a decisive close produce nothing.
    """

    recent = find_recent_breakout(
        candles,
        index,
        channel,
        lookback=config.retest_lookback,
        margin_pct=config.breakout_margin_pct,
    )
    if recent is None:
        return None

    candle = candles[index]
    level = recent.level
    tolerance = channel.deviation * config.retest_tolerance_pct

    if recent.direction == UP:
        touched = candle.low <= level + tolerance and candle.close > level
        failed = candle.close < level - tolerance
        ratio = bounce_ratio(candle)
    else:
        touched = candle.high >= level - tolerance and candle.close < level
        failed = candle.close > level + tolerance
        ratio = rejection_ratio(candle)

    if touched:
        if ratio < config.retest_min_bounce:
            logger.debug(
                "retest.weak_bounce symbol=%s index=%s direction=%s ratio=%.3f",
                symbol,
                index,
                recent.direction,
                ratio,
            )
            return None
        strength = count_level_holds(
            candles,
            index,
            level,
            is_support=recent.direction == UP,
            lookback=config.strength_lookback,
            tolerance_pct=config.retest_hold_tolerance_pct,
        )
        return _build_event(
            candle,
            index,
            recent,
            symbol=symbol,
            signal_type=RETEST_SUCCESS,
            strength=strength,
            confidence=_success_confidence(strength, ratio, config),
        )

    if failed:
        return _build_event(
            candle,
            index,
            recent,
            symbol=symbol,
            signal_type=RETEST_FAILED,
            strength=0,
            confidence=clamp_unit(config.retest_failed_confidence),
        )

    return None


def _build_event(
    candle: Candle,
    index: int,
    recent: RecentBreakout,
    *,
    symbol: str,
    signal_type: str,
    strength: int,
    confidence: float,
) -> RetestEvent:
    if recent.direction == UP:
        role = "upper channel support"
        if signal_type == RETEST_SUCCESS:
            detail = f"price bounced from {candle.low:.4f} to {candle.close:.4f}"
        else:
            detail = f"price fell to {candle.close:.4f}"
    else:
        role = "lower channel resistance"
        if signal_type == RETEST_SUCCESS:
            detail = f"price rejected from {candle.high:.4f} to {candle.close:.4f}"
        else:
            detail = f"price rose to {candle.close:.4f}"
    outcome = "Successful" if signal_type == RETEST_SUCCESS else "Failed"

    return RetestEvent(
        symbol=symbol,
        timestamp=timestamp_from_ms(candle.open_time),
        type=signal_type,
        price=candle.close,
        channel_level=recent.level,
        strength=strength,
        confidence=confidence,
        description=f"{outcome} retest of {role} ({recent.level:.4f}) - {detail}",
        index=index,
        direction=recent.direction,
        breakout_index=recent.index,
        breakout_price=recent.price,
    )


__all__ = ["bounce_ratio", "classify_retest", "rejection_ratio"]
