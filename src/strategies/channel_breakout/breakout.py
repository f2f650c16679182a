"""Breakout classification of a single candle against a fitted channel."""

from __future__ import annotations

import logging
from typing import Sequence

from core.domain.models.Candle import Candle
from core.domain.models.Signal import (
    DOWN_BREAKOUT,
    UP_BREAKOUT,
    BreakoutEvent,
    timestamp_from_ms,
)

from .config import DEFAULT_CONFIG, ChannelBreakoutConfig
from .levels import breakout_margin, count_level_respect
from .regression_channel import RegressionChannel

logger = logging.getLogger("bot.strategy.channel_breakout")


def clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def breakout_confidence(strength: int, distance: float, deviation: float) -> float:
    """Average of normalised strength and normalised breakout distance."""

    strength_confidence = clamp_unit(strength / 10.0)
    if deviation > 0:
        distance_confidence = clamp_unit(distance / deviation)
    else:
        # zero-width channel: any close beyond the level is a full-distance move
        distance_confidence = 1.0 if distance > 0 else 0.0
    return clamp_unit((strength_confidence + distance_confidence) / 2.0)


def volume_confirmed(
    candles: Sequence[Candle],
    index: int,
    config: ChannelBreakoutConfig = DEFAULT_CONFIG,
) -> bool:
    if index <= 0:
        return False
    return candles[index].volume > candles[index - 1].volume * config.volume_confirm_mult


def is_decisive(candle: Candle, config: ChannelBreakoutConfig = DEFAULT_CONFIG) -> bool:
    candle_range = candle.high - candle.low
    if candle_range <= 0:
        return False
    return abs(candle.close - candle.open) / candle_range > config.decisive_body_ratio


def classify_breakout(
    candles: Sequence[Candle],
    index: int,
    channel: RegressionChannel,
    symbol: str,
    config: ChannelBreakoutConfig = DEFAULT_CONFIG,
) -> BreakoutEvent | None:
    """Return a breakout event for ``candles[index]`` or ``None``.

    A bullish candle closing above ``upper + margin`` is an up breakout, a
    bearish candle closing below ``lower - margin`` a down breakout.
    """

    candle = candles[index]
    margin = breakout_margin(channel, config.breakout_margin_pct)

    is_up = candle.is_bullish and candle.close > channel.upper + margin
    is_down = candle.is_bearish and candle.close < channel.lower - margin

    if is_up and is_down:
        logger.warning(
            "breakout.anomaly symbol=%s index=%s close=%s upper=%s lower=%s: both directions matched, skipping",
            symbol,
            index,
            candle.close,
            channel.upper,
            channel.lower,
        )
        return None
    if not is_up and not is_down:
        return None

    if is_up:
        signal_type = UP_BREAKOUT
        level = channel.upper
        distance = candle.close - level
        # resistance before the break
        strength = count_level_respect(
            candles, index, level, is_support=False, lookback=config.strength_lookback
        )
    else:
        signal_type = DOWN_BREAKOUT
        level = channel.lower
        distance = level - candle.close
        strength = count_level_respect(
            candles, index, level, is_support=True, lookback=config.strength_lookback
        )

    confidence = breakout_confidence(strength, distance, channel.deviation)

    confirmed = volume_confirmed(candles, index, config)
    if confirmed:
        confidence = min(confidence * config.volume_bonus, 1.0)
    if is_decisive(candle, config):
        confidence = min(confidence * config.decisive_body_bonus, 1.0)

    side = "above upper" if is_up else "below lower"
    colour = "Green" if is_up else "Red"
    description = (
        f"{colour} candle broke {side} channel at {level:.4f} "
        f"(strength: {strength}, volume: {'confirmed' if confirmed else 'weak'})"
    )

    return BreakoutEvent(
        symbol=symbol,
        timestamp=timestamp_from_ms(candle.open_time),
        type=signal_type,
        price=candle.close,
        channel_level=level,
        strength=strength,
        confidence=clamp_unit(confidence),
        description=description,
        index=index,
        volume_confirmed=confirmed,
    )


__all__ = [
    "breakout_confidence",
    "clamp_unit",
    "classify_breakout",
    "is_decisive",
    "volume_confirmed",
]
