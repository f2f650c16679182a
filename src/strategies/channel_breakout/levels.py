"""Level-respect counters and recent-breakout lookup shared by the classifiers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.domain.models.Candle import Candle
from core.domain.models.Signal import DOWN, UP

from .regression_channel import RegressionChannel


@dataclass(frozen=True)
class RecentBreakout:
    direction: str
    price: float
    index: int
    level: float


def breakout_margin(channel: RegressionChannel, margin_pct: float) -> float:
    return channel.deviation * margin_pct


def _window_start(index: int, lookback: int) -> int:
    return max(0, index - lookback)


def count_level_respect(
    candles: Sequence[Candle],
    index: int,
    level: float,
    *,
    is_support: bool,
    lookback: int,
) -> int:
    """Count candles before ``index`` that stayed on their side of ``level``.

    Support: low stayed at or above the level. Resistance: high stayed at or
    below it.
    """

    count = 0
    for candle in candles[_window_start(index, lookback) : index]:
        if is_support:
            if candle.low >= level:
                count += 1
        elif candle.high <= level:
            count += 1
    return count


def count_level_holds(
    candles: Sequence[Candle],
    index: int,
    level: float,
    *,
    is_support: bool,
    lookback: int,
    tolerance_pct: float,
) -> int:
    """Count candles before ``index`` that tested ``level`` and held it.

    Support holds when the low reaches the level (within tolerance) and the
    close stays above it; resistance is mirrored.
    """

    tolerance = abs(level) * tolerance_pct
    count = 0
    for candle in candles[_window_start(index, lookback) : index]:
        if is_support:
            if candle.low <= level + tolerance and candle.close > level:
                count += 1
        elif candle.high >= level - tolerance and candle.close < level:
            count += 1
    return count


def find_recent_breakout(
    candles: Sequence[Candle],
    index: int,
    channel: RegressionChannel,
    *,
    lookback: int,
    margin_pct: float,
) -> RecentBreakout | None:
    """Return the most recent close beyond the channel within ``lookback`` candles.

    Only the close is tested against the band plus margin; candle colour is
    not required.
    """

    margin = breakout_margin(channel, margin_pct)
    start = _window_start(index, lookback)
    for i in range(index - 1, start - 1, -1):
        close = candles[i].close
        if close > channel.upper + margin:
            return RecentBreakout(direction=UP, price=close, index=i, level=channel.upper)
        if close < channel.lower - margin:
            return RecentBreakout(direction=DOWN, price=close, index=i, level=channel.lower)
    return None


__all__ = [
    "RecentBreakout",
    "breakout_margin",
    "count_level_holds",
    "count_level_respect",
    "find_recent_breakout",
]
