"""RSI momentum oscillator and the directional veto built on it."""

from __future__ import annotations

from typing import Sequence

from core.domain.models.Signal import UP

from .config import DEFAULT_CONFIG, ChannelBreakoutConfig

NEUTRAL_RSI = 50.0


def compute_rsi(closes: Sequence[float], period: int = 14) -> float:
    """Return the simple-average RSI over the last ``period`` deltas.

    Returns the neutral 50 when there is not enough history or when every
    delta is zero; returns 100 when there are gains and no losses.
    """

    if period < 1 or len(closes) < period + 1:
        return NEUTRAL_RSI

    data = closes[len(closes) - period - 1 :]
    gains = 0.0
    losses = 0.0
    for prev, curr in zip(data, data[1:]):
        change = float(curr) - float(prev)
        if change > 0:
            gains += change
        else:
            losses -= change

    avg_gain = gains / period
    avg_loss = losses / period
    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else NEUTRAL_RSI

    rs = avg_gain / avg_loss
    rsi = 100.0 - (100.0 / (1.0 + rs))
    return min(max(rsi, 0.0), 100.0)


def rsi_allows(rsi: float, direction: str, config: ChannelBreakoutConfig = DEFAULT_CONFIG) -> bool:
    """Return ``True`` when ``rsi`` is inside the accept band for ``direction``.

    Long signals avoid extreme overbought readings, short signals avoid
    extreme oversold ones; the bands are deliberately asymmetric.
    """

    if direction == UP:
        return config.rsi_long_min <= rsi <= config.rsi_long_max
    return config.rsi_short_min <= rsi <= config.rsi_short_max


__all__ = ["NEUTRAL_RSI", "compute_rsi", "rsi_allows"]
