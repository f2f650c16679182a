from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class Candle:
    """Single OHLCV sample for a fixed time bucket."""

    open_time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    close_time: int = 0

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open

    @property
    def body(self) -> float:
        return abs(self.close - self.open)

    @property
    def range(self) -> float:
        return self.high - self.low

    @classmethod
    def from_kline(cls, row: Sequence[Any]) -> "Candle":
        """Build a candle from ``[open_time, open, high, low, close, volume, close_time, ...]``.

        Numeric fields may be strings, as returned by the exchange REST API.
        ``close_time`` is optional.
        """

        close_time = int(row[6]) if len(row) > 6 else 0
        return cls(
            open_time=int(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]),
            close_time=close_time,
        )


def closes_of(candles: Sequence[Candle]) -> list[float]:
    return [c.close for c in candles]


__all__ = ["Candle", "closes_of"]
