from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Union

UP_BREAKOUT = "UP_BREAKOUT"
DOWN_BREAKOUT = "DOWN_BREAKOUT"
RETEST_SUCCESS = "RETEST_SUCCESS"
RETEST_FAILED = "RETEST_FAILED"

UP = "UP"
DOWN = "DOWN"
NEUTRAL = "NEUTRAL"


def timestamp_from_ms(open_time_ms: int) -> datetime:
    """Return the UTC datetime for a candle open time in milliseconds."""

    return datetime.fromtimestamp(open_time_ms / 1000, tz=timezone.utc)


@dataclass(frozen=True)
class BreakoutEvent:
    """Candle closing decisively outside the regression channel."""

    symbol: str
    timestamp: datetime
    type: str
    price: float
    channel_level: float
    strength: int
    confidence: float
    description: str
    index: int
    volume_confirmed: bool = False
    rsi: float | None = None

    @property
    def direction(self) -> str:
        return UP if self.type == UP_BREAKOUT else DOWN

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


@dataclass(frozen=True)
class RetestEvent:
    """Later candle revisiting the level broken by a recent breakout.

    ``direction`` is the direction of the breakout being retested, not of the
    retest outcome.
    """

    symbol: str
    timestamp: datetime
    type: str
    price: float
    channel_level: float
    strength: int
    confidence: float
    description: str
    index: int
    direction: str
    breakout_index: int
    breakout_price: float
    rsi: float | None = None

    @property
    def succeeded(self) -> bool:
        return self.type == RETEST_SUCCESS

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


Signal = Union[BreakoutEvent, RetestEvent]


def implied_direction(signal: Signal) -> str:
    """Return the trade direction a signal points to.

    A failed retest of an up breakout points down and vice versa.
    """

    if isinstance(signal, BreakoutEvent):
        return signal.direction
    if signal.succeeded:
        return signal.direction
    return DOWN if signal.direction == UP else UP


__all__ = [
    "UP_BREAKOUT",
    "DOWN_BREAKOUT",
    "RETEST_SUCCESS",
    "RETEST_FAILED",
    "UP",
    "DOWN",
    "NEUTRAL",
    "BreakoutEvent",
    "RetestEvent",
    "Signal",
    "implied_direction",
    "timestamp_from_ms",
]
