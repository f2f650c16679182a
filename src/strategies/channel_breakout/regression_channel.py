"""Linear regression price channel over a trailing window of closes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence


class ChannelBreakoutError(Exception):
    """Base error for the channel breakout engine."""


class InsufficientDataError(ChannelBreakoutError, ValueError):
    """Raised when fewer samples are supplied than a window requires."""

    def __init__(self, required: int, available: int, what: str = "closes") -> None:
        super().__init__(f"insufficient data: need {required} {what}, got {available}")
        self.required = required
        self.available = available


@dataclass(frozen=True)
class Line:
    """Simple line representation using slope and intercept."""

    slope: float
    intercept: float

    def value_at(self, x: float) -> float:
        return self.slope * x + self.intercept


@dataclass(frozen=True)
class RegressionChannel:
    """Trend line plus symmetric deviation bands.

    ``middle`` is the fitted value at the last index of the fitting window.
    """

    slope: float
    intercept: float
    middle: float
    deviation: float
    upper: float
    lower: float
    length: int

    @property
    def trend_up(self) -> bool:
        return self.slope > 0

    @property
    def trend_down(self) -> bool:
        return self.slope < 0

    @property
    def width(self) -> float:
        return self.upper - self.lower


def fit_line(values: Sequence[float]) -> Line:
    """Return the least-squares line of ``values`` against their index."""

    n = float(len(values))
    sum_x = 0.0
    sum_y = 0.0
    sum_xy = 0.0
    sum_xx = 0.0
    for idx, y in enumerate(values):
        x = float(idx)
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_xx += x * x
    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        raise InsufficientDataError(2, len(values))
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return Line(slope=slope, intercept=intercept)


def residual_deviation(values: Sequence[float], line: Line) -> float:
    """Return the RMS distance of ``values`` from ``line``."""

    if not values:
        return 0.0
    total = 0.0
    for idx, y in enumerate(values):
        diff = y - line.value_at(idx)
        total += diff * diff
    return math.sqrt(total / len(values))


def build_regression_channel(
    closes: Sequence[float],
    length: int = 100,
    dev_multiplier: float = 2.0,
) -> RegressionChannel:
    """Fit a regression channel on the trailing ``length`` closes.

    Raises :class:`InsufficientDataError` when fewer than ``length`` closes
    are supplied; a shorter window is never used instead.
    """

    if length < 2:
        raise ValueError(f"channel length must be >= 2, got {length}")
    if dev_multiplier < 0:
        raise ValueError(f"deviation multiplier must be non-negative, got {dev_multiplier}")
    if len(closes) < length:
        raise InsufficientDataError(length, len(closes))

    window = [float(c) for c in closes[len(closes) - length :]]
    line = fit_line(window)
    deviation = residual_deviation(window, line)

    middle = line.value_at(length - 1)
    band = deviation * dev_multiplier
    return RegressionChannel(
        slope=line.slope,
        intercept=line.intercept,
        middle=middle,
        deviation=deviation,
        upper=middle + band,
        lower=middle - band,
        length=length,
    )


__all__ = [
    "ChannelBreakoutError",
    "InsufficientDataError",
    "Line",
    "RegressionChannel",
    "build_regression_channel",
    "fit_line",
    "residual_deviation",
]
