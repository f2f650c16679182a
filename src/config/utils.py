from __future__ import annotations

"""Coercion helpers for loosely typed configuration values."""

import math
from typing import Any


_TRUE_VALUES = {"true", "1", "yes", "y", "on"}
_FALSE_VALUES = {"false", "0", "no", "n", "off"}


def parse_bool(value: Any, *, default: bool = False) -> bool:
    """Return ``value`` coerced to ``bool``.

    Accepts booleans, numbers (non-zero is ``True``) and case-insensitive
    strings such as ``"true"``, ``"1"``, ``"yes"``, ``"on"``. ``default`` is
    returned when ``value`` is ``None`` or cannot be interpreted.
    """

    if value is None:
        return default

    if isinstance(value, bool):
        return value

    if isinstance(value, (int, float)):
        return value != 0

    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False

    return default


def parse_float(value: Any, *, default: float) -> float:
    """Return ``value`` as a finite float, or ``default``."""

    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def parse_int(value: Any, *, default: int) -> int:
    """Return ``value`` as an int (``"10.0"`` is accepted), or ``default``."""

    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
