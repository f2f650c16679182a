"""Market data port definition."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from core.domain.models.Candle import Candle


class MarketDataPort(Protocol):
    """Data provider interface."""

    def fetch_candles(self, symbol: str, interval: str, limit: int) -> list["Candle"]:
        """Return the most recent ``limit`` candles for ``symbol``, oldest first."""

        ...

    def list_symbols(self, quote_asset: str) -> list[str]:
        """Return the tradable symbols quoted in ``quote_asset``."""

        ...
