"""Binance futures market data adapter."""

from __future__ import annotations

import logging
from typing import Any, Callable

from binance.client import Client

from common.symbols import DEFAULT_QUOTE_ASSET, normalize_symbol
from config.settings import Settings
from core.domain.models.Candle import Candle
from core.ports.market_data import MarketDataPort


logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
# Binance caps a single klines request at 1500 rows for futures.
MAX_KLINES_LIMIT = 1500


class BinanceMarketData(MarketDataPort):
    """Market data provider backed by the Binance futures REST endpoints."""

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        self._settings = settings
        self._client = client or Client(
            api_key=settings.BINANCE_API_KEY,
            api_secret=settings.BINANCE_API_SECRET,
            testnet=settings.BINANCE_TESTNET,
        )

    def _call(self, name: str, call: Callable[[], Any]) -> Any:
        for attempt in range(MAX_ATTEMPTS):
            try:
                return call()
            except Exception as exc:
                logger.warning(
                    "Binance %s failed (attempt %s/%s): %s",
                    name,
                    attempt + 1,
                    MAX_ATTEMPTS,
                    exc,
                )
        raise RuntimeError(f"Binance {name} failed after {MAX_ATTEMPTS} attempts")

    def fetch_candles(self, symbol: str, interval: str, limit: int) -> list[Candle]:
        """Return up to ``limit`` candles for ``symbol``, oldest first."""

        sym = normalize_symbol(symbol)
        limit = max(1, min(int(limit), MAX_KLINES_LIMIT))
        try:
            rows = self._call(
                "futures_klines",
                lambda: self._client.futures_klines(symbol=sym, interval=interval, limit=limit),
            )
        except RuntimeError as exc:
            raise RuntimeError(f"Failed to fetch klines for {sym} after retries") from exc
        return [Candle.from_kline(row) for row in rows]

    def list_symbols(self, quote_asset: str = DEFAULT_QUOTE_ASSET) -> list[str]:
        """Return the trading perpetual contracts quoted in ``quote_asset``, sorted."""

        quote = normalize_symbol(quote_asset)
        info = self._call("futures_exchange_info", self._client.futures_exchange_info)
        symbols = {
            s["symbol"]
            for s in info.get("symbols", [])
            if s.get("quoteAsset") == quote
            and s.get("status") == "TRADING"
            and s.get("contractType", "PERPETUAL") == "PERPETUAL"
        }
        logger.info("Fetched %d %s perpetual symbols", len(symbols), quote)
        return sorted(symbols)


def make_market_data(settings: Settings) -> MarketDataPort:
    """Factory for a :class:`MarketDataPort` bound to Binance."""

    return BinanceMarketData(settings)
