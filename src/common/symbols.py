from __future__ import annotations

import re

__all__ = ["DEFAULT_QUOTE_ASSET", "normalize_symbol", "with_quote_asset"]

DEFAULT_QUOTE_ASSET = "USDT"


def normalize_symbol(symbol: str) -> str:
    """Return ``symbol`` uppercased without special characters.

    ``"btc/usdt"`` and ``" BTC-USDT "`` both become ``BTCUSDT``.
    """

    return re.sub(r"[^A-Z0-9]", "", symbol.strip().upper())


def with_quote_asset(symbol: str, quote: str = DEFAULT_QUOTE_ASSET) -> str:
    """Return the normalized ``symbol`` with ``quote`` appended when missing.

    ``"bnb"`` becomes ``BNBUSDT``; ``"ETHUSDT"`` is returned unchanged.
    """

    sym = normalize_symbol(symbol)
    quote = normalize_symbol(quote)
    if not sym or sym.endswith(quote):
        return sym
    return sym + quote
