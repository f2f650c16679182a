"""Common utilities."""

from .symbols import normalize_symbol, with_quote_asset

__all__ = ["normalize_symbol", "with_quote_asset"]
