from __future__ import annotations

from typing import Any, Protocol

from common.symbols import normalize_symbol
from config.utils import parse_bool


class SettingsProvider(Protocol):
    """Generic provider for configuration values."""

    def get(self, key: str, default: Any | None = None) -> Any:
        ...


# ---------------------------------------------------------------------------
# Helper accessors with defaults


def get_symbol(settings: SettingsProvider) -> str:
    symbol = normalize_symbol(str(settings.get("SYMBOL", "") or ""))
    return symbol or "BTCUSDT"


def get_interval(settings: SettingsProvider) -> str:
    return settings.get("INTERVAL", "1h")


def get_log_level(settings: SettingsProvider) -> str:
    return settings.get("LOG_LEVEL", "INFO")


def get_log_mode(settings: SettingsProvider) -> str:
    mode = str(settings.get("LOG_MODE", "plain") or "plain").lower()
    return mode if mode in {"plain", "json"} else "plain"


def get_rsi_filter_enabled(settings: SettingsProvider) -> bool:
    return parse_bool(settings.get("RSI_FILTER_ENABLED"), default=True)
