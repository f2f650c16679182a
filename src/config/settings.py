from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    SYMBOL: str = "BTCUSDT"
    INTERVAL: str = Field(
        default="1h",
        validation_alias=AliasChoices("INTERVAL", "TIMEFRAME"),
    )

    BINANCE_API_KEY: str | None = None
    BINANCE_API_SECRET: str | None = None
    BINANCE_TESTNET: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_MODE: Literal["plain", "json"] = "plain"

    # Regression channel
    CHANNEL_LENGTH: int = 100
    CHANNEL_DEV_MULT: float = 2.0
    ANALYSIS_WINDOW: int = 10

    # Breakout classification
    BREAKOUT_MARGIN_PCT: float = 0.10
    BREAKOUT_STRENGTH_LOOKBACK: int = 10
    BREAKOUT_VOLUME_MULT: float = 1.10
    BREAKOUT_VOLUME_BONUS: float = 1.10
    BREAKOUT_BODY_RATIO: float = 0.70
    BREAKOUT_BODY_BONUS: float = 1.05

    # Retest classification
    RETEST_TOLERANCE_PCT: float = 0.15
    RETEST_LOOKBACK: int = 5
    RETEST_MIN_BOUNCE: float = 0.6
    RETEST_STRONG_BOUNCE: float = 0.8
    RETEST_STRONG_BONUS: float = 1.10
    RETEST_HOLD_TOLERANCE_PCT: float = 0.005
    RETEST_BASE_CONFIDENCE: float = 0.70
    RETEST_STRENGTH_WEIGHT: float = 0.25
    RETEST_FAILED_CONFIDENCE: float = 0.80

    # Momentum filter
    RSI_PERIOD: int = 14
    RSI_FILTER_ENABLED: bool = True
    RSI_LONG_MIN: float = 30.0
    RSI_LONG_MAX: float = 80.0
    RSI_SHORT_MIN: float = 20.0
    RSI_SHORT_MAX: float = 70.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return configuration value for ``key`` with ``default`` fallback."""
        return getattr(self, key, default)


@lru_cache
def load_settings() -> Settings:
    """Factory function to load settings from environment or .env file.

    Note: This function is cached. Environment changes made after the first
    call are not picked up; call ``load_settings.cache_clear()`` to reload.
    """
    return Settings()
