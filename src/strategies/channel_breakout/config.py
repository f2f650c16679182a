"""Configuration loader for the channel breakout engine."""

from __future__ import annotations

from dataclasses import dataclass

from config.utils import parse_float, parse_int
from core.ports.settings import SettingsProvider, get_rsi_filter_enabled


@dataclass(frozen=True)
class ChannelBreakoutConfig:
    """Tunable thresholds for channel fitting, classification and filtering.

    Defaults are empirically tuned values; override them through settings
    rather than editing the numbers here.
    """

    channel_length: int = 100
    dev_multiplier: float = 2.0
    analysis_window: int = 10

    breakout_margin_pct: float = 0.10
    strength_lookback: int = 10
    volume_confirm_mult: float = 1.10
    volume_bonus: float = 1.10
    decisive_body_ratio: float = 0.70
    decisive_body_bonus: float = 1.05

    retest_tolerance_pct: float = 0.15
    retest_lookback: int = 5
    retest_min_bounce: float = 0.6
    retest_strong_bounce: float = 0.8
    retest_strong_bonus: float = 1.10
    retest_hold_tolerance_pct: float = 0.005
    retest_base_confidence: float = 0.70
    retest_strength_weight: float = 0.25
    retest_failed_confidence: float = 0.80

    rsi_period: int = 14
    rsi_filter_enabled: bool = True
    rsi_long_min: float = 30.0
    rsi_long_max: float = 80.0
    rsi_short_min: float = 20.0
    rsi_short_max: float = 70.0

    def __post_init__(self) -> None:
        if self.channel_length < 2:
            raise ValueError(f"channel_length must be >= 2, got {self.channel_length}")
        if self.analysis_window < 1:
            raise ValueError(f"analysis_window must be >= 1, got {self.analysis_window}")
        for name in ("strength_lookback", "retest_lookback", "rsi_period"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        for name in (
            "dev_multiplier",
            "breakout_margin_pct",
            "retest_tolerance_pct",
            "retest_hold_tolerance_pct",
            "retest_strength_weight",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if not 0.0 <= self.retest_min_bounce <= 1.0:
            raise ValueError(f"retest_min_bounce must lie in [0, 1], got {self.retest_min_bounce}")
        if self.rsi_long_min > self.rsi_long_max:
            raise ValueError("rsi_long_min must not exceed rsi_long_max")
        if self.rsi_short_min > self.rsi_short_max:
            raise ValueError("rsi_short_min must not exceed rsi_short_max")

    @property
    def min_candles(self) -> int:
        """Candles needed to fit the channel and fill the analysis window."""
        return self.channel_length + self.analysis_window


DEFAULT_CONFIG = ChannelBreakoutConfig()


def load_channel_config(settings: SettingsProvider | None = None) -> ChannelBreakoutConfig:
    """Build a :class:`ChannelBreakoutConfig` from ``settings``.

    Unset or unparsable values fall back to the defaults.
    """

    if settings is None:
        return DEFAULT_CONFIG

    d = DEFAULT_CONFIG

    def _f(key: str, default: float) -> float:
        return parse_float(settings.get(key), default=default)

    def _i(key: str, default: int) -> int:
        return parse_int(settings.get(key), default=default)

    return ChannelBreakoutConfig(
        channel_length=_i("CHANNEL_LENGTH", d.channel_length),
        dev_multiplier=_f("CHANNEL_DEV_MULT", d.dev_multiplier),
        analysis_window=_i("ANALYSIS_WINDOW", d.analysis_window),
        breakout_margin_pct=_f("BREAKOUT_MARGIN_PCT", d.breakout_margin_pct),
        strength_lookback=_i("BREAKOUT_STRENGTH_LOOKBACK", d.strength_lookback),
        volume_confirm_mult=_f("BREAKOUT_VOLUME_MULT", d.volume_confirm_mult),
        volume_bonus=_f("BREAKOUT_VOLUME_BONUS", d.volume_bonus),
        decisive_body_ratio=_f("BREAKOUT_BODY_RATIO", d.decisive_body_ratio),
        decisive_body_bonus=_f("BREAKOUT_BODY_BONUS", d.decisive_body_bonus),
        retest_tolerance_pct=_f("RETEST_TOLERANCE_PCT", d.retest_tolerance_pct),
        retest_lookback=_i("RETEST_LOOKBACK", d.retest_lookback),
        retest_min_bounce=_f("RETEST_MIN_BOUNCE", d.retest_min_bounce),
        retest_strong_bounce=_f("RETEST_STRONG_BOUNCE", d.retest_strong_bounce),
        retest_strong_bonus=_f("RETEST_STRONG_BONUS", d.retest_strong_bonus),
        retest_hold_tolerance_pct=_f("RETEST_HOLD_TOLERANCE_PCT", d.retest_hold_tolerance_pct),
        retest_base_confidence=_f("RETEST_BASE_CONFIDENCE", d.retest_base_confidence),
        retest_strength_weight=_f("RETEST_STRENGTH_WEIGHT", d.retest_strength_weight),
        retest_failed_confidence=_f("RETEST_FAILED_CONFIDENCE", d.retest_failed_confidence),
        rsi_period=_i("RSI_PERIOD", d.rsi_period),
        rsi_filter_enabled=get_rsi_filter_enabled(settings),
        rsi_long_min=_f("RSI_LONG_MIN", d.rsi_long_min),
        rsi_long_max=_f("RSI_LONG_MAX", d.rsi_long_max),
        rsi_short_min=_f("RSI_SHORT_MIN", d.rsi_short_min),
        rsi_short_max=_f("RSI_SHORT_MAX", d.rsi_short_max),
    )


__all__ = ["ChannelBreakoutConfig", "DEFAULT_CONFIG", "load_channel_config"]
