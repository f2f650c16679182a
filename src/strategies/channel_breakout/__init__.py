"""Linear regression channel breakout / retest strategy package."""

from .config import ChannelBreakoutConfig, DEFAULT_CONFIG, load_channel_config
from .detector import analyze_symbol, detect_signals, fit_channel
from .regression_channel import (
    ChannelBreakoutError,
    InsufficientDataError,
    RegressionChannel,
    build_regression_channel,
)
from .scanner import ScanResult, scan_symbols

__all__ = [
    "ChannelBreakoutConfig",
    "ChannelBreakoutError",
    "DEFAULT_CONFIG",
    "InsufficientDataError",
    "RegressionChannel",
    "ScanResult",
    "analyze_symbol",
    "build_regression_channel",
    "detect_signals",
    "fit_channel",
    "load_channel_config",
    "scan_symbols",
]
