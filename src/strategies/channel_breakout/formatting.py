"""Presentation helpers for channel breakout signals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from core.domain.models.Signal import (
    DOWN,
    DOWN_BREAKOUT,
    NEUTRAL,
    RETEST_FAILED,
    RETEST_SUCCESS,
    UP,
    UP_BREAKOUT,
    Signal,
    implied_direction,
)

# Confidence at or above which a signal counts as high confidence in scan reports.
HIGH_CONFIDENCE = 0.70
STRONG_SENTIMENT_RATIO = 1.5

_TAGS = {
    UP_BREAKOUT: "[UP]",
    DOWN_BREAKOUT: "[DOWN]",
    RETEST_SUCCESS: "[RETEST]",
    RETEST_FAILED: "[FAILED]",
}


@dataclass(frozen=True)
class SignalSummary:
    up_breakouts: int
    down_breakouts: int
    retests_success: int
    retests_failed: int
    average_confidence: float
    bias: str


@dataclass(frozen=True)
class BreakoutDigest:
    """Compact view of the latest signal for downstream consumers."""

    has_breakout: bool
    direction: str
    confidence: float


def sort_newest_first(signals: Sequence[Signal]) -> list[Signal]:
    return sorted(signals, key=lambda s: s.timestamp, reverse=True)


def sort_by_confidence(signals: Sequence[Signal]) -> list[Signal]:
    return sorted(signals, key=lambda s: (s.confidence, s.timestamp), reverse=True)


def format_signals(signals: Sequence[Signal]) -> str:
    """Return a multi-line report, newest signal first."""

    if not signals:
        return "No breakout signals detected"

    lines = [f"Found {len(signals)} breakout signals:", ""]
    for pos, signal in enumerate(sort_newest_first(signals), start=1):
        rsi = f"{signal.rsi:.1f}" if signal.rsi is not None else "n/a"
        lines.append(f"{_TAGS.get(signal.type, '')} {pos}. {signal.symbol} - {signal.type}")
        lines.append(f"   Time: {signal.timestamp:%Y-%m-%d %H:%M:%S}")
        lines.append(f"   Price: {signal.price:.4f} | Level: {signal.channel_level:.4f}")
        lines.append(
            f"   Strength: {signal.strength} | Confidence: {signal.confidence * 100:.2f}% | RSI: {rsi}"
        )
        lines.append(f"   {signal.description}")
        lines.append("")
    return "\n".join(lines)


def summarize_signals(signals: Sequence[Signal]) -> SignalSummary:
    counts = {UP_BREAKOUT: 0, DOWN_BREAKOUT: 0, RETEST_SUCCESS: 0, RETEST_FAILED: 0}
    total_confidence = 0.0
    for signal in signals:
        counts[signal.type] = counts.get(signal.type, 0) + 1
        total_confidence += signal.confidence

    up = counts[UP_BREAKOUT]
    down = counts[DOWN_BREAKOUT]
    if up > down:
        bias = "BULLISH"
    elif down > up:
        bias = "BEARISH"
    else:
        bias = "NEUTRAL"

    return SignalSummary(
        up_breakouts=up,
        down_breakouts=down,
        retests_success=counts[RETEST_SUCCESS],
        retests_failed=counts[RETEST_FAILED],
        average_confidence=total_confidence / len(signals) if signals else 0.0,
        bias=bias,
    )


def format_summary(summary: SignalSummary, *, window: int = 10) -> str:
    if not (summary.up_breakouts or summary.down_breakouts or summary.retests_success or summary.retests_failed):
        return f"Summary: No breakout signals detected in the last {window} candles"
    return "\n".join(
        [
            "Summary:",
            f"   Up Breakouts: {summary.up_breakouts}",
            f"   Down Breakouts: {summary.down_breakouts}",
            f"   Successful Retests: {summary.retests_success}",
            f"   Failed Retests: {summary.retests_failed}",
            f"   Average Confidence: {summary.average_confidence * 100:.1f}%",
            f"   Trend Bias: {summary.bias}",
        ]
    )


@dataclass(frozen=True)
class ScanSummary:
    """Aggregate view over the signals of a multi-symbol scan."""

    total: int
    high_confidence: int
    average_confidence: float
    up_breakouts: int
    down_breakouts: int
    retests_success: int
    retests_failed: int
    sentiment: str
    symbols_by_type: dict[str, list[str]]

    @property
    def unique_symbols(self) -> int:
        return len({sym for symbols in self.symbols_by_type.values() for sym in symbols})


def market_sentiment(up: int, down: int) -> str:
    """Breakout balance; one side needs more than 1.5x the other to be STRONG."""

    if up > down * STRONG_SENTIMENT_RATIO:
        return "STRONG BULLISH"
    if up > down:
        return "BULLISH"
    if down > up * STRONG_SENTIMENT_RATIO:
        return "STRONG BEARISH"
    if down > up:
        return "BEARISH"
    return "NEUTRAL"


def summarize_scan(
    signals: Sequence[Signal],
    *,
    high_confidence: float = HIGH_CONFIDENCE,
) -> ScanSummary:
    base = summarize_signals(signals)
    symbols_by_type: dict[str, list[str]] = {}
    for signal_type in (UP_BREAKOUT, DOWN_BREAKOUT, RETEST_SUCCESS, RETEST_FAILED):
        symbols = sorted({s.symbol for s in signals if s.type == signal_type})
        if symbols:
            symbols_by_type[signal_type] = symbols

    return ScanSummary(
        total=len(signals),
        high_confidence=sum(1 for s in signals if s.confidence >= high_confidence),
        average_confidence=base.average_confidence,
        up_breakouts=base.up_breakouts,
        down_breakouts=base.down_breakouts,
        retests_success=base.retests_success,
        retests_failed=base.retests_failed,
        sentiment=market_sentiment(base.up_breakouts, base.down_breakouts),
        symbols_by_type=symbols_by_type,
    )


def top_opportunities(signals: Sequence[Signal], limit: int = 5) -> list[Signal]:
    return sort_by_confidence(signals)[:limit]


def format_scan_report(
    signals: Sequence[Signal],
    *,
    scanned: int,
    failed: Mapping[str, str],
    top: int = 5,
) -> str:
    """Render the aggregate report of a multi-symbol scan."""

    lines = [f"Scanned {scanned} symbols: {scanned - len(failed)} processed, {len(failed)} failed"]
    for symbol, error in failed.items():
        lines.append(f"   {symbol}: {error}")
    lines.append("")

    if not signals:
        lines.append("No breakout signals detected across all scanned symbols")
        return "\n".join(lines)

    summary = summarize_scan(signals)
    lines.append(format_signals(signals))
    lines.extend(
        [
            "Scan Summary:",
            f"   Total Signals: {summary.total}",
            f"   Average Confidence: {summary.average_confidence * 100:.1f}%",
            f"   High Confidence (>={HIGH_CONFIDENCE * 100:.0f}%): {summary.high_confidence}",
            f"   Up Breakouts: {summary.up_breakouts}",
            f"   Down Breakouts: {summary.down_breakouts}",
            f"   Successful Retests: {summary.retests_success}",
            f"   Failed Retests: {summary.retests_failed}",
            f"   Market Sentiment: {summary.sentiment}",
            "",
            "Symbols by Signal Type:",
        ]
    )
    for signal_type, symbols in summary.symbols_by_type.items():
        lines.append(f"   {signal_type} ({len(symbols)}): {' '.join(symbols)}")
    lines.append(f"   Unique Symbols With Signals: {summary.unique_symbols}")
    lines.append("")

    lines.append("Top Opportunities:")
    for pos, signal in enumerate(top_opportunities(signals, top), start=1):
        lines.append(
            f"   {pos}. {signal.symbol} - {signal.type} ({signal.confidence * 100:.1f}% confidence)"
            f" | Price: {signal.price:.4f} | Time: {signal.timestamp:%Y-%m-%d %H:%M}"
        )
    return "\n".join(lines)


def latest_breakout_digest(signals: Sequence[Signal]) -> BreakoutDigest:
    """Digest of the last signal in candle order; neutral when there is none."""

    if not signals:
        return BreakoutDigest(has_breakout=False, direction=NEUTRAL, confidence=0.0)
    latest = signals[-1]
    direction = implied_direction(latest)
    return BreakoutDigest(
        has_breakout=direction in (UP, DOWN),
        direction=direction,
        confidence=latest.confidence,
    )


__all__ = [
    "BreakoutDigest",
    "HIGH_CONFIDENCE",
    "ScanSummary",
    "SignalSummary",
    "format_scan_report",
    "format_signals",
    "format_summary",
    "latest_breakout_digest",
    "market_sentiment",
    "sort_by_confidence",
    "sort_newest_first",
    "summarize_scan",
    "summarize_signals",
    "top_opportunities",
]
