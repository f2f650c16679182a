from __future__ import annotations

from dataclasses import replace

import pytest

from core.domain.models.Signal import DOWN, RETEST_FAILED, RETEST_SUCCESS, UP
from strategies.channel_breakout.config import DEFAULT_CONFIG
from strategies.channel_breakout.detector import fit_channel
from strategies.channel_breakout.levels import find_recent_breakout
from strategies.channel_breakout.retest import bounce_ratio, classify_retest, rejection_ratio

from candle_factory import (
    bounce_candle,
    breakdown_candle,
    channel_series,
    down_breakout_candle,
    make_candle,
    scenario_retest,
    up_breakout_candle,
)


def _classify_last(candles):
    channel = fit_channel(candles)
    return channel, classify_retest(candles, len(candles) - 1, channel, "ETHUSDT")


def test_successful_bounce_off_broken_upper_band():
    channel, event = _classify_last(scenario_retest(bounce_candle()))

    assert event is not None
    assert event.type == RETEST_SUCCESS
    assert event.direction == UP
    assert event.channel_level == channel.upper
    assert event.breakout_index == 108
    assert event.breakout_price == 107.0
    # the breakout candle itself held the level once
    assert event.strength == 1
    assert event.confidence == pytest.approx(0.725)
    assert event.succeeded


def test_strong_bounce_earns_bonus():
    strong = make_candle(109, 105.0, 105.2, 102.0, 104.9)

    _, event = _classify_last(scenario_retest(strong))

    assert bounce_ratio(strong) > 0.8
    assert event.confidence == pytest.approx(0.725 * 1.1)


def test_weak_bounce_is_not_reported():
    # touches the level and closes above it, but in the lower part of its range
    weak = make_candle(109, 104.0, 106.0, 102.0, 103.0)

    _, event = _classify_last(scenario_retest(weak))

    assert event is None


def test_close_below_level_minus_tolerance_is_a_failed_retest():
    channel, event = _classify_last(scenario_retest(breakdown_candle()))

    assert event is not None
    assert event.type == RETEST_FAILED
    assert event.confidence == 0.8
    assert event.strength == 0
    assert event.channel_level == channel.upper
    assert not event.succeeded


def test_hovering_near_level_is_ambiguous():
    # closes under the level but within the 0.15 tolerance
    hovering = make_candle(109, 102.4, 102.6, 101.7, 101.9)

    _, event = _classify_last(scenario_retest(hovering))

    assert event is None


def test_zero_range_candle_never_counts_as_bounce():
    doji = make_candle(109, 102.05, 102.05, 102.05, 102.05)

    _, event = _classify_last(scenario_retest(doji))

    assert event is None


def test_no_retest_without_recent_breakout():
    candles = channel_series()
    candles[109] = breakdown_candle()

    _, event = _classify_last(candles)

    assert event is None


def test_breakout_one_candle_beyond_lookback_is_ignored():
    candles = channel_series()
    candles[103] = up_breakout_candle(103)
    candles[109] = bounce_candle()

    _, event = _classify_last(candles)

    assert event is None


def test_breakout_at_lookback_edge_is_found():
    candles = channel_series()
    candles[104] = up_breakout_candle(104)
    candles[109] = bounce_candle()

    _, event = _classify_last(candles)

    assert event is not None
    assert event.breakout_index == 104


def test_most_recent_breakout_wins():
    candles = channel_series()
    candles[105] = down_breakout_candle(105)
    candles[107] = up_breakout_candle(107)
    channel = fit_channel(candles)

    recent = find_recent_breakout(candles, 109, channel, lookback=5, margin_pct=0.1)

    assert recent.direction == UP
    assert recent.index == 107


def test_successful_rejection_after_down_breakout():
    candles = channel_series()
    candles[108] = down_breakout_candle(108)
    candles[109] = make_candle(109, 95.5, 98.0, 94.8, 95.5)

    channel, event = _classify_last(candles)

    assert rejection_ratio(candles[109]) >= 0.6
    assert event is not None
    assert event.type == RETEST_SUCCESS
    assert event.direction == DOWN
    assert event.channel_level == channel.lower
    assert event.strength == 0
    assert event.confidence == pytest.approx(0.70)


def test_failed_retest_after_down_breakout():
    candles = channel_series()
    candles[108] = down_breakout_candle(108)
    candles[109] = make_candle(109, 97.0, 99.0, 96.8, 98.5)

    _, event = _classify_last(candles)

    assert event.type == RETEST_FAILED
    assert event.direction == DOWN
    assert event.confidence == 0.8


@pytest.mark.parametrize("weight, expected", [(0.0, 0.70), (0.25, 0.725), (0.5, 0.75)])
def test_strength_weight_scales_success_confidence(weight, expected):
    candles = scenario_retest(bounce_candle())
    config = replace(DEFAULT_CONFIG, retest_strength_weight=weight)
    channel = fit_channel(candles, config)

    event = classify_retest(candles, len(candles) - 1, channel, "ETHUSDT", config)

    assert event.strength == 1
    assert event.confidence == pytest.approx(expected)
