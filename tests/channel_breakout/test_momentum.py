from __future__ import annotations

import random
from dataclasses import replace

import pytest

from core.domain.models.Signal import DOWN, UP
from strategies.channel_breakout.config import DEFAULT_CONFIG
from strategies.channel_breakout.momentum import NEUTRAL_RSI, compute_rsi, rsi_allows


def test_short_history_returns_neutral():
    assert compute_rsi([100.0 + i for i in range(14)], period=14) == NEUTRAL_RSI
    assert compute_rsi([], period=14) == 50.0


def test_pure_uptrend_is_100():
    assert compute_rsi([100.0 + i for i in range(15)], period=14) == 100.0


def test_single_gain_without_losses_is_100():
    closes = [100.0] * 14 + [100.5]

    assert compute_rsi(closes, period=14) == 100.0


def test_flat_history_is_neutral():
    assert compute_rsi([100.0] * 30, period=14) == NEUTRAL_RSI


def test_pure_downtrend_is_zero():
    assert compute_rsi([200.0 - i for i in range(15)], period=14) == 0.0


def test_simple_average_value():
    # gains 2+2+2+8 = 14, losses 2+2+2 = 6 over 14 deltas -> RS = 14/6
    closes = [99, 99, 101, 101, 99, 99, 101, 101, 99, 99, 101, 101, 99, 99, 107]

    assert compute_rsi([float(c) for c in closes], period=14) == pytest.approx(70.0)


def test_only_last_period_deltas_count():
    tail = [99.0, 99.0, 101.0, 101.0, 99.0, 99.0, 101.0, 101.0, 99.0, 99.0, 101.0, 101.0, 99.0, 99.0, 107.0]
    crash = [500.0, 10.0, 400.0]

    assert compute_rsi(crash + tail, period=14) == pytest.approx(compute_rsi(tail, period=14))


def test_rsi_bounded_for_random_series():
    rng = random.Random(11)
    for _ in range(50):
        closes = [100.0]
        for _ in range(rng.randint(15, 40)):
            closes.append(max(0.0, closes[-1] + rng.uniform(-3.0, 3.0)))
        value = compute_rsi(closes, period=rng.randint(2, 14))
        assert 0.0 <= value <= 100.0


def test_long_band_is_inclusive():
    assert rsi_allows(30.0, UP)
    assert rsi_allows(80.0, UP)
    assert not rsi_allows(29.9, UP)
    assert not rsi_allows(80.1, UP)
    assert not rsi_allows(85.0, UP)


def test_short_band_is_shifted_down():
    assert rsi_allows(20.0, DOWN)
    assert rsi_allows(70.0, DOWN)
    assert not rsi_allows(19.9, DOWN)
    # 75 is acceptable for longs but not for shorts
    assert not rsi_allows(75.0, DOWN)
    assert rsi_allows(75.0, UP)
    # 25 is acceptable for shorts but not for longs
    assert rsi_allows(25.0, DOWN)
    assert not rsi_allows(25.0, UP)


def test_bands_follow_config():
    config = replace(DEFAULT_CONFIG, rsi_long_min=40.0, rsi_long_max=60.0)

    assert not rsi_allows(35.0, UP, config)
    assert rsi_allows(50.0, UP, config)
