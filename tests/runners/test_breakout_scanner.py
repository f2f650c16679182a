from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

import pytest

from core.domain.models.Signal import UP_BREAKOUT, BreakoutEvent
from runners import breakout_scanner
from strategies.channel_breakout import scanner


class DummySettings:
    def __init__(self, values=None):
        self._values = values or {}

    def get(self, key, default=None):
        return self._values.get(key, default)


class FakeMarketData:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple] = []

    def fetch_candles(self, symbol, interval, limit):
        self.calls.append((symbol, interval, limit))
        if self.error is not None:
            raise self.error
        return []


@pytest.fixture
def market(monkeypatch: pytest.MonkeyPatch) -> FakeMarketData:
    fake = FakeMarketData()
    monkeypatch.setattr(breakout_scanner, "load_settings", lambda: DummySettings({"SYMBOL": "SOLUSDT"}))
    monkeypatch.setattr(breakout_scanner, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(breakout_scanner, "make_market_data", lambda settings: fake)
    return fake


def _breakout(symbol: str) -> BreakoutEvent:
    return BreakoutEvent(
        symbol=symbol,
        timestamp=datetime(2025, 3, 1, 12, tzinfo=timezone.utc),
        type=UP_BREAKOUT,
        price=612.5,
        channel_level=600.0,
        strength=9,
        confidence=0.9,
        description="Price broke above upper channel (confirmed)",
        index=109,
        volume_confirmed=True,
        rsi=64.2,
    )


def test_symbol_argument_gets_quote_suffix(market, monkeypatch, capsys):
    captured = {}

    def fake_analyze(market_data, symbol, *, interval, config):
        captured.update(symbol=symbol, interval=interval, market=market_data)
        return [_breakout(symbol)]

    monkeypatch.setattr(breakout_scanner, "analyze_symbol", fake_analyze)

    assert breakout_scanner.main(["bnb", "--interval", "4h"]) == 0

    out = capsys.readouterr().out
    assert captured == {"symbol": "BNBUSDT", "interval": "4h", "market": market}
    assert "Found 1 breakout signals:" in out
    assert "BNBUSDT - UP_BREAKOUT" in out
    assert "Trend Bias: BULLISH" in out


def test_json_output_includes_latest_digest(market, monkeypatch, capsys):
    monkeypatch.setattr(
        breakout_scanner,
        "analyze_symbol",
        lambda market_data, symbol, *, interval, config: [_breakout(symbol)],
    )

    assert breakout_scanner.main(["--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["symbol"] == "SOLUSDT"
    assert payload["interval"] == "1h"
    assert payload["signals"][0]["type"] == UP_BREAKOUT
    assert payload["signals"][0]["timestamp"] == "2025-03-01T12:00:00+00:00"
    assert payload["latest"] == {"has_breakout": True, "direction": "UP", "confidence": 0.9}


def test_short_history_prints_empty_report(market, capsys):
    assert breakout_scanner.main([]) == 0

    out = capsys.readouterr().out
    assert market.calls == [("SOLUSDT", "1h", 150)]
    assert "No breakout signals detected" in out
    assert "in the last 10 candles" in out


def test_fetch_failure_returns_error_code(market, capsys):
    market.error = RuntimeError("Failed to fetch klines for SOLUSDT after retries")

    assert breakout_scanner.main([]) == 1
    assert capsys.readouterr().out == ""


class ListingMarketData(FakeMarketData):
    def __init__(self, listed, error: Exception | None = None):
        super().__init__(error)
        self.listed = listed

    def list_symbols(self, quote_asset):
        return list(self.listed)


def _fail_eth(market_data, symbol, *, interval, config):
    if symbol == "ETHUSDT":
        raise RuntimeError("Failed to fetch klines for ETHUSDT after retries")
    return [_breakout(symbol)]


def test_settings_are_logged_after_logging_is_configured(monkeypatch, caplog):
    events = []
    monkeypatch.setattr(breakout_scanner, "load_settings", lambda: DummySettings({"SYMBOL": "SOLUSDT"}))
    monkeypatch.setattr(breakout_scanner, "setup_logging", lambda **kwargs: events.append(len(caplog.records)))
    monkeypatch.setattr(breakout_scanner, "make_market_data", lambda settings: FakeMarketData())

    with caplog.at_level(logging.INFO, logger="runners.breakout_scanner"):
        assert breakout_scanner.main(["bnb"]) == 0

    assert events == [0]
    assert "settings symbols=BNBUSDT" in caplog.text


def test_several_symbols_keep_scanning_past_a_failure(market, monkeypatch, capsys):
    monkeypatch.setattr(scanner, "analyze_symbol", _fail_eth)

    assert breakout_scanner.main(["btc", "eth", "sol", "--pause", "0"]) == 0

    out = capsys.readouterr().out
    assert "Scanned 3 symbols: 2 processed, 1 failed" in out
    assert "ETHUSDT: Failed to fetch klines for ETHUSDT after retries" in out
    assert "Market Sentiment: STRONG BULLISH" in out
    assert "UP_BREAKOUT (2): BTCUSDT SOLUSDT" in out
    assert "Top Opportunities:" in out


def test_all_scans_listed_perpetuals_and_samples(monkeypatch, capsys):
    listing = ListingMarketData(["AAVEUSDT", "BTCUSDT", "ETHUSDT", "SOLUSDT"])
    monkeypatch.setattr(breakout_scanner, "load_settings", lambda: DummySettings())
    monkeypatch.setattr(breakout_scanner, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(breakout_scanner, "make_market_data", lambda settings: listing)
    monkeypatch.setattr(scanner, "analyze_symbol", _fail_eth)

    assert breakout_scanner.main(["--all", "--sample", "2", "--json", "--pause", "0"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert len(payload["symbols"]) == 2
    assert set(payload["symbols"]) <= set(listing.listed)
    assert payload["processed"] + len(payload["failed"]) == 2
    assert payload["summary"]["total"] == len(payload["signals"])
    assert len(payload["top"]) == len(payload["signals"])


def test_all_symbols_failing_returns_error_code(market, capsys):
    market.error = RuntimeError("exchange down")

    assert breakout_scanner.main(["btc", "eth", "--pause", "0"]) == 1
    assert "Scanned 2 symbols: 0 processed, 2 failed" in capsys.readouterr().out


def test_listing_failure_returns_error_code(monkeypatch, capsys):
    class BrokenListing(FakeMarketData):
        def list_symbols(self, quote_asset):
            raise RuntimeError("Binance futures_exchange_info failed after 3 attempts")

    monkeypatch.setattr(breakout_scanner, "load_settings", lambda: DummySettings())
    monkeypatch.setattr(breakout_scanner, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(breakout_scanner, "make_market_data", lambda settings: BrokenListing())

    assert breakout_scanner.main(["--all"]) == 1
    assert capsys.readouterr().out == ""
