from __future__ import annotations

import json
import logging

import pytest

from config.logging import setup_logging
from strategies.channel_breakout import detector


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
    root.setLevel(level)


def test_json_mode_emits_one_parseable_object_per_line(restore_root_logging, capsys):
    setup_logging("info", "json")

    detector._log({"event": "channel_breakout.scan", "symbol": "BTCUSDT", "signals": 1})
    logging.getLogger("bot.test").warning('quoted "value" with\nnewline')
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logging.getLogger("bot.test").exception("scan failed")

    lines = [line for line in capsys.readouterr().err.splitlines() if line]
    records = [json.loads(line) for line in lines]

    assert len(records) == 3
    assert json.loads(records[0]["msg"]) == {
        "event": "channel_breakout.scan",
        "symbol": "BTCUSDT",
        "signals": 1,
    }
    assert records[0]["name"] == "bot.strategy.channel_breakout"
    assert records[1]["level"] == "WARNING"
    assert records[1]["msg"] == 'quoted "value" with\nnewline'
    assert "RuntimeError: boom" in records[2]["exc"]


def test_plain_mode_keeps_logger_name(restore_root_logging, capsys):
    setup_logging("DEBUG", "plain")

    logging.getLogger("bot.test").debug("hello %s", "world")

    assert logging.getLogger().level == logging.DEBUG
    assert capsys.readouterr().err.strip() == "DEBUG - bot.test - hello world"
