# tests/core/test_logging.py
from __future__ import annotations

import json
import logging

import pytest

from liveref.core.config import Settings
from liveref.core.logging import NOISY_LOGGERS, configure_logging, resolve_level


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    noisy = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield
    root.handlers = handlers
    root.setLevel(level)
    for name, lvl in noisy.items():
        logging.getLogger(name).setLevel(lvl)


@pytest.mark.parametrize(
    "raw,expected",
    [("info", logging.INFO), (" Warning ", logging.WARNING), ("DEBUG", logging.DEBUG), (40, 40)],
)
def test_resolve_level(raw, expected):
    assert resolve_level(raw) == expected


def test_unknown_level_rejected():
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging("chatty")


def test_json_lines(capsys):
    configure_logging("info", app_env="test")
    logging.getLogger("liveref.sample").warning("cache %s", "cold")

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["message"] == "cache cold"
    assert record["levelname"] == "WARNING"
    assert record["name"] == "liveref.sample"
    assert record["app_env"] == "test"


def test_plain_text(capsys):
    configure_logging("INFO", json_format=False)
    logging.getLogger("liveref.sample").info("hello")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    assert line.endswith("liveref.sample: hello")
    assert not line.startswith("{")


def test_replaces_root_handlers():
    configure_logging("INFO")
    configure_logging("INFO")
    assert len(logging.getLogger().handlers) == 1


def test_http_client_loggers_held_at_warning():
    configure_logging("INFO")
    assert all(logging.getLogger(n).level == logging.WARNING for n in NOISY_LOGGERS)

    configure_logging("DEBUG")
    assert all(logging.getLogger(n).level == logging.DEBUG for n in NOISY_LOGGERS)


def test_settings_switch_format(monkeypatch):
    monkeypatch.setenv("LOG_JSON", "false")
    assert Settings().log_json is False
