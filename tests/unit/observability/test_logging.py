"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest
import structlog

from osconnect.config.settings import ObservabilitySettings
from osconnect.observability.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("opensearch").setLevel(logging.NOTSET)
    structlog.reset_defaults()


def test_json_output(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(ObservabilitySettings(log_level="info", log_format="json"))
    logging.getLogger("osconnect.test").info("Registered connector: %s", "standard")

    out = capsys.readouterr().out
    assert '"event": "Registered connector: standard"' in out
    assert '"logger": "osconnect.test"' in out


def test_level_applied() -> None:
    setup_logging(ObservabilitySettings(log_level="error"))
    root = logging.getLogger()
    assert root.level == logging.ERROR
    assert len(root.handlers) == 1


def test_noisy_loggers_quietened() -> None:
    setup_logging(ObservabilitySettings(log_level="info"))
    assert logging.getLogger("opensearch").level == logging.WARNING


def test_defaults_without_settings() -> None:
    setup_logging()
    assert logging.getLogger().level == logging.INFO
