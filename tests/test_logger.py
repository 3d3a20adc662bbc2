"""Tests for logger setup."""

import logging

import pytest

import config
import logger as logger_module


@pytest.fixture(autouse=True)
def restore_logger():
    """Rebuild the bot logger from the real config after each test."""
    yield
    logger_module.setup_logging()


def test_level_comes_from_config(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "LOG_DIR", tmp_path)
    monkeypatch.setattr(config, "LOG_LEVEL", "DEBUG")

    log = logger_module.setup_logging()

    assert log.level == logging.DEBUG
    assert list(tmp_path.glob("*.log"))


def test_explicit_level_wins(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "LOG_DIR", tmp_path)
    monkeypatch.setattr(config, "LOG_LEVEL", "DEBUG")

    assert logger_module.setup_logging("warning").level == logging.WARNING


def test_unknown_level_falls_back_to_info(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "LOG_DIR", tmp_path)

    assert logger_module.setup_logging("LOUD").level == logging.INFO
