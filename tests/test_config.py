"""Tests for settings loading and logging setup."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from aeroanalysis.config import DEFAULT_ANALYSIS_MODEL, load_settings
from aeroanalysis.logging_config import parse_level, setup_logging


@pytest.fixture()
def ini_settings(tmp_path: Path):
    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ("AEROANALYSIS_MODEL", "AEROANALYSIS_LOG_LEVEL", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(ini_settings, clean_env):
    settings = load_settings(ini_settings)
    assert settings.model == DEFAULT_ANALYSIS_MODEL
    assert settings.api_key is None
    assert settings.log_level == "INFO"


def test_stored_values_are_used(ini_settings, clean_env):
    ini_settings.setValue("analysis/model", "gpt-4o")
    ini_settings.setValue("logging/level", "debug")

    settings = load_settings(ini_settings)

    assert settings.model == "gpt-4o"
    assert settings.log_level == "DEBUG"


def test_environment_overrides_stored_values(ini_settings, clean_env):
    ini_settings.setValue("analysis/model", "gpt-4o")
    clean_env.setenv("AEROANALYSIS_MODEL", "gpt-4.1-mini")
    clean_env.setenv("AEROANALYSIS_LOG_LEVEL", "warning")
    clean_env.setenv("OPENAI_API_KEY", "sk-test")

    settings = load_settings(ini_settings)

    assert settings.model == "gpt-4.1-mini"
    assert settings.log_level == "WARNING"
    assert settings.api_key == "sk-test"


@pytest.mark.parametrize("name, expected", [
    ("debug", logging.DEBUG),
    (" WARNING ", logging.WARNING),
    ("", logging.INFO),
    (None, logging.INFO),
    ("loud", logging.INFO),
])
def test_parse_level(name, expected):
    assert parse_level(name) == expected


def test_setup_logging_does_not_stack_handlers(tmp_path: Path):
    """Calling setup twice leaves one console handler (plus the optional file handler)."""
    setup_logging(logging.DEBUG)
    setup_logging(logging.DEBUG, log_file=str(tmp_path / "app.log"))

    logger = logging.getLogger("aeroanalysis")
    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_setup_logging_accepts_level_names(tmp_path: Path):
    """Level names from the settings are understood and the file handler writes."""
    log_file = tmp_path / "app.log"
    logger = setup_logging("warning", log_file=str(log_file))
    try:
        assert logger is logging.getLogger("aeroanalysis")
        assert logger.level == logging.WARNING
        assert all(handler.level == logging.WARNING for handler in logger.handlers)

        logging.getLogger("aeroanalysis.model.io").warning("disk almost full")
        for handler in logger.handlers:
            handler.flush()
        assert "aeroanalysis.model.io - WARNING - disk almost full" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
