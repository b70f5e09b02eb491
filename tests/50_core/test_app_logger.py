# tests/50_core/test_app_logger.py
"""The app logger is the apathetic_logging logger with libsmith's settings."""

import argparse

import apathetic_logging as mod_alogs
import pytest

import libsmith.logs as mod_logs


def test_app_logger_is_apathetic_logger() -> None:
    # --- execute ---
    logger = mod_logs.get_app_logger()

    # --- verify ---
    assert isinstance(logger, mod_alogs.Logger)
    assert isinstance(logger, mod_logs.AppLogger)
    assert logger.name == "libsmith"
    assert logger.propagate is False


def test_log_level_prefers_program_env_var(monkeypatch: pytest.MonkeyPatch) -> None:
    # --- patch ---
    monkeypatch.setenv("LIBSMITH_LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_LEVEL", "error")

    # --- execute and verify ---
    assert mod_logs.get_app_logger().determineLogLevel() == "DEBUG"


def test_log_level_order_cli_env_config_default(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    logger = mod_logs.get_app_logger()

    # --- execute and verify ---
    assert logger.determineLogLevel() == "INFO"
    assert logger.determineLogLevel(root_log_level="warning") == "WARNING"

    monkeypatch.setenv("LOG_LEVEL", "error")
    assert logger.determineLogLevel(root_log_level="warning") == "ERROR"

    args = argparse.Namespace(log_level="trace")
    assert logger.determineLogLevel(args=args, root_log_level="warning") == "TRACE"


def test_silent_level_hides_errors(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    direct_logger.setLevel("silent")

    # --- execute ---
    direct_logger.error("nobody sees this")

    # --- verify ---
    assert "nobody sees this" not in capsys.readouterr().err
