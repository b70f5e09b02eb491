# tests/0_independant/test_colorize.py
"""Tests for colour helpers of the app logger and libsmith.utils_logs."""

import apathetic_logging as mod_alogs
import pytest

import libsmith.logs as mod_logs
import libsmith.utils_logs as mod_utils_logs


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables and cached state before each test."""
    for var in ("NO_COLOR", "FORCE_COLOR"):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# colorize() behavior
# ---------------------------------------------------------------------------


def test_colorize_explicit_true_false(direct_logger: mod_logs.AppLogger) -> None:
    """Explicit enable_color argument forces color on or off."""
    # --- setup ---
    text = "test"
    green = mod_alogs.ANSIColors.GREEN

    # --- execute and verify ---
    assert (
        direct_logger.colorize(text, green, enable_color=True)
    ) == f"{green}{text}{mod_alogs.ANSIColors.RESET}"
    assert direct_logger.colorize(text, green, enable_color=False) == text


def test_colorize_respects_instance_flag(direct_logger: mod_logs.AppLogger) -> None:
    """colorize() should honor logger.enable_color."""
    # --- setup ---
    text = "abc"

    # --- execute and verify ---
    direct_logger.enable_color = True
    assert (
        direct_logger.colorize(text, mod_alogs.ANSIColors.GREEN)
        == f"{mod_alogs.ANSIColors.GREEN}{text}{mod_alogs.ANSIColors.RESET}"
    )

    direct_logger.enable_color = False
    assert direct_logger.colorize(text, mod_alogs.ANSIColors.GREEN) == text


def test_no_color_env_disables_color(monkeypatch: pytest.MonkeyPatch) -> None:
    # --- patch ---
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("FORCE_COLOR", "1")

    # --- execute and verify ---
    assert mod_logs.AppLogger.determineColorEnabled() is False


def test_force_color_env_enables_color(monkeypatch: pytest.MonkeyPatch) -> None:
    # --- patch ---
    monkeypatch.setenv("FORCE_COLOR", "yes")

    # --- execute and verify ---
    assert mod_logs.AppLogger.determineColorEnabled() is True


# ---------------------------------------------------------------------------
# package colours
# ---------------------------------------------------------------------------


def test_color_for_name_is_stable() -> None:
    # --- execute ---
    first = mod_utils_logs.color_for_name("@scope/ui")
    second = mod_utils_logs.color_for_name("@scope/ui")

    # --- verify ---
    assert first == second
    assert first in mod_utils_logs.PACKAGE_COLORS


def test_package_adapter_prefixes_messages(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    adapter = mod_utils_logs.PackageLogAdapter(direct_logger, "core")

    # --- execute ---
    adapter.info("Build esm with per-file")

    # --- verify ---
    out = capsys.readouterr().out
    assert "core: Build esm with per-file" in out
