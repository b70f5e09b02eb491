# tests/conftest.py
"""Shared test setup for project."""

from collections.abc import Generator

import pytest

import libsmith.logs as mod_logs
from tests.utils import DEFAULT_TEST_LOG_LEVEL
from tests.utils.log_fixtures import (
    direct_logger,
    module_logger,
)


# These fixtures are intentionally re-exported so pytest can discover them.
__all__ = [
    "direct_logger",
    "module_logger",
]


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_logger_level() -> Generator[None, None, None]:
    """Reset logger level to DEFAULT_TEST_LOG_LEVEL before each test for isolation.

    The app logger is a module-level singleton that persists between
    tests; run_build() and main() change its level.
    """
    logger = mod_logs.get_app_logger()
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)
    yield
    # After test, reset again to ensure clean state for next test
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)


@pytest.fixture(autouse=True)
def clean_program_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop environment variables that change what a build selects."""
    for var in (
        "PACKAGE",
        "LIBSMITH_PACKAGE",
        "LERNA",
        "LIBSMITH_LERNA",
        "LOG_LEVEL",
        "LIBSMITH_LOG_LEVEL",
        "LIBSMITH_WATCH_INTERVAL",
    ):
        monkeypatch.delenv(var, raising=False)


# ----------------------------------------------------------------------
# Hooks
# ----------------------------------------------------------------------


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    # detect if the user is filtering for debug tests
    keywords = config.getoption("-k") or ""
    if "debug" in keywords.lower():
        return  # user explicitly requested them, don't skip

    for item in items:
        if "debug" in item.keywords:
            item.add_marker(
                pytest.mark.skip(reason="Skipped debug test (use -k debug to run)"),
            )
