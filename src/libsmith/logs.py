# src/libsmith/logs.py

import logging
from typing import Union, cast

from apathetic_logging import (
    Logger,
    registerDefaultLogLevel,
    registerLogger,
    registerLogLevelEnvVars,
)

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV, PROGRAM_PACKAGE
from .utils_logs import PackageLogAdapter


class AppLogger(Logger):
    """App-specific logger class."""


# anything that can be handed to a build step for output
BuildLogger = Union[AppLogger, PackageLogAdapter]


# --- Logger initialization ---------------------------------------------------

# Must happen *before* any loggers are created.
logging.setLoggerClass(AppLogger)

# Registers the TRACE and SILENT levels
AppLogger.extendLoggingModule()

registerLogLevelEnvVars(
    [f"{PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}", DEFAULT_ENV_LOG_LEVEL]
)
registerDefaultLogLevel(DEFAULT_LOG_LEVEL)

registerLogger(PROGRAM_PACKAGE)

_APP_LOGGER = cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))
# owns its stdout/stderr handler instead of going through the root logger
_APP_LOGGER.setPropagate(False)


# --- Convenience utils ---------------------------------------------------------


def get_app_logger() -> AppLogger:
    """Return the configured app logger."""
    return _APP_LOGGER


def get_build_logger(package_name: str | None = None) -> BuildLogger:
    """Return the logger for one package build.

    In a monorepo every line is tagged with the package name; a single
    package build logs through the plain app logger.
    """
    logger = get_app_logger()
    if not package_name:
        return logger
    return PackageLogAdapter(logger, package_name)
