# src/libsmith/utils_logs.py
"""Per-package log output on top of the apathetic_logging app logger."""

from __future__ import annotations

import logging
import zlib
from collections.abc import MutableMapping
from typing import Any, cast

from apathetic_logging import TRACE_LEVEL, ANSIColors, Logger


# ANSI colours missing from ANSIColors
BLUE = "\033[94m"
MAGENTA = "\033[95m"

# picked from by package name, so a package keeps its colour between runs
PACKAGE_COLORS: tuple[str, ...] = (
    "\033[31m",
    "\033[32m",
    "\033[33m",
    "\033[34m",
    "\033[35m",
    "\033[36m",
    ANSIColors.RED,
    ANSIColors.GREEN,
    ANSIColors.YELLOW,
    BLUE,
    MAGENTA,
    "\033[96m",
)


def color_for_name(name: str) -> str:
    """Return a stable ANSI colour for a name (same name, same colour)."""
    return PACKAGE_COLORS[zlib.crc32(name.encode("utf-8")) % len(PACKAGE_COLORS)]


class PackageLogAdapter(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Prefix every message with the package name in its own colour."""

    def __init__(self, logger: Logger, package_name: str) -> None:
        super().__init__(logger, {"package": package_name})
        self.package_name = package_name

    @property
    def prefix(self) -> str:
        app_logger = cast("Logger", self.logger)
        return app_logger.colorize(self.package_name, color_for_name(self.package_name))

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.prefix}: {msg}", kwargs

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(TRACE_LEVEL):
            msg, kwargs = self.process(msg, kwargs)
            self.logger.log(TRACE_LEVEL, msg, *args, **kwargs)

    def colorize(self, text: str, color: str) -> str:
        return cast("Logger", self.logger).colorize(text, color)
