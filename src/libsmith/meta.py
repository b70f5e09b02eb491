# src/libsmith/meta.py
"""Program identity: names used for the CLI, config files, env vars and logger."""

from typing import NamedTuple


PROGRAM_DISPLAY = "libsmith"
PROGRAM_SCRIPT = "libsmith"
PROGRAM_PACKAGE = "libsmith"
PROGRAM_CONFIG = "libsmith"
PROGRAM_ENV = "LIBSMITH"


class Metadata(NamedTuple):
    version: str
    commit: str

    def __str__(self) -> str:
        return f"{self.version} ({self.commit})"
