# src/libsmith/utils/utils_files.py


import json
import re
import sys
from pathlib import Path
from typing import Any, cast

from libsmith.logs import get_app_logger


# strings, // line comments, # line comments, /* block comments */
_JSONC_TOKEN_RE = re.compile(
    r"""
    (?P<string>"(?:\\.|[^"\\])*")
    | (?P<line>//[^\n]*|\#[^\n]*)
    | (?P<block>/\*.*?\*/)
    """,
    re.VERBOSE | re.DOTALL,
)
_TRAILING_COMMA_RE = re.compile(r",(?=\s*[}\]])")


def _strip_jsonc_comments(text: str) -> str:
    """Remove comments outside of string literals."""

    def _keep_strings(match: re.Match[str]) -> str:
        if match.group("string") is not None:
            return match.group("string")
        if match.group("block") is not None:
            # keep line numbers stable for error messages
            return "\n" * match.group("block").count("\n")
        return ""

    return _JSONC_TOKEN_RE.sub(_keep_strings, text)


def load_jsonc(path: Path) -> dict[str, Any] | list[Any] | None:
    """Load JSONC (JSON with comments and trailing commas).

    Returns None for a file that is empty or only holds comments.
    """
    logger = get_app_logger()
    logger.trace(f"[load_jsonc] Loading from {path}")

    if not path.exists():
        xmsg = f"JSONC file not found: {path}"
        raise FileNotFoundError(xmsg)
    if not path.is_file():
        xmsg = f"Expected a file: {path}"
        raise ValueError(xmsg)

    text = _strip_jsonc_comments(path.read_text(encoding="utf-8"))
    text = _TRAILING_COMMA_RE.sub("", text).strip()
    if not text:
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = (
            f"Invalid JSONC syntax in {path}:"
            f" {e.msg} (line {e.lineno}, column {e.colno})"
        )
        raise ValueError(xmsg) from e

    if not isinstance(data, (dict, list)):
        xmsg = f"Invalid JSONC root type: {type(data).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004

    return cast("dict[str, Any] | list[Any]", data)


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file.

    Uses ``tomllib`` on Python 3.11+ and the ``tomli`` backport on 3.10.
    """
    if sys.version_info >= (3, 11):
        import tomllib  # noqa: PLC0415

        loader = tomllib
    else:
        import tomli  # noqa: PLC0415  # pyright: ignore[reportMissingImports]

        loader = tomli

    try:
        with path.open("rb") as f:
            return cast("dict[str, Any]", loader.load(f))
    except loader.TOMLDecodeError as e:
        xmsg = f"Invalid TOML syntax in {path}: {e}"
        raise ValueError(xmsg) from e


def load_manifest(package_path: Path, manifest_name: str) -> dict[str, Any] | None:
    """Read a package manifest (package.json); None when it does not exist."""
    manifest = package_path / manifest_name
    if not manifest.is_file():
        return None
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        xmsg = f"Invalid JSON in {manifest}: {e.msg} (line {e.lineno})"
        raise ValueError(xmsg) from e
    if not isinstance(data, dict):
        xmsg = f"{manifest} must contain a JSON object"
        raise ValueError(xmsg)  # noqa: TRY004
    return cast("dict[str, Any]", data)
