# src/libsmith/config/config_loader.py


import sys
import traceback
from pathlib import Path
from typing import Any, cast

from libsmith.constants import CONFIG_FILES, DEPRECATED_CONFIG_FILES
from libsmith.logs import get_app_logger
from libsmith.utils import (
    get_exist_files,
    load_jsonc,
    load_toml,
    remove_path_in_error_message,
)


def find_config(
    cwd: Path,
    *,
    explicit: str | Path | None = None,
    candidates: list[str] | None = None,
) -> Path | None:
    """Locate the configuration file of one package.

    Search order:
      1. Explicit path (``--config``)
      2. The first existing name of ``CONFIG_FILES`` in ``cwd``

    Only one file is ever used. When several recognized names exist side by
    side the first one in ``CONFIG_FILES`` wins and the others are ignored;
    a warning lists them so the ambiguity does not go unnoticed.
    """
    logger = get_app_logger()

    if explicit:
        config = Path(explicit).expanduser()
        if not config.is_absolute():
            config = cwd / config
        config = config.resolve()
        logger.trace(f"[find_config] Checking explicit path: {config}")
        if not config.exists():
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    names = candidates if candidates is not None else CONFIG_FILES
    found = get_exist_files(cwd, names)
    if not found:
        logger.trace(f"[find_config] No config file in {cwd}")
        return None

    chosen = found[0]
    if len(found) > 1:
        logger.warning(
            "Multiple config files detected in %s (%s); using %s.",
            cwd,
            ", ".join(found),
            chosen,
        )
    if chosen in DEPRECATED_CONFIG_FILES:
        logger.warning(
            "%s is deprecated, please use %s instead.", chosen, CONFIG_FILES[0]
        )
    return cwd / chosen


def _load_python_config(config_path: Path) -> dict[str, Any] | list[Any] | None:
    logger = get_app_logger()
    config_globals: dict[str, Any] = {"__file__": str(config_path)}

    # Allow local imports in Python configs (e.g. from ./helpers import foo)
    parent_dir = str(config_path.parent)
    added_to_sys_path = parent_dir not in sys.path
    if added_to_sys_path:
        sys.path.insert(0, parent_dir)

    try:
        source = config_path.read_text(encoding="utf-8")
        exec(compile(source, str(config_path), "exec"), config_globals)  # noqa: S102
        logger.trace(f"[EXEC] globals after exec: {list(config_globals.keys())}")
    except Exception as e:
        tb = traceback.format_exc()
        xmsg = (
            f"Error while executing Python config: {config_path.name}\n"
            f"{type(e).__name__}: {e}\n{tb}"
        )
        raise RuntimeError(xmsg) from e
    finally:
        if added_to_sys_path and sys.path[0] == parent_dir:
            sys.path.pop(0)

    for key in ("config", "builds"):
        if key in config_globals:
            result = config_globals[key]
            if not isinstance(result, (dict, list, type(None))):
                xmsg = (
                    f"{key} in {config_path.name} must be a dict, list, or None"
                    f", not {type(result).__name__}"
                )
                raise TypeError(xmsg)
            return cast("dict[str, Any] | list[Any] | None", result)

    xmsg = f"{config_path.name} did not define `config` or `builds`"
    raise ValueError(xmsg)


def load_config(config_path: Path) -> dict[str, Any] | list[Any] | None:
    """Load configuration data from a file.

    Supports:
      - Python configs: .py files defining `config` or `builds`
      - TOML configs: .toml (a top-level `builds` array of tables for variants)
      - JSON/JSONC configs: .json, .jsonc

    Returns the raw object (dict, list, or None for an intentionally empty
    config).
    """
    logger = get_app_logger()
    logger.trace(f"[load_config] Loading from {config_path} ({config_path.suffix})")

    if config_path.suffix == ".py":
        return _load_python_config(config_path)

    if config_path.suffix == ".toml":
        data = load_toml(config_path)
        return data or None

    try:
        return load_jsonc(config_path)
    except ValueError as e:
        clean_msg = remove_path_in_error_message(str(e), config_path)
        xmsg = (
            f"Error while loading configuration file '{config_path.name}': {clean_msg}"
        )
        raise ValueError(xmsg) from e


def parse_config(raw_config: dict[str, Any] | list[Any] | None) -> list[dict[str, Any]]:
    """Normalize a loaded config into a list of build variants.

    Accepted forms:
      - None / {} / []           → one empty variant
      - {...}                    → one variant
      - [{...}, {...}]           → one variant per entry
      - {"builds": [...], ...}   → one variant per build; other keys are
                                   shared by every build
    """
    logger = get_app_logger()
    logger.trace(f"[parse_config] Parsing {type(raw_config).__name__}")

    if not raw_config:
        return [{}]

    if isinstance(raw_config, list):
        if not all(isinstance(x, dict) for x in raw_config):
            xmsg = "Invalid config list: every build variant must be an object."
            raise TypeError(xmsg)
        return [dict(x) for x in raw_config]

    if not isinstance(raw_config, dict):  # pyright: ignore[reportUnnecessaryIsInstance]
        xmsg = (
            f"Invalid top-level value: {type(raw_config).__name__} "
            "(expected object or list of objects)"
        )
        raise TypeError(xmsg)

    builds = raw_config.get("builds")
    if builds is None:
        return [dict(raw_config)]

    if not isinstance(builds, list) or not all(isinstance(b, dict) for b in builds):
        xmsg = "`builds` must be a list of objects."
        raise TypeError(xmsg)

    shared = {k: v for k, v in raw_config.items() if k != "builds"}
    if not builds:
        return [shared]
    return [{**shared, **b} for b in builds]
