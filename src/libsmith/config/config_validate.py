# src/libsmith/config/config_validate.py


from collections.abc import Callable
from dataclasses import dataclass, field
from difflib import get_close_matches
from typing import Any

from apathetic_logging import LEVEL_ORDER

from libsmith.constants import DEFAULT_STRICT_CONFIG, STRATEGY_ALIASES, TARGETS
from libsmith.errors import ConfigValidationError
from libsmith.logs import get_app_logger
from libsmith.utils import plural

from .config_types import PackageConfig, RootConfig, ToolConfig


# --- constants ------------------------------------------------------

DEFAULT_HINT_CUTOFF: float = 0.75

KNOWN_KEYS: frozenset[str] = frozenset(RootConfig.__annotations__) | frozenset(
    PackageConfig.__annotations__
)
KNOWN_TOOL_KEYS: frozenset[str] = frozenset(ToolConfig.__annotations__)
FORMAT_NAMES: tuple[str, ...] = ("esm", "cjs", "umd")
FORMAT_BOOL_KEYS: tuple[str, ...] = ("lazy", "rewrite_imports", "minify")
FORMAT_STR_KEYS: tuple[str, ...] = ("name", "file")
FLAG_KEYS: tuple[str, ...] = ("disable_type_check", "runtime_helpers", "strict_config")

# Field-specific examples for better error messages
FIELD_EXAMPLES: dict[str, str] = {
    "entry": '"src/index.ts" or ["src/a.ts", "src/b.ts"]',
    "esm": '"bundle", "per-file" or {"strategy": "per-file"}',
    "cjs": '"bundle", "per-file" or {"strategy": "per-file", "lazy": true}',
    "umd": '{"name": "MyLib"}',
    "target": '"browser" or "node"',
    "browser_files": '["src/browser/**"]',
    "node_files": '["src/server/**"]',
    "extra_transforms": '["my-plugin"]',
    "pkgs": '["core", "@scope/ui"]',
    "watch_interval": "1.5",
    "log_level": '"debug"',
}


# --- dataclasses ------------------------------------------------------


@dataclass
class ValidationSummary:
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    strict_warnings: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    strict: bool = DEFAULT_STRICT_CONFIG

    @property
    def violations(self) -> list[str]:
        """Everything that makes the config invalid."""
        return [*self.errors, *self.strict_warnings]


# --- helpers --------------------------------------------------------


def collect_msg(
    msg: str,
    *,
    strict: bool,
    summary: ValidationSummary,  # modified in function, not returned
    is_error: bool = False,
) -> None:
    """Route a message to the appropriate bucket.
    Errors are always fatal.
    Warnings may escalate to strict_warnings in strict mode.
    """
    if is_error:
        summary.errors.append(msg)
    elif strict:
        summary.strict_warnings.append(msg)
    else:
        summary.warnings.append(msg)


def _type_error(
    key: str, expected: str, value: Any, summary: ValidationSummary
) -> None:
    example = FIELD_EXAMPLES.get(key.split(".")[0])
    exmsg = f" (e.g. {example})" if example else ""
    collect_msg(
        f"`{key}` must be {expected}, got {type(value).__name__}{exmsg}",
        strict=True,
        summary=summary,
        is_error=True,
    )


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


# ---------------------------------------------------------------------------
# field group validators
# ---------------------------------------------------------------------------


def _validate_entry(cfg: dict[str, Any], summary: ValidationSummary) -> None:
    if "entry" not in cfg or cfg["entry"] is None:
        return
    entry = cfg["entry"]
    if isinstance(entry, str):
        if not entry:
            _type_error("entry", "a non-empty path", entry, summary)
        return
    if not _is_str_list(entry):
        _type_error("entry", "a path or a list of paths", entry, summary)


def _validate_one_format(
    name: str, value: Any, summary: ValidationSummary
) -> None:
    if value is None or value is False:
        return
    if not isinstance(value, dict):
        _type_error(name, "an object", value, summary)
        return

    strategy = value.get("strategy")
    if strategy not in STRATEGY_ALIASES.values():
        collect_msg(
            f"`{name}.strategy` must be one of 'bundle', 'per-file'"
            f" (got {strategy!r})",
            strict=True,
            summary=summary,
            is_error=True,
        )
    elif name == "umd" and strategy != "bundle":
        collect_msg(
            "`umd` only supports the 'bundle' strategy",
            strict=True,
            summary=summary,
            is_error=True,
        )

    for key in FORMAT_BOOL_KEYS:
        if key in value and not isinstance(value[key], bool):
            _type_error(f"{name}.{key}", "a boolean", value[key], summary)
    for key in FORMAT_STR_KEYS:
        if key in value and value[key] is not None and not isinstance(value[key], str):
            _type_error(f"{name}.{key}", "a string", value[key], summary)


def _validate_formats(cfg: dict[str, Any], summary: ValidationSummary) -> None:
    for name in FORMAT_NAMES:
        if name in cfg:
            _validate_one_format(name, cfg[name], summary)


def _validate_target(cfg: dict[str, Any], summary: ValidationSummary) -> None:
    if "target" in cfg and cfg["target"] not in TARGETS:
        collect_msg(
            f"`target` must be one of {', '.join(sorted(TARGETS))}"
            f" (got {cfg['target']!r})",
            strict=True,
            summary=summary,
            is_error=True,
        )
    node_version = cfg.get("node_version")
    if node_version is not None and (
        isinstance(node_version, bool) or not isinstance(node_version, (int, str))
    ):
        _type_error("node_version", "a number or a string", node_version, summary)


def _validate_file_globs(cfg: dict[str, Any], summary: ValidationSummary) -> None:
    for key in ("browser_files", "node_files", "extra_transforms"):
        if key in cfg and not _is_str_list(cfg[key]):
            _type_error(key, "a list of strings", cfg[key], summary)


def _validate_flags(cfg: dict[str, Any], summary: ValidationSummary) -> None:
    for key in FLAG_KEYS:
        if key in cfg and not isinstance(cfg[key], bool):
            _type_error(key, "a boolean", cfg[key], summary)
    stylesheet = cfg.get("stylesheet")
    if stylesheet is not None and not isinstance(stylesheet, (bool, dict)):
        _type_error("stylesheet", "a boolean or an object", stylesheet, summary)
    if "file" in cfg and cfg["file"] is not None and not isinstance(cfg["file"], str):
        _type_error("file", "a string", cfg["file"], summary)


def _validate_root_keys(cfg: dict[str, Any], summary: ValidationSummary) -> None:
    if "pkgs" in cfg and not _is_str_list(cfg["pkgs"]):
        _type_error("pkgs", "a list of package names", cfg["pkgs"], summary)

    interval = cfg.get("watch_interval")
    if interval is not None and (
        isinstance(interval, bool)
        or not isinstance(interval, (int, float))
        or interval <= 0
    ):
        collect_msg(
            f"`watch_interval` must be a positive number (got {interval!r})",
            strict=True,
            summary=summary,
            is_error=True,
        )

    level = cfg.get("log_level")
    if level is not None and (
        not isinstance(level, str) or level.lower() not in LEVEL_ORDER
    ):
        collect_msg(
            f"`log_level` must be one of {', '.join(LEVEL_ORDER)} (got {level!r})",
            strict=True,
            summary=summary,
            is_error=True,
        )

    tools = cfg.get("tools")
    if tools is None:
        return
    if not isinstance(tools, dict):
        _type_error("tools", "an object", tools, summary)
        return
    for tool_name, tool in tools.items():
        if not isinstance(tool, dict):
            _type_error(f"tools.{tool_name}", "an object", tool, summary)
            continue
        for key in ("args", "options"):
            if key in tool and not _is_str_list(tool[key]):
                _type_error(f"tools.{tool_name}.{key}", "a list of strings", tool[key], summary)
        for key in ("command", "path"):
            if key in tool and not isinstance(tool[key], str):
                _type_error(f"tools.{tool_name}.{key}", "a string", tool[key], summary)
        unknown = sorted(set(tool) - KNOWN_TOOL_KEYS)
        if unknown:
            collect_msg(
                f"Unknown key(s) in `tools.{tool_name}`: {', '.join(unknown)}",
                strict=summary.strict,
                summary=summary,
            )


def _validate_unknown_keys(cfg: dict[str, Any], summary: ValidationSummary) -> None:
    for key in sorted(set(cfg) - KNOWN_KEYS):
        hint = get_close_matches(key, sorted(KNOWN_KEYS), n=1, cutoff=DEFAULT_HINT_CUTOFF)
        hint_msg = f" (did you mean {hint[0]!r}?)" if hint else ""
        collect_msg(
            f"Unknown key {key!r}{hint_msg}",
            strict=summary.strict,
            summary=summary,
        )


FIELD_GROUP_VALIDATORS: tuple[Callable[[dict[str, Any], ValidationSummary], None], ...] = (
    _validate_entry,
    _validate_formats,
    _validate_target,
    _validate_file_globs,
    _validate_flags,
    _validate_root_keys,
    _validate_unknown_keys,
)


# ---------------------------------------------------------------------------
# main validator
# ---------------------------------------------------------------------------


def validate_config(
    cfg: dict[str, Any],
    *,
    strict: bool | None = None,
) -> ValidationSummary:
    """Validate one merged, format-normalized build variant.

    strict=True  →  warnings (unknown keys) become fatal
    strict=False →  warnings remain non-fatal
    strict=None  →  use the `strict_config` key, or the default (strict)
    """
    logger = get_app_logger()
    logger.trace(f"[validate_config] Validating {len(cfg)} key(s) (strict={strict})")

    strict_from_cfg = cfg.get("strict_config")
    if strict is not None:
        effective_strict = strict
    elif isinstance(strict_from_cfg, bool):
        effective_strict = strict_from_cfg
    else:
        effective_strict = DEFAULT_STRICT_CONFIG

    summary = ValidationSummary(strict=effective_strict)
    for validator in FIELD_GROUP_VALIDATORS:
        validator(cfg, summary)

    summary.valid = not summary.errors and not summary.strict_warnings
    return summary


def report_validation(summary: ValidationSummary, source: str) -> None:
    """Log a validation summary; raise ConfigValidationError if invalid."""
    logger = get_app_logger()
    mode = "strict mode" if summary.strict else "lenient mode"

    counts: list[str] = []
    if summary.errors:
        counts.append(f"{len(summary.errors)} error{plural(summary.errors)}")
    if summary.strict_warnings:
        counts.append(
            f"{len(summary.strict_warnings)} strict warning"
            f"{plural(summary.strict_warnings)}",
        )
    if summary.warnings:
        counts.append(f"{len(summary.warnings)} warning{plural(summary.warnings)}")
    counts_msg = f" Found {', '.join(counts)}." if counts else ""

    if not summary.valid:
        logger.error("Failed to validate options in %s (%s).%s", source, mode, counts_msg)
    elif counts:
        logger.warning("Validated options in %s with warnings.%s", source, counts_msg)
    else:
        logger.debug("Validated options in %s (%s) successfully.", source, mode)

    if summary.warnings:
        msg_summary = "\n  • ".join(summary.warnings)
        logger.warning("Warnings (non-fatal):\n  • %s", msg_summary)

    if not summary.valid:
        error = ConfigValidationError(summary.violations, source=source)
        # the summary above already listed every violation
        error.silent = True
        raise error
