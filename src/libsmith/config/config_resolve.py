# src/libsmith/config/config_resolve.py


import copy
import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

from libsmith.constants import (
    DEFAULT_COMPILER_OPTIONS,
    DEFAULT_ENV_WATCH_INTERVAL,
    DEFAULT_STRATEGY,
    DEFAULT_TARGET,
    DEFAULT_WATCH_INTERVAL,
    ENTRY_CANDIDATES,
    MANIFEST_FILE,
    RUNTIME_HELPERS_DEPENDENCY,
    STRATEGY_ALIASES,
    STRATEGY_BUNDLE,
    TSCONFIG_FILE,
)
from libsmith.context import WorkingContext
from libsmith.errors import (
    ConfigConflictError,
    ConfigValidationError,
    MissingDependencyError,
    NoFormatConfiguredError,
)
from libsmith.logs import get_app_logger
from libsmith.meta import PROGRAM_ENV
from libsmith.utils import (
    get_exist_file,
    load_jsonc,
    load_manifest,
    shorten_path_for_display,
)

from .config_loader import find_config, load_config, parse_config
from .config_types import ROOT_ONLY_KEYS, BuildOptions, FormatOptions, Strategy, Target
from .config_validate import report_validation, validate_config


FORMAT_KEYS: tuple[str, ...] = ("esm", "cjs", "umd")
# keys of a format section that FormatOptions models directly
FORMAT_FIELDS: frozenset[str] = frozenset(
    {"strategy", "lazy", "rewrite_imports", "name", "file", "minify"}
)


# --------------------------------------------------------------------------- #
# merging
# --------------------------------------------------------------------------- #


def _merge_value(base: Any, override: Any) -> Any:
    if isinstance(base, Mapping) and isinstance(override, Mapping):
        return deep_merge(cast("Mapping[str, Any]", base), override)
    if isinstance(base, list) and isinstance(override, list):
        base_list = cast("list[Any]", base)
        override_list = cast("list[Any]", override)
        merged = [
            _merge_value(base_list[i], v) if i < len(base_list) else copy.deepcopy(v)
            for i, v in enumerate(override_list)
        ]
        merged.extend(copy.deepcopy(base_list[len(override_list) :]))
        return merged
    if override is None:
        # an explicit None never erases a value from a lower layer
        return copy.deepcopy(base)
    return copy.deepcopy(override)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Mappings merge key by key, lists merge index by index, anything else
    from ``override`` replaces the value in ``base``. Neither input is
    modified.
    """
    result: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        result[key] = _merge_value(result[key], value) if key in result else copy.deepcopy(value)
    return result


# --------------------------------------------------------------------------- #
# format shorthand
# --------------------------------------------------------------------------- #


def _canonical_strategy(value: Any) -> Any:
    if isinstance(value, str):
        return STRATEGY_ALIASES.get(value.lower(), value)
    return value


def normalize_format(name: str, value: Any) -> dict[str, Any] | bool | None:
    """Bring one format setting into the ``{"strategy": ...}`` object form.

    Returns None for an unset format and False for a disabled one. A
    mapping without a strategy keeps it unset, so merging it over a lower
    layer leaves that layer's strategy in place. Values with a shape that
    is not understood are passed through for the validator to report.
    """
    if value is None or value is False:
        return value
    if value is True:
        return {"strategy": DEFAULT_STRATEGY}
    if isinstance(value, str):
        if name == "umd":
            # `--umd MyLib` on the command line names the global
            return {"strategy": STRATEGY_BUNDLE, "name": value}
        return {"strategy": _canonical_strategy(value)}
    if isinstance(value, Mapping):
        section = dict(cast("Mapping[str, Any]", value))
        alias = section.pop("type", None)
        if "strategy" not in section and alias is not None:
            section["strategy"] = alias
        if "strategy" in section:
            section["strategy"] = _canonical_strategy(section["strategy"])
        return section
    return value  # type: ignore[no-any-return]


def normalize_formats(cfg: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize every format key of one config source.

    Applied to each source before merging, so a shorthand given on the
    command line replaces the strategy of a root config section.
    """
    result = dict(cfg)
    for name in FORMAT_KEYS:
        if name in result:
            result[name] = normalize_format(name, result[name])
    return result


def apply_default_strategies(cfg: Mapping[str, Any]) -> dict[str, Any]:
    """Give every format section that still has no strategy the default one.

    Runs once on the merged config of a variant.
    """
    result = dict(cfg)
    for name in FORMAT_KEYS:
        section = result.get(name)
        if isinstance(section, Mapping) and "strategy" not in section:
            result[name] = {"strategy": DEFAULT_STRATEGY, **section}
    return result


# --------------------------------------------------------------------------- #
# loading
# --------------------------------------------------------------------------- #


def detect_entry(package_path: Path) -> str | None:
    """Return the default entry file (relative) of a package, if any."""
    return get_exist_file(package_path, ENTRY_CANDIDATES)


def load_package_config(
    package_path: Path,
    *,
    explicit: str | Path | None = None,
) -> tuple[Path | None, list[dict[str, Any]]]:
    """Find, load and split the config file of one package into variants."""
    config_path = find_config(package_path, explicit=explicit)
    if config_path is None:
        return None, [{}]
    return config_path, parse_config(load_config(config_path))


def load_root_config(
    root_path: Path,
    *,
    explicit: str | Path | None = None,
) -> tuple[Path | None, dict[str, Any]]:
    """Load the config shared by every package of a monorepo.

    The root config is a single object; variants (a list or ``builds``)
    belong in the package config files.
    """
    logger = get_app_logger()
    config_path = find_config(root_path, explicit=explicit)
    if config_path is None:
        logger.trace(f"[load_root_config] No root config in {root_path}")
        return None, {}

    raw = load_config(config_path)
    if raw is None:
        return config_path, {}
    if not isinstance(raw, dict) or "builds" in raw:
        xmsg = (
            f"Root config {config_path.name} must be a single object;"
            " define build variants in the package config files."
        )
        raise TypeError(xmsg)

    source = shorten_path_for_display(config_path, cwd=root_path)
    report_validation(
        validate_config(apply_default_strategies(normalize_formats(raw))), source
    )
    return config_path, cast("dict[str, Any]", raw)


# --------------------------------------------------------------------------- #
# resolution
# --------------------------------------------------------------------------- #


def _build_format(value: Mapping[str, Any] | bool | None) -> FormatOptions | None:
    if not value or not isinstance(value, Mapping):
        return None
    return FormatOptions(
        strategy=cast("Strategy", value["strategy"]),
        lazy=bool(value.get("lazy", False)),
        rewrite_imports=bool(value.get("rewrite_imports", False)),
        name=value.get("name"),
        file=value.get("file"),
        minify=bool(value.get("minify", False)),
        extra=MappingProxyType(
            {k: v for k, v in value.items() if k not in FORMAT_FIELDS}
        ),
    )


def _build_options(merged: dict[str, Any]) -> BuildOptions:
    entry = merged.get("entry")
    if entry is None:
        entries: tuple[str, ...] = ()
    elif isinstance(entry, str):
        entries = (entry,)
    else:
        entries = tuple(entry)

    stylesheet = merged.get("stylesheet")
    if stylesheet is True:
        stylesheet = {}
    elif stylesheet is False:
        stylesheet = None

    return BuildOptions(
        entry=entries,
        esm=_build_format(merged.get("esm")),
        cjs=_build_format(merged.get("cjs")),
        umd=_build_format(merged.get("umd")),
        target=cast("Target", merged.get("target", DEFAULT_TARGET)),
        browser_files=tuple(merged.get("browser_files", ())),
        node_files=tuple(merged.get("node_files", ())),
        node_version=merged.get("node_version"),
        stylesheet=None if stylesheet is None else MappingProxyType(dict(stylesheet)),
        disable_type_check=bool(merged.get("disable_type_check", False)),
        runtime_helpers=bool(merged.get("runtime_helpers", False)),
        extra_transforms=tuple(merged.get("extra_transforms", ())),
        file=merged.get("file"),
        raw=MappingProxyType(merged),
    )


def resolve_build_options(
    ctx: WorkingContext,
    root_config: Mapping[str, Any],
    cli_args: Mapping[str, Any],
    *,
    variants: list[dict[str, Any]] | None = None,
    config_path: Path | None = None,
    strict: bool | None = None,
) -> list[BuildOptions]:
    """Resolve one BuildOptions per config variant of a package.

    Each variant is merged on top of the auto-detected entry and the root
    config, then the CLI arguments are merged on top of that. Every
    variant is validated on its own; the first invalid one raises
    ConfigValidationError.

    ``variants`` and ``config_path`` may be passed when the package config
    has already been loaded; otherwise it is looked up in the package.
    """
    logger = get_app_logger()

    if variants is None:
        config_path, variants = load_package_config(ctx.package_path)

    source = (
        shorten_path_for_display(config_path, cwd=ctx.root_path)
        if config_path is not None
        else "command line options"
    )

    defaults: dict[str, Any] = {}
    entry = detect_entry(ctx.package_path)
    if entry is not None:
        defaults["entry"] = entry

    root_layer = normalize_formats(
        {k: v for k, v in root_config.items() if k not in ROOT_ONLY_KEYS}
    )
    cli_layer = normalize_formats(cli_args)

    resolved: list[BuildOptions] = []
    for index, variant in enumerate(variants):
        merged = defaults
        for layer in (root_layer, normalize_formats(variant), cli_layer):
            merged = deep_merge(merged, layer)
        merged = apply_default_strategies(merged)
        logger.trace(f"[resolve_build_options] variant {index}: {merged}")

        report_validation(validate_config(merged, strict=strict), source)

        for key in ROOT_ONLY_KEYS | {"builds", "strict_config", "log_level"}:
            merged.pop(key, None)
        resolved.append(_build_options(merged))

    return resolved


def _is_typescript_file(path: str) -> bool:
    return path.endswith((".ts", ".tsx"))


def validate_build_options(options: BuildOptions, ctx: WorkingContext) -> None:
    """Cross-field checks that a schema cannot express.

    Runs before anything is written for the variant.
    """
    logger = get_app_logger()

    if options.runtime_helpers:
        manifest = load_manifest(ctx.package_path, MANIFEST_FILE) or {}
        dependencies = manifest.get("dependencies") or {}
        if RUNTIME_HELPERS_DEPENDENCY not in dependencies:
            xmsg = (
                f"{RUNTIME_HELPERS_DEPENDENCY} dependency is required"
                " to use runtime_helpers"
            )
            raise MissingDependencyError(xmsg)

    if options.cjs is not None and options.cjs.lazy and options.cjs.is_bundle:
        xmsg = "cjs.lazy is not supported with the 'bundle' strategy"
        raise ConfigConflictError(xmsg)

    if not options.formats:
        xmsg = (
            "None of the formats cjs | esm | umd is configured;"
            " add at least one to the config file or the command line."
        )
        raise NoFormatConfiguredError(xmsg)

    bundled = [name for name, fmt in options.formats.items() if fmt.is_bundle]
    if bundled and not options.entry:
        xmsg = (
            f"`entry` is required to bundle {', '.join(bundled)};"
            " no default entry was found"
        )
        raise ConfigValidationError([xmsg])

    if any(_is_typescript_file(e) for e in options.entry) and find_tsconfig(ctx) is None:
        logger.info(
            "Project uses typescript but %s does not exist. Using default config.",
            TSCONFIG_FILE,
        )


# --------------------------------------------------------------------------- #
# compiler options
# --------------------------------------------------------------------------- #


def find_tsconfig(ctx: WorkingContext) -> Path | None:
    """Return the tsconfig of the package, else the one at the root."""
    for base in (ctx.package_path, ctx.root_path):
        candidate = base / TSCONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def resolve_compiler_options(ctx: WorkingContext) -> dict[str, Any]:
    """Compiler options for the type checker.

    Read from the package tsconfig, then the root tsconfig, then the
    built-in defaults. A tsconfig that cannot be parsed counts as empty.
    """
    logger = get_app_logger()
    tsconfig = find_tsconfig(ctx)
    if tsconfig is None:
        return dict(DEFAULT_COMPILER_OPTIONS)

    try:
        data = load_jsonc(tsconfig)
    except ValueError as e:
        logger.warning("Ignoring unreadable %s: %s", tsconfig, e)
        return {}
    if not isinstance(data, dict):
        return {}
    options = data.get("compilerOptions")
    return dict(options) if isinstance(options, dict) else {}


# --------------------------------------------------------------------------- #
# runtime settings
# --------------------------------------------------------------------------- #


def resolve_watch_interval(
    settings: Mapping[str, Any],
    env: Mapping[str, str] | None = None,
) -> float:
    """Polling interval: env → config ``watch_interval`` → default."""
    logger = get_app_logger()
    env = os.environ if env is None else env
    env_key = f"{PROGRAM_ENV}_{DEFAULT_ENV_WATCH_INTERVAL}"
    env_watch = env.get(env_key)
    if env_watch is not None:
        try:
            watch_interval = float(env_watch)
        except ValueError:
            logger.warning("Invalid %s=%r, using default.", env_key, env_watch)
            watch_interval = DEFAULT_WATCH_INTERVAL
    else:
        watch_interval = float(settings.get("watch_interval", DEFAULT_WATCH_INTERVAL))

    logger.trace(f"[resolve_watch_interval] Watch interval resolved to {watch_interval}s")
    return watch_interval
