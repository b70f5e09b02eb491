# src/libsmith/config/__init__.py

"""Configuration handling for libsmith.

This module provides configuration loading, parsing, validation, and resolution.
"""

from .config_loader import find_config, load_config, parse_config
from .config_resolve import (
    apply_default_strategies,
    deep_merge,
    detect_entry,
    find_tsconfig,
    load_package_config,
    load_root_config,
    normalize_format,
    normalize_formats,
    resolve_build_options,
    resolve_compiler_options,
    resolve_watch_interval,
    validate_build_options,
)
from .config_types import (
    ROOT_ONLY_KEYS,
    BuildOptions,
    FormatConfig,
    FormatOptions,
    ModuleFormat,
    PackageConfig,
    RootConfig,
    Strategy,
    Target,
    ToolConfig,
)
from .config_validate import ValidationSummary, report_validation, validate_config


__all__ = [  # noqa: RUF022
    # config_loader
    "find_config",
    "load_config",
    "parse_config",
    # config_resolve
    "apply_default_strategies",
    "deep_merge",
    "detect_entry",
    "find_tsconfig",
    "load_package_config",
    "load_root_config",
    "normalize_format",
    "normalize_formats",
    "resolve_build_options",
    "resolve_compiler_options",
    "resolve_watch_interval",
    "validate_build_options",
    # config_types
    "ROOT_ONLY_KEYS",
    "BuildOptions",
    "FormatConfig",
    "FormatOptions",
    "ModuleFormat",
    "PackageConfig",
    "RootConfig",
    "Strategy",
    "Target",
    "ToolConfig",
    # config_validate
    "ValidationSummary",
    "report_validation",
    "validate_config",
]
