# src/libsmith/__init__.py

"""libsmith: build JavaScript/TypeScript libraries in esm, cjs and umd.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use, custom integrations, or plugins.
Anything prefixed with "_" is considered internal and may change.
The submodules `classify` and `dispatch` keep their own names; import
their functions from `libsmith.classify` and `libsmith.dispatch`.

Highlights:
    - main()                   → CLI entrypoint
    - run_build()              → Build a package or a whole monorepo
    - resolve_build_options()  → Merge defaults, root, package and CLI config
    - build_package()          → Resolve and build every variant of one package
    - get_metadata()           → Retrieve version / commit info
"""

from .actions import get_metadata
from .build import build_package, run_build, run_doc
from .bundle import BundleRunner
from .classify import FileClass, FileRole, FileTask, make_file_task
from .cli import main
from .config import (
    BuildOptions,
    FormatOptions,
    PackageConfig,
    RootConfig,
    find_config,
    load_config,
    parse_config,
    resolve_build_options,
    validate_build_options,
    validate_config,
)
from .constants import (
    CONFIG_FILES,
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_ENV_MONOREPO,
    DEFAULT_ENV_PACKAGE,
    DEFAULT_ENV_WATCH_INTERVAL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STRICT_CONFIG,
    DEFAULT_WATCH_INTERVAL,
)
from .context import WorkingContext
from .errors import (
    BundleError,
    ConfigConflictError,
    ConfigValidationError,
    LibsmithError,
    MissingDependencyError,
    MissingManifestError,
    NoFormatConfiguredError,
    PerFileTransformError,
    ToolError,
)
from .logs import get_app_logger
from .meta import (
    PROGRAM_CONFIG,
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .monorepo import (
    PackageDescriptor,
    discover_packages,
    is_monorepo,
    run_all,
    select_packages,
)
from .tools import Collaborators
from .transform import FileResult, TransformPipeline
from .watch import ChangeEvent, ChangeStream, WatchEngine, WatchSubscription


__all__ = [  # noqa: RUF022
    # actions
    "get_metadata",
    # build
    "build_package",
    "run_build",
    "run_doc",
    # bundle
    "BundleRunner",
    # classify
    "FileClass",
    "FileRole",
    "FileTask",
    "make_file_task",
    # cli
    "main",
    # config
    "BuildOptions",
    "find_config",
    "FormatOptions",
    "load_config",
    "PackageConfig",
    "parse_config",
    "resolve_build_options",
    "RootConfig",
    "validate_build_options",
    "validate_config",
    # constants
    "CONFIG_FILES",
    "DEFAULT_ENV_LOG_LEVEL",
    "DEFAULT_ENV_MONOREPO",
    "DEFAULT_ENV_PACKAGE",
    "DEFAULT_ENV_WATCH_INTERVAL",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_STRICT_CONFIG",
    "DEFAULT_WATCH_INTERVAL",
    # context
    "WorkingContext",
    # errors
    "BundleError",
    "ConfigConflictError",
    "ConfigValidationError",
    "LibsmithError",
    "MissingDependencyError",
    "MissingManifestError",
    "NoFormatConfiguredError",
    "PerFileTransformError",
    "ToolError",
    # logs
    "get_app_logger",
    # meta
    "Metadata",
    "PROGRAM_CONFIG",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    # monorepo
    "discover_packages",
    "is_monorepo",
    "PackageDescriptor",
    "run_all",
    "select_packages",
    # tools
    "Collaborators",
    # transform
    "FileResult",
    "TransformPipeline",
    # watch
    "ChangeEvent",
    "ChangeStream",
    "WatchEngine",
    "WatchSubscription",
]
