# src/libsmith/monorepo.py
"""Build every package of a monorepo, one after another."""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config.config_types import BuildOptions
from .constants import (
    DEFAULT_ENV_MONOREPO,
    DEFAULT_ENV_PACKAGE,
    MANIFEST_FILE,
    MONOREPO_DISABLED_VALUE,
    MONOREPO_MANIFEST_FILE,
    PACKAGES_DIR,
    SCOPE_PREFIX,
)
from .context import WorkingContext
from .errors import MissingManifestError
from .logs import get_app_logger
from .meta import PROGRAM_ENV


@dataclass
class PackageDescriptor:
    name: str  # with its scope, e.g. "@scope/ui"
    path: Path
    options: list[BuildOptions] = field(default_factory=list)


def _env_value(env: Mapping[str, str], key: str) -> str | None:
    """Program-prefixed variable first, then the bare name."""
    for name in (f"{PROGRAM_ENV}_{key}", key):
        value = env.get(name)
        if value:
            return value
    return None


def is_monorepo(root_path: Path, env: Mapping[str, str] | None = None) -> bool:
    """A root with a lerna.json, unless LERNA=none turns detection off."""
    env = os.environ if env is None else env
    if not (root_path / MONOREPO_MANIFEST_FILE).is_file():
        return False
    override = _env_value(env, DEFAULT_ENV_MONOREPO)
    return not (override and override.lower() == MONOREPO_DISABLED_VALUE)


def discover_packages(root_path: Path, root_config: Mapping[str, Any]) -> list[str]:
    """Names of the buildable packages, in build order.

    The ``pkgs`` key of the root config replaces directory discovery (and
    sets the order). A scope directory (``@scope``) stands for each of its
    subdirectories. Entries that are not directories are skipped.
    """
    logger = get_app_logger()
    packages_dir = root_path / PACKAGES_DIR

    pkgs = root_config.get("pkgs")
    if pkgs:
        names = list(pkgs)
    elif packages_dir.is_dir():
        names = sorted(p.name for p in packages_dir.iterdir())
    else:
        logger.warning("No %s directory in %s", PACKAGES_DIR, root_path)
        names = []

    expanded: list[str] = []
    for name in names:
        pkg_path = packages_dir / name
        if not pkg_path.is_dir():
            logger.trace(f"[discover_packages] skipping {name} (not a directory)")
            continue
        if name.startswith(SCOPE_PREFIX) and "/" not in name:
            expanded.extend(
                f"{name}/{sub.name}"
                for sub in sorted(pkg_path.iterdir())
                if sub.is_dir()
            )
        else:
            expanded.append(name)
    return expanded


def select_packages(
    names: list[str], env: Mapping[str, str] | None = None
) -> list[str]:
    """Keep only the package named by LIBSMITH_PACKAGE / PACKAGE, if set."""
    env = os.environ if env is None else env
    only = _env_value(env, DEFAULT_ENV_PACKAGE)
    if not only:
        return names
    selected = [n for n in names if n == only]
    if not selected:
        get_app_logger().warning("Package %s not found in %s", only, PACKAGES_DIR)
    return selected


def run_all(
    root_path: Path,
    root_config: Mapping[str, Any],
    build: Callable[[WorkingContext], list[BuildOptions]],
    *,
    watch: bool = False,
    env: Mapping[str, str] | None = None,
) -> list[PackageDescriptor]:
    """Build the selected packages in order; the first failure stops the run.

    Every package builds with the monorepo root as its root and its own
    directory as cwd.
    """
    logger = get_app_logger()
    root_path = root_path.resolve()
    names = select_packages(discover_packages(root_path, root_config), env)
    logger.debug("Packages to build: %s", ", ".join(names) or "(none)")

    built: list[PackageDescriptor] = []
    for name in names:
        pkg_path = root_path / PACKAGES_DIR / name
        if not (pkg_path / MANIFEST_FILE).is_file():
            xmsg = f"{MANIFEST_FILE} not found in {PACKAGES_DIR}/{name}"
            raise MissingManifestError(xmsg)

        ctx = WorkingContext.for_member(root_path, pkg_path, name, watch=watch)
        descriptor = PackageDescriptor(name=name, path=ctx.package_path)
        descriptor.options = build(ctx)
        built.append(descriptor)
    return built
