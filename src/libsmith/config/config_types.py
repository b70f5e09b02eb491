# src/libsmith/config/config_types.py


from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, TypedDict, Union

from typing_extensions import NotRequired

from libsmith.constants import FORMAT_ORDER


ModuleFormat = Literal["esm", "cjs", "umd"]
Strategy = Literal["bundle", "per-file"]
Target = Literal["browser", "node"]


# --- raw (user-facing) config shapes ----------------------------------------


class ToolConfig(TypedDict, total=False):
    command: str  # executable name
    args: list[str]  # replaces the default arguments
    path: str  # custom executable path
    options: list[str]  # appended after args


class FormatConfig(TypedDict, total=False):
    strategy: str  # "bundle" | "per-file" (aliases: rollup, babel)
    type: str  # alias of strategy
    lazy: bool  # cjs only: lazy-require transform
    rewrite_imports: bool  # esm only: rewrite cross-package lib/ imports to es/
    name: str  # umd only: global name
    file: str  # bundle output base name
    minify: bool


# esm: "rollup" | True | {...}
FormatValue = Union[str, bool, FormatConfig, None]


class PackageConfig(TypedDict, total=False):
    entry: str | list[str]
    file: str
    esm: FormatValue
    cjs: FormatValue
    umd: FormatValue
    target: str
    browser_files: list[str]
    node_files: list[str]
    node_version: int | str
    stylesheet: bool | dict[str, Any]
    disable_type_check: bool
    runtime_helpers: bool
    extra_transforms: list[str]
    strict_config: bool
    log_level: str


class RootConfig(PackageConfig, total=False):
    pkgs: list[str]  # explicit monorepo build order
    watch_interval: float
    tools: dict[str, ToolConfig]
    builds: NotRequired[list[PackageConfig]]


# keys that only make sense at the monorepo root
ROOT_ONLY_KEYS: frozenset[str] = frozenset({"pkgs", "watch_interval", "tools"})


# --- resolved shapes ----------------------------------------------------------


@dataclass(frozen=True)
class FormatOptions:
    strategy: Strategy
    lazy: bool = False
    rewrite_imports: bool = False
    name: str | None = None
    file: str | None = None
    minify: bool = False
    extra: MappingProxyType[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def is_bundle(self) -> bool:
        return self.strategy == "bundle"


@dataclass(frozen=True)
class BuildOptions:
    """Resolved configuration for one build variant of one package."""

    entry: tuple[str, ...] = ()
    esm: FormatOptions | None = None
    cjs: FormatOptions | None = None
    umd: FormatOptions | None = None
    target: Target = "browser"
    browser_files: tuple[str, ...] = ()
    node_files: tuple[str, ...] = ()
    node_version: int | str | None = None
    stylesheet: MappingProxyType[str, Any] | None = None
    disable_type_check: bool = False
    runtime_helpers: bool = False
    extra_transforms: tuple[str, ...] = ()
    file: str | None = None
    raw: MappingProxyType[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def format(self, name: str) -> FormatOptions | None:
        if name not in ("esm", "cjs", "umd"):
            xmsg = f"Unknown module format: {name!r}"
            raise KeyError(xmsg)
        value: FormatOptions | None = getattr(self, name)
        return value

    @property
    def formats(self) -> dict[str, FormatOptions]:
        """Configured formats in dispatch order (umd, cjs, esm)."""
        return {
            name: fmt
            for name in FORMAT_ORDER
            if (fmt := self.format(name)) is not None
        }

    @property
    def stylesheet_enabled(self) -> bool:
        return self.stylesheet is not None
