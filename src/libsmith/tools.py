# src/libsmith/tools.py
"""External compilers used by the build, and how to reach them.

The pipeline only talks to the protocols below. The default implementations
shell out to the matching npm command line tools (through ``npx``), reading
the source on stdin and the result on stdout. Any of them can be pointed at
another executable with the ``tools`` key of the root config.
"""

import json
import os
import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .config.config_types import ToolConfig
from .constants import DEFAULT_TOOLS
from .errors import ToolError
from .logs import get_app_logger
from .meta import PROGRAM_ENV


# --------------------------------------------------------------------------- #
# contracts
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class TransformOptions:
    """Everything the source transformer needs to know about one file."""

    module_format: str  # "esm" | "cjs"
    is_browser: bool
    node_version: int | str | None = None
    runtime_helpers: bool = False
    lazy: bool = False
    rewrite_imports: bool = False
    extra_transforms: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "moduleFormat": self.module_format,
            "target": "browser" if self.is_browser else "node",
            "nodeVersion": self.node_version,
            "runtimeHelpers": self.runtime_helpers,
            "lazy": self.lazy,
            "rewriteImports": self.rewrite_imports,
            "extraTransforms": list(self.extra_transforms),
        }


@dataclass(frozen=True)
class BundleRequest:
    cwd: Path
    module_format: str
    entry: tuple[str, ...]
    output_path: Path
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DocRequest:
    cwd: Path
    mode: str  # "build" | "dev" | "deploy"
    output_path: Path
    config_dir: Path
    port: int | None = None


class TypeChecker(Protocol):
    def compile(
        self, source: str, *, compiler_options: Mapping[str, Any], rel_path: str
    ) -> str: ...


class StylesheetConverter(Protocol):
    def convert(
        self, source: str, *, options: Mapping[str, Any], rel_path: str
    ) -> str: ...


class Transformer(Protocol):
    def transform(
        self, source: str, *, options: TransformOptions, filename: str
    ) -> str: ...


class Bundler(Protocol):
    def bundle(self, request: BundleRequest, *, watch: bool) -> None: ...


class DocGenerator(Protocol):
    def run(self, request: DocRequest) -> None: ...


# --------------------------------------------------------------------------- #
# command execution
# --------------------------------------------------------------------------- #


def find_tool_executable(
    tool_name: str,
    custom_path: str | None = None,
) -> str | None:
    """Find tool executable, checking custom_path first, then PATH."""
    if custom_path:
        path = Path(custom_path)
        if path.exists() and path.is_file():
            return str(path.resolve())
        # If custom path doesn't exist, fall back to PATH

    return shutil.which(tool_name)


@dataclass
class ExternalTool:
    """One configured command line tool."""

    label: str
    command: str
    args: list[str] = field(default_factory=list)
    path: str | None = None
    options: list[str] = field(default_factory=list)

    @classmethod
    def from_config(
        cls,
        label: str,
        tools: Mapping[str, ToolConfig] | None = None,
    ) -> "ExternalTool":
        """Default settings of ``label`` with the user's override applied.

        ``args`` replaces the default arguments, ``options`` is appended.
        """
        settings: dict[str, Any] = dict(DEFAULT_TOOLS.get(label, {}))
        override = dict((tools or {}).get(label) or {})
        settings.update(override)
        return cls(
            label=label,
            command=settings.get("command", label),
            args=list(settings.get("args", [])),
            path=settings.get("path"),
            options=list(settings.get("options", [])),
        )

    def build_command(self, *extra: str) -> list[str]:
        executable = find_tool_executable(self.command, custom_path=self.path)
        if not executable:
            xmsg = f"'{self.command}' not found on PATH"
            raise ToolError(self.label, xmsg)
        return [executable, *self.args, *self.options, *extra]

    def run(
        self,
        *extra: str,
        cwd: Path,
        input_text: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> str:
        """Run the tool to completion and return its stdout."""
        logger = get_app_logger()
        command = self.build_command(*extra)
        logger.trace(f"[{self.label}] {' '.join(command)}")

        full_env = {**os.environ, **env} if env else None
        try:
            result = subprocess.run(  # noqa: S603
                command,
                cwd=cwd,
                input=input_text,
                capture_output=True,
                text=True,
                check=False,
                env=full_env,
            )
        except OSError as e:
            raise ToolError(self.label, str(e)) from e

        if result.returncode != 0:
            xmsg = f"exited with code {result.returncode}"
            raise ToolError(self.label, xmsg, output=result.stderr or result.stdout)
        return result.stdout

    def start(self, *extra: str, cwd: Path) -> subprocess.Popen[str]:
        """Start a long running tool (watch or dev server) without waiting."""
        command = self.build_command(*extra)
        get_app_logger().trace(f"[{self.label}] start: {' '.join(command)}")
        try:
            return subprocess.Popen(command, cwd=cwd, text=True)  # noqa: S603
        except OSError as e:
            raise ToolError(self.label, str(e)) from e


# --------------------------------------------------------------------------- #
# default collaborators
# --------------------------------------------------------------------------- #


@dataclass
class CommandTypeChecker:
    tool: ExternalTool
    cwd: Path

    def compile(
        self, source: str, *, compiler_options: Mapping[str, Any], rel_path: str
    ) -> str:
        tsconfig_raw = json.dumps({"compilerOptions": dict(compiler_options)})
        return self.tool.run(
            f"--sourcefile={rel_path}",
            f"--tsconfig-raw={tsconfig_raw}",
            cwd=self.cwd,
            input_text=source,
        )


@dataclass
class CommandStylesheetConverter:
    tool: ExternalTool
    cwd: Path

    def convert(
        self, source: str, *, options: Mapping[str, Any], rel_path: str
    ) -> str:
        flags = [
            f"--{key}" if value is True else f"--{key}={value}"
            for key, value in options.items()
            if value is not False and value is not None
        ]
        # lessc resolves @import relative to this directory
        include = f"--include-path={(self.cwd / rel_path).parent}"
        return self.tool.run(*flags, include, cwd=self.cwd, input_text=source)


@dataclass
class CommandTransformer:
    tool: ExternalTool
    cwd: Path

    def transform(
        self, source: str, *, options: TransformOptions, filename: str
    ) -> str:
        # a project babel config reads this to pick presets and plugins
        env = {f"{PROGRAM_ENV}_TRANSFORM_OPTIONS": json.dumps(options.to_dict())}
        return self.tool.run(
            "--filename",
            filename,
            cwd=self.cwd,
            input_text=source,
            env=env,
        )


# rollup names the esm format "es"
BUNDLER_FORMATS: dict[str, str] = {"esm": "es", "cjs": "cjs", "umd": "umd"}


@dataclass
class CommandBundler:
    tool: ExternalTool
    watchers: list[subprocess.Popen[str]] = field(default_factory=list)

    def bundle(self, request: BundleRequest, *, watch: bool) -> None:
        args = [
            *(f"--input={entry}" for entry in request.entry),
            f"--format={BUNDLER_FORMATS[request.module_format]}",
            f"--file={request.output_path}",
        ]
        name = request.options.get("name")
        if name:
            args.append(f"--name={name}")
        if watch:
            args.append("--watch")
            self.watchers.append(self.tool.start(*args, cwd=request.cwd))
            return
        self.tool.run(*args, cwd=request.cwd)

    def close(self) -> None:
        for process in self.watchers:
            if process.poll() is None:
                process.terminate()
                process.wait()
        self.watchers.clear()


@dataclass
class CommandDocGenerator:
    tool: ExternalTool
    publisher: ExternalTool | None = None

    def _build(self, request: DocRequest) -> None:
        self.tool.run(
            "build",
            f"--config-dir={request.config_dir}",
            f"--output-dir={request.output_path}",
            cwd=request.cwd,
        )

    def run(self, request: DocRequest) -> None:
        if request.mode == "build":
            self._build(request)
            return

        if request.mode == "deploy":
            self._build(request)
            publisher = self.publisher or ExternalTool.from_config("publisher")
            publisher.run(f"--dist={request.output_path}", cwd=request.cwd)
            get_app_logger().info("Published %s", request.output_path)
            return

        args = [request.mode, f"--config-dir={request.config_dir}"]
        if request.port is not None:
            args.append(f"--port={request.port}")
        process = self.tool.start(*args, cwd=request.cwd)
        try:
            process.wait()
        except KeyboardInterrupt:
            process.terminate()
            process.wait()
            get_app_logger().info("\n🛑 Doc server stopped.")


@dataclass
class Collaborators:
    """The external services one build talks to."""

    type_checker: TypeChecker
    stylesheet: StylesheetConverter
    transformer: Transformer
    bundler: Bundler
    docs: DocGenerator

    @classmethod
    def from_tools(
        cls,
        cwd: Path,
        tools: Mapping[str, ToolConfig] | None = None,
    ) -> "Collaborators":
        return cls(
            type_checker=CommandTypeChecker(
                ExternalTool.from_config("typescript", tools), cwd
            ),
            stylesheet=CommandStylesheetConverter(
                ExternalTool.from_config("stylesheet", tools), cwd
            ),
            transformer=CommandTransformer(
                ExternalTool.from_config("transformer", tools), cwd
            ),
            bundler=CommandBundler(ExternalTool.from_config("bundler", tools)),
            docs=CommandDocGenerator(
                ExternalTool.from_config("docs", tools),
                ExternalTool.from_config("publisher", tools),
            ),
        )

    def close(self) -> None:
        """Stop any background process started by a collaborator."""
        close = getattr(self.bundler, "close", None)
        if callable(close):
            close()
