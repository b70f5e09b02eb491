# src/libsmith/transform.py
"""The per-file pass: each source file is compiled on its own.

The output tree mirrors ``src/`` under ``es/`` (esm) or ``lib/`` (cjs).
One failing file is reported and skipped; the rest of the batch goes on.
"""

import shutil
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from apathetic_logging import ANSIColors

from .classify import FileRole, FileTask, make_file_task
from .config.config_resolve import resolve_compiler_options
from .config.config_types import BuildOptions
from .constants import DEFAULT_NODE_VERSION, OUTPUT_DIRS
from .context import WorkingContext
from .errors import PerFileTransformError
from .logs import BuildLogger, get_build_logger
from .tools import StylesheetConverter, TransformOptions, Transformer, TypeChecker
from .utils import matches_any, plural, to_posix_rel
from .utils_logs import BLUE


@dataclass(frozen=True)
class FileResult:
    """Outcome of one FileTask: an output path or the error that stopped it."""

    task: FileTask
    output_path: Path | None = None
    error: PerFileTransformError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def output_dir(ctx: WorkingContext, module_format: str) -> Path:
    return ctx.package_path / OUTPUT_DIRS[module_format]


def collect_source_files(ctx: WorkingContext, options: BuildOptions) -> list[FileTask]:
    """Every compilable file under src/, in a stable order."""
    source_root = ctx.source_path
    if not source_root.is_dir():
        return []
    tasks: list[FileTask] = []
    for path in sorted(source_root.rglob("*")):
        if not path.is_file():
            continue
        task = make_file_task(
            path,
            source_root,
            disable_type_check=options.disable_type_check,
            stylesheet_enabled=options.stylesheet_enabled,
        )
        if task is not None:
            tasks.append(task)
    return tasks


def is_browser_file(rel_path: str, options: BuildOptions) -> bool:
    """Runtime of one file: explicit globs first, then the package target."""
    if options.node_files and matches_any(rel_path, options.node_files):
        return False
    if options.browser_files and matches_any(rel_path, options.browser_files):
        return True
    return options.target == "browser"


def build_transform_options(
    rel_path: str,
    options: BuildOptions,
    module_format: str,
) -> TransformOptions:
    """Transformer settings for one file (``rel_path`` is package relative)."""
    fmt = options.format(module_format)
    return TransformOptions(
        module_format=module_format,
        is_browser=is_browser_file(rel_path, options),
        node_version=(
            options.node_version
            if options.node_version is not None
            else DEFAULT_NODE_VERSION
        ),
        runtime_helpers=options.runtime_helpers,
        lazy=bool(module_format == "cjs" and fmt is not None and fmt.lazy),
        # the rewrite only makes sense for the es/ tree
        rewrite_imports=bool(
            module_format == "esm" and fmt is not None and fmt.rewrite_imports
        ),
        extra_transforms=options.extra_transforms,
    )


class TransformPipeline:
    """Runs type checking, stylesheet conversion and the source transform."""

    def __init__(
        self,
        ctx: WorkingContext,
        *,
        type_checker: TypeChecker,
        stylesheet: StylesheetConverter,
        transformer: Transformer,
        logger: BuildLogger | None = None,
    ) -> None:
        self.ctx = ctx
        self.type_checker = type_checker
        self.stylesheet = stylesheet
        self.transformer = transformer
        self.logger = logger or get_build_logger(ctx.package_name)
        self._compiler_options: dict[str, Any] | None = None

    @property
    def compiler_options(self) -> dict[str, Any]:
        if self._compiler_options is None:
            self._compiler_options = resolve_compiler_options(self.ctx)
        return self._compiler_options

    def _compile(
        self,
        task: FileTask,
        options: BuildOptions,
        module_format: str,
    ) -> str | bytes:
        rel_path = to_posix_rel(task.path, self.ctx.package_path)

        if task.role is FileRole.ASSET:
            return task.path.read_bytes()

        source = task.path.read_text(encoding="utf-8")

        if task.role is FileRole.STYLESHEET:
            stylesheet_options: Mapping[str, Any] = options.stylesheet or {}
            return self.stylesheet.convert(
                source, options=stylesheet_options, rel_path=rel_path
            )

        if task.role is FileRole.TYPESCRIPT:
            source = self.type_checker.compile(
                source, compiler_options=self.compiler_options, rel_path=rel_path
            )

        transform_options = build_transform_options(rel_path, options, module_format)
        color = ANSIColors.YELLOW if transform_options.is_browser else BLUE
        self.logger.info(
            "Transform to %s for %s",
            module_format,
            self.logger.colorize(rel_path, color),
        )
        return self.transformer.transform(
            source, options=transform_options, filename=str(task.path)
        )

    def run_one(
        self,
        task: FileTask,
        options: BuildOptions,
        module_format: str,
    ) -> FileResult:
        target = output_dir(self.ctx, module_format) / task.output_rel_path
        try:
            output = self._compile(task, options, module_format)
        except Exception as e:  # noqa: BLE001
            error = PerFileTransformError(task.path, e)
            self.logger.error("Compile failed: %s", task.path)
            self.logger.error("%s", e)
            return FileResult(task=task, error=error)

        # nothing is written for a file that failed above
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(output, bytes):
            target.write_bytes(output)
        else:
            target.write_text(output, encoding="utf-8")
        return FileResult(task=task, output_path=target)

    def run(
        self,
        tasks: Iterable[FileTask],
        options: BuildOptions,
        module_format: str,
    ) -> list[FileResult]:
        """Compile every task for one format, in order."""
        results = [self.run_one(task, options, module_format) for task in tasks]
        failed = [r for r in results if not r.ok]
        if failed:
            self.logger.warning(
                "%d file%s failed to compile for %s",
                len(failed),
                plural(failed),
                module_format,
            )
        return results


def clean_dir(path: Path) -> None:
    """Remove an output directory and everything under it."""
    if path.exists():
        shutil.rmtree(path)
