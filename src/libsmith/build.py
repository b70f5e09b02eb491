# src/libsmith/build.py
"""Entry points that tie config resolution, dispatch and watching together."""

import argparse
import os
import time
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager, nullcontext
from pathlib import Path
from typing import Any

from .bundle import BundleRunner
from .config import (
    BuildOptions,
    ToolConfig,
    load_package_config,
    load_root_config,
    resolve_build_options,
    resolve_watch_interval,
    validate_build_options,
)
from .constants import DEFAULT_DOC_CONFIG_DIR, DEFAULT_DOC_DIR, DEFAULT_DOC_PORT
from .context import WorkingContext
from .dispatch import dispatch
from .logs import get_app_logger, get_build_logger
from .monorepo import is_monorepo, run_all
from .tools import Collaborators, DocRequest
from .transform import TransformPipeline
from .watch import WatchEngine


CollaboratorFactory = Callable[
    [WorkingContext, Mapping[str, ToolConfig] | None], Collaborators
]


def default_collaborators(
    ctx: WorkingContext, tools: Mapping[str, ToolConfig] | None
) -> Collaborators:
    return Collaborators.from_tools(ctx.cwd, tools)


def build_package(
    ctx: WorkingContext,
    root_config: Mapping[str, Any],
    cli_args: Mapping[str, Any],
    *,
    collaborators: Collaborators,
    engine: WatchEngine | None = None,
    variants: list[dict[str, Any]] | None = None,
    config_path: Path | None = None,
    strict: bool | None = None,
) -> list[BuildOptions]:
    """Resolve, check and build every variant of one package.

    All variants are checked before anything is written. With an engine
    and ``ctx.watch`` set, the per-file formats are subscribed afterwards.
    """
    logger = get_build_logger(ctx.package_name)
    options_list = resolve_build_options(
        ctx,
        root_config,
        cli_args,
        variants=variants,
        config_path=config_path,
        strict=strict,
    )
    for options in options_list:
        validate_build_options(options, ctx)

    pipeline = TransformPipeline(
        ctx,
        type_checker=collaborators.type_checker,
        stylesheet=collaborators.stylesheet,
        transformer=collaborators.transformer,
        logger=logger,
    )
    bundler = BundleRunner(ctx, collaborators.bundler, logger=logger)

    for options in options_list:
        per_file_formats = dispatch(
            options, ctx, pipeline=pipeline, bundler=bundler, logger=logger
        )
        if engine is not None and ctx.watch:
            engine.subscribe(ctx, options, per_file_formats, pipeline)
    return options_list


def _apply_log_level(log_level: str | None, settings: Mapping[str, Any]) -> None:
    logger = get_app_logger()
    level = logger.determineLogLevel(
        args=argparse.Namespace(log_level=log_level),
        root_log_level=settings.get("log_level"),
    )
    logger.setLevel(level)


def _initial_pass(engine: WatchEngine | None) -> AbstractContextManager[None]:
    return engine.initial_pass() if engine is not None else nullcontext()


def _bundles_anything(built: list[BuildOptions]) -> bool:
    return any(fmt.is_bundle for o in built for fmt in o.formats.values())


def run_build(
    cwd: Path,
    cli_args: Mapping[str, Any],
    *,
    watch: bool = False,
    config: str | Path | None = None,
    strict: bool | None = None,
    log_level: str | None = None,
    env: Mapping[str, str] | None = None,
    make_collaborators: CollaboratorFactory = default_collaborators,
    sleep: Callable[[float], None] = time.sleep,
) -> list[BuildOptions]:
    """Build the package at ``cwd``, or every package when it is a monorepo.

    Returns the resolved options of everything that was built. In watch
    mode this only returns once watching stops.
    """
    logger = get_app_logger()
    root = cwd.resolve()
    env = os.environ if env is None else env
    opened: list[Collaborators] = []

    def _collaborators(
        ctx: WorkingContext, tools: Mapping[str, ToolConfig] | None
    ) -> Collaborators:
        collaborators = make_collaborators(ctx, tools)
        opened.append(collaborators)
        return collaborators

    built: list[BuildOptions] = []
    try:
        if is_monorepo(root, env):
            _root_path, root_config = load_root_config(root, explicit=config)
            _apply_log_level(log_level, root_config)
            engine = (
                WatchEngine(
                    interval=resolve_watch_interval(root_config, env), sleep=sleep
                )
                if watch
                else None
            )
            tools = root_config.get("tools")

            def _build_member(ctx: WorkingContext) -> list[BuildOptions]:
                return build_package(
                    ctx,
                    root_config,
                    cli_args,
                    collaborators=_collaborators(ctx, tools),
                    engine=engine,
                    strict=strict,
                )

            logger.debug("Monorepo detected at %s", root)
            with _initial_pass(engine):
                packages = run_all(
                    root, root_config, _build_member, watch=watch, env=env
                )
            built = [o for pkg in packages for o in pkg.options]
        else:
            config_path, variants = load_package_config(root, explicit=config)
            settings = variants[0]
            _apply_log_level(log_level, settings)
            engine = (
                WatchEngine(
                    interval=resolve_watch_interval(settings, env), sleep=sleep
                )
                if watch
                else None
            )
            ctx = WorkingContext.for_package(root, watch=watch)
            collaborators = _collaborators(ctx, settings.get("tools"))
            with _initial_pass(engine):
                built = build_package(
                    ctx,
                    {},
                    cli_args,
                    collaborators=collaborators,
                    engine=engine,
                    variants=variants,
                    config_path=config_path,
                    strict=strict,
                )

        if engine is not None:
            engine.run(keep_alive=_bundles_anything(built))
    finally:
        for collaborators in opened:
            collaborators.close()

    return built


def run_doc(
    cwd: Path,
    mode: str,
    *,
    port: int | None = None,
    config: str | Path | None = None,
    make_collaborators: CollaboratorFactory = default_collaborators,
) -> None:
    """Build the documentation site, or serve it in dev mode."""
    logger = get_app_logger()
    root = cwd.resolve()
    _config_path, variants = load_package_config(root, explicit=config)
    ctx = WorkingContext.for_package(root)
    collaborators = make_collaborators(ctx, variants[0].get("tools"))

    request = DocRequest(
        cwd=root,
        mode=mode,
        output_path=root / DEFAULT_DOC_DIR,
        config_dir=root / DEFAULT_DOC_CONFIG_DIR,
        port=(port or DEFAULT_DOC_PORT) if mode == "dev" else None,
    )
    logger.info("Running docs %s in %s", mode, root)
    try:
        collaborators.docs.run(request)
    finally:
        collaborators.close()
