# src/libsmith/watch.py
"""Incremental rebuilds of the per-file formats.

Changes are found by polling modification times. The stream of changes is
an iterator that never ends on its own; closing it (Ctrl+C, or ``close()``)
ends the iteration for good.
"""

import time
from collections import deque
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .classify import is_excluded_source, make_file_task
from .config.config_types import BuildOptions
from .constants import DEFAULT_WATCH_INTERVAL
from .context import WorkingContext
from .logs import BuildLogger, get_app_logger, get_build_logger
from .transform import FileResult, TransformPipeline
from .utils import shorten_path_for_display
from .utils_logs import MAGENTA


class WatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"  # initial full pass
    WATCHING = "watching"


@dataclass(eq=False)
class WatchSubscription:
    """The source tree of one package build and what to rebuild in it."""

    ctx: WorkingContext
    options: BuildOptions
    formats: tuple[str, ...]
    pipeline: TransformPipeline
    logger: BuildLogger
    snapshot: dict[Path, float] = field(default_factory=dict)

    def scan(self) -> dict[Path, float]:
        """Current mtimes of every watched file."""
        source_root = self.ctx.source_path
        if not source_root.is_dir():
            return {}
        mtimes: dict[Path, float] = {}
        for path in source_root.rglob("*"):
            rel_path = path.relative_to(source_root).as_posix()
            if is_excluded_source(rel_path):
                continue
            try:
                if path.is_file():
                    mtimes[path] = path.stat().st_mtime
            except FileNotFoundError:
                # removed between listing and stat
                continue
        return mtimes


@dataclass(frozen=True)
class ChangeEvent:
    kind: str  # "add" | "change" | "unlink"
    path: Path
    subscription: WatchSubscription


class ChangeStream:
    """Lazy, endless stream of ChangeEvents for a set of subscriptions."""

    def __init__(
        self,
        *,
        interval: float = DEFAULT_WATCH_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.interval = interval
        self._sleep = sleep
        self._subscriptions: list[WatchSubscription] = []
        self._pending: deque[ChangeEvent] = deque()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriptions(self) -> list[WatchSubscription]:
        return list(self._subscriptions)

    def subscribe(self, subscription: WatchSubscription) -> None:
        """Start watching; anything that changed before this is not reported."""
        if self._closed:
            xmsg = "Cannot subscribe to a closed change stream"
            raise RuntimeError(xmsg)
        subscription.snapshot = subscription.scan()
        self._subscriptions.append(subscription)

    def poll(self) -> list[ChangeEvent]:
        """Compare every subscription against its snapshot once."""
        if self._closed:
            return []
        events: list[ChangeEvent] = []
        for sub in self._subscriptions:
            current = sub.scan()
            for path, mtime in sorted(current.items()):
                old = sub.snapshot.get(path)
                if old is None:
                    events.append(ChangeEvent("add", path, sub))
                elif mtime != old:
                    events.append(ChangeEvent("change", path, sub))
            events.extend(
                ChangeEvent("unlink", path, sub)
                for path in sorted(set(sub.snapshot) - set(current))
            )
            sub.snapshot = current
        return events

    def close(self) -> None:
        """Stop the stream and drop pending events. Safe to call twice."""
        self._closed = True
        self._pending.clear()

    def __iter__(self) -> Iterator[ChangeEvent]:
        return self

    def __next__(self) -> ChangeEvent:
        while not self._closed:
            if self._pending:
                return self._pending.popleft()
            self._sleep(self.interval)
            self._pending.extend(self.poll())
        raise StopIteration


class WatchEngine:
    """Keeps the per-file formats of one or more package builds current."""

    def __init__(
        self,
        *,
        interval: float = DEFAULT_WATCH_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.state = WatchState.IDLE
        self.stream = ChangeStream(interval=interval, sleep=sleep)

    @contextmanager
    def initial_pass(self) -> Iterator[None]:
        """Mark the full build that comes before watching."""
        self.state = WatchState.RUNNING
        try:
            yield
        except BaseException:
            self.state = WatchState.IDLE
            raise

    def subscribe(
        self,
        ctx: WorkingContext,
        options: BuildOptions,
        formats: list[str],
        pipeline: TransformPipeline,
    ) -> WatchSubscription | None:
        """Watch the source tree of one package build.

        Only per-file formats are rebuilt incrementally; with none there is
        nothing to subscribe.
        """
        logger = get_build_logger(ctx.package_name)
        if not formats:
            return None
        subscription = WatchSubscription(
            ctx=ctx,
            options=options,
            formats=tuple(formats),
            pipeline=pipeline,
            logger=logger,
        )
        self.stream.subscribe(subscription)
        rel_src = shorten_path_for_display(ctx.source_path, cwd=ctx.package_path)
        logger.info(logger.colorize(f"Start watching {rel_src} directory...", MAGENTA))
        return subscription

    def handle(self, event: ChangeEvent) -> list[FileResult]:
        """Rebuild the one file behind an event, for every watched format."""
        sub = event.subscription
        rel_path = shorten_path_for_display(event.path, cwd=sub.ctx.package_path)
        sub.logger.info("[%s] %s", event.kind, rel_path)

        if not event.path.exists() or not event.path.is_file():
            return []

        task = make_file_task(
            event.path,
            sub.ctx.source_path,
            disable_type_check=sub.options.disable_type_check,
            stylesheet_enabled=sub.options.stylesheet_enabled,
        )
        if task is None:
            return []
        return [sub.pipeline.run_one(task, sub.options, fmt) for fmt in sub.formats]

    def run(self, *, keep_alive: bool = False) -> None:
        """Handle changes one at a time until interrupted.

        Returns at once when nothing is subscribed, unless ``keep_alive``
        asks to wait for Ctrl+C anyway (a bundler watching on its own).
        """
        logger = get_app_logger()
        if not self.stream.subscriptions and not keep_alive:
            logger.info("Nothing to watch: only per-file formats are rebuilt on change.")
            self.close()
            return

        self.state = WatchState.WATCHING
        logger.info(
            "👀 Watching for changes (interval=%.2fs)... Press Ctrl+C to stop.",
            self.stream.interval,
        )
        try:
            for event in self.stream:
                self.handle(event)
        except KeyboardInterrupt:
            logger.info("\n🛑 Watch stopped.")
        finally:
            self.close()

    def close(self) -> None:
        self.stream.close()
        self.state = WatchState.IDLE
