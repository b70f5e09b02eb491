# src/libsmith/bundle.py
"""The whole-bundle pass: one bundler call per format."""

from pathlib import Path, PurePosixPath

from .config.config_types import BuildOptions
from .constants import BUNDLE_DIR
from .context import WorkingContext
from .errors import BundleError
from .logs import BuildLogger, get_build_logger
from .tools import Bundler, BundleRequest


# dist/<name><suffix>
BUNDLE_SUFFIXES: dict[str, str] = {
    "esm": ".esm.js",
    "cjs": ".js",
    "umd": ".umd.js",
}
MINIFIED_SUFFIXES: dict[str, str] = {
    "esm": ".esm.min.js",
    "cjs": ".min.js",
    "umd": ".umd.min.js",
}
DEFAULT_BUNDLE_NAME = "index"


def bundle_output_path(
    ctx: WorkingContext, options: BuildOptions, module_format: str
) -> Path:
    fmt = options.format(module_format)
    name = (fmt.file if fmt else None) or options.file
    if not name:
        # dist/<entry basename>, or index for several entries
        name = (
            PurePosixPath(options.entry[0]).stem
            if len(options.entry) == 1
            else DEFAULT_BUNDLE_NAME
        )
    suffixes = MINIFIED_SUFFIXES if fmt and fmt.minify else BUNDLE_SUFFIXES
    return ctx.package_path / BUNDLE_DIR / f"{name}{suffixes[module_format]}"


class BundleRunner:
    def __init__(
        self,
        ctx: WorkingContext,
        bundler: Bundler,
        *,
        logger: BuildLogger | None = None,
    ) -> None:
        self.ctx = ctx
        self.bundler = bundler
        self.logger = logger or get_build_logger(ctx.package_name)

    def run(self, options: BuildOptions, module_format: str) -> Path:
        """Bundle one format; a bundler failure raises BundleError."""
        fmt = options.format(module_format)
        extra = dict(fmt.extra) if fmt else {}
        if fmt is not None and fmt.name:
            extra["name"] = fmt.name
        if fmt is not None and fmt.minify:
            extra["minify"] = True

        output_path = bundle_output_path(self.ctx, options, module_format)
        request = BundleRequest(
            cwd=self.ctx.cwd,
            module_format=module_format,
            entry=options.entry,
            output_path=output_path,
            options={**options.raw, **extra},
        )
        try:
            self.bundler.bundle(request, watch=self.ctx.watch)
        except Exception as e:
            raise BundleError(module_format, e) from e
        return output_path
