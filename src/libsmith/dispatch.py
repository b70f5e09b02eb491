# src/libsmith/dispatch.py

from apathetic_logging import ANSIColors

from .bundle import BundleRunner
from .config.config_types import BuildOptions
from .constants import BUNDLE_DIR
from .context import WorkingContext
from .logs import BuildLogger, get_build_logger
from .transform import TransformPipeline, clean_dir, collect_source_files, output_dir


def dispatch(
    options: BuildOptions,
    ctx: WorkingContext,
    *,
    pipeline: TransformPipeline,
    bundler: BundleRunner,
    logger: BuildLogger | None = None,
) -> list[str]:
    """Build every configured format of one variant, umd → cjs → esm.

    Each format is finished (directory cleaned, files written) before the
    next one starts. A BundleError aborts the remaining formats.

    Returns the per-file formats, which are the ones watch mode keeps
    up to date.
    """
    logger = logger or get_build_logger(ctx.package_name)
    per_file_formats: list[str] = []

    # dist/ is cleaned for every variant, bundled or not
    logger.info(logger.colorize(f"Clean {BUNDLE_DIR} directory", ANSIColors.GRAY))
    clean_dir(ctx.package_path / BUNDLE_DIR)

    for name, fmt in options.formats.items():
        if fmt.is_bundle:
            logger.info("Build %s with %s", name, fmt.strategy)
            bundler.run(options, name)
            continue

        target = output_dir(ctx, name)
        logger.info("Build %s with %s", name, fmt.strategy)
        logger.info(logger.colorize(f"Clean {target.name} directory", ANSIColors.GRAY))
        clean_dir(target)
        pipeline.run(collect_source_files(ctx, options), options, name)
        per_file_formats.append(name)

    return per_file_formats
