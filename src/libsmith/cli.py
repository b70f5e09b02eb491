# src/libsmith/cli.py

import argparse
import platform
import sys
from difflib import get_close_matches
from pathlib import Path
from typing import Any

from apathetic_logging import LEVEL_ORDER, safeLog

from .actions import get_metadata
from .build import run_build, run_doc
from .constants import DEFAULT_DOC_PORT, TARGETS
from .logs import get_app_logger
from .meta import PROGRAM_DISPLAY, PROGRAM_SCRIPT


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])
            # unknown flags of a subcommand are reported by the top parser
            if isinstance(action, argparse._SubParsersAction):  # noqa: SLF001
                for sub in action.choices.values():
                    for sub_action in sub._actions:  # noqa: SLF001
                        known_opts.extend(s for s in sub_action.option_strings if s)

        hint_lines: list[str] = []
        # "unrecognized arguments: --wach ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _add_output_flags(parser: argparse.ArgumentParser) -> None:
    """Verbosity and colour flags, added to every command."""
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )


def _setup_parser() -> HintingArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(prog=PROGRAM_SCRIPT)
    parser.add_argument("--version", action="store_true", help="Show version info.")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    # --- build ---
    build = commands.add_parser(
        "build",
        help="Build the package (or every package of a monorepo).",
    )
    _add_output_flags(build)
    build.add_argument(
        "entry",
        nargs="*",
        metavar="ENTRY",
        help="Entry files (default: src/index.{tsx,ts,jsx,js}).",
    )
    build.add_argument(
        "--esm",
        nargs="?",
        const=True,
        default=None,
        metavar="STRATEGY",
        help="Build esm output; STRATEGY is bundle (rollup) or per-file (babel).",
    )
    build.add_argument(
        "--cjs",
        nargs="?",
        const=True,
        default=None,
        metavar="STRATEGY",
        help="Build cjs output; STRATEGY is bundle (rollup) or per-file (babel).",
    )
    build.add_argument(
        "--umd",
        nargs="?",
        const=True,
        default=None,
        metavar="NAME",
        help="Build a umd bundle, optionally exposed as the global NAME.",
    )
    build.add_argument("--file", help="Output base name of bundles.")
    build.add_argument("--target", choices=sorted(TARGETS), help="Runtime target.")
    build.add_argument(
        "-w",
        "--watch",
        action="store_true",
        help="Rebuild changed files until interrupted (per-file formats).",
    )
    build.add_argument("-c", "--config", help="Path to config file.")

    strict = build.add_mutually_exclusive_group()
    strict.add_argument(
        "--strict",
        dest="strict",
        action="store_const",
        const=True,
        help="Treat unknown config keys as errors (default).",
    )
    strict.add_argument(
        "--no-strict",
        dest="strict",
        action="store_const",
        const=False,
        help="Only warn about unknown config keys.",
    )
    strict.set_defaults(strict=None)

    # --- doc ---
    doc = commands.add_parser("doc", help="Build or serve the documentation site.")
    _add_output_flags(doc)
    doc.add_argument(
        "mode",
        choices=["build", "dev", "deploy"],
        help="Documentation command (deploy builds, then publishes the site).",
    )
    doc.add_argument(
        "--port",
        type=int,
        default=None,
        help=f"Dev server port (default: {DEFAULT_DOC_PORT}).",
    )
    doc.add_argument("-c", "--config", help="Path to config file.")

    return parser


def _build_cli_args(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> dict[str, Any]:
    """Turn build flags into the highest-precedence config layer.

    Only flags that were actually given are included.
    """
    entries: list[str] = list(getattr(args, "entry", None) or [])
    if args.file and len(entries) > 1:
        parser.error("--file cannot be used with multiple entries.")

    cli_args: dict[str, Any] = {}
    if entries:
        cli_args["entry"] = entries[0] if len(entries) == 1 else entries
    for key in ("esm", "cjs", "umd", "file", "target"):
        value = getattr(args, key, None)
        if value is not None:
            cli_args[key] = value
    return cli_args


# --------------------------------------------------------------------------- #
# Main entry helpers
# --------------------------------------------------------------------------- #


def _initialize_logger(args: argparse.Namespace) -> None:
    """Initialize logger with CLI args, env vars, and defaults."""
    logger = get_app_logger()
    log_level = logger.determineLogLevel(args=args)
    logger.setLevel(log_level)
    use_color = getattr(args, "use_color", None)
    logger.enable_color = (
        use_color if use_color is not None else logger.determineColorEnabled()
    )
    logger.trace(f"[BOOT] log-level initialized: {logger.levelName}")

    logger.debug(
        "Runtime: Python %s (%s)\n    %s",
        platform.python_version(),
        platform.python_implementation(),
        sys.version.replace("\n", " "),
    )


def _handle_early_exits(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int | None:
    """Returns exit code if we should exit early, None otherwise."""
    logger = get_app_logger()

    # --- Version flag ---
    if getattr(args, "version", None):
        meta = get_metadata()
        logger.info("%s %s (%s)", PROGRAM_DISPLAY, meta.version, meta.commit)
        return 0

    if not getattr(args, "command", None):
        parser.print_help(sys.stderr)
        return 2

    return None


def main(argv: list[str] | None = None) -> int:
    logger = get_app_logger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- Early runtime init (use CLI + env + defaults) ---
        _initialize_logger(args)

        early_exit_code = _handle_early_exits(args, parser)
        if early_exit_code is not None:
            return early_exit_code

        cwd = Path.cwd().resolve()
        logger.debug("Invoked from: %s", cwd)

        if args.command == "doc":
            run_doc(cwd, args.mode, port=args.port, config=args.config)
            return 0

        cli_args = _build_cli_args(args, parser)
        run_build(
            cwd,
            cli_args,
            watch=args.watch,
            config=args.config,
            strict=args.strict,
            log_level=args.log_level,
        )

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        silent = getattr(e, "silent", False)
        if not silent:
            try:
                logger.errorIfNotDebug(str(e))
            except Exception:  # noqa: BLE001
                safeLog(f"[FATAL] Logging failed while reporting: {e}")
        return getattr(e, "code", 1)

    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        return 130

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.criticalIfNotDebug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safeLog(f"[FATAL] Logging failed while reporting: {e}")

        return getattr(e, "code", 1)

    else:
        return 0
