# src/libsmith/errors.py
"""Exception types raised by the build pipeline.

Every fatal error derives from a builtin exception that ``cli.main()``
already treats as a controlled termination (ValueError, FileNotFoundError,
RuntimeError). ``PerFileTransformError`` is the only recoverable one: the
transform pipeline records it for the file and moves on.
"""

from pathlib import Path


class LibsmithError(Exception):
    """Mixin marking errors raised by libsmith itself."""

    # exit code returned by main()
    code: int = 1
    # already reported through the logger
    silent: bool = False


class ConfigValidationError(LibsmithError, ValueError):
    """The merged configuration violates one or more schema rules."""

    def __init__(self, violations: list[str], *, source: str | None = None) -> None:
        self.violations = list(violations)
        self.source = source
        where = f" in {source}" if source else ""
        lines = "\n".join(f"{i}. {v}" for i, v in enumerate(self.violations, 1))
        super().__init__(f"Invalid options{where}\n\n{lines}")


class ConfigConflictError(LibsmithError, ValueError):
    """Two options were set that cannot be used together."""


class NoFormatConfiguredError(LibsmithError, ValueError):
    """None of esm, cjs or umd is configured."""


class MissingManifestError(LibsmithError, FileNotFoundError):
    """A monorepo package has no package manifest."""


class MissingDependencyError(LibsmithError, RuntimeError):
    """An option needs a dependency the package manifest does not declare."""


class ToolError(LibsmithError, RuntimeError):
    """An external tool could not be found or exited with an error."""

    def __init__(self, tool: str, message: str, *, output: str = "") -> None:
        self.tool = tool
        self.output = output
        super().__init__(f"{tool}: {message}")


class PerFileTransformError(LibsmithError, RuntimeError):
    """One source file failed to compile. Not fatal for the batch."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Compile failed: {path}\n{cause}")


class BundleError(LibsmithError, RuntimeError):
    """The bundler failed; aborts the remaining formats of the package."""

    def __init__(self, module_format: str, cause: BaseException) -> None:
        self.module_format = module_format
        self.cause = cause
        super().__init__(f"Bundling {module_format} failed: {cause}")
