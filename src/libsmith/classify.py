# src/libsmith/classify.py
"""Decide what happens to each file of a package source tree."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from .constants import SCRIPT_EXTENSION, STYLESHEET_OUTPUT_EXTENSION


class FileRole(str, Enum):
    EXCLUDED = "excluded"
    TYPESCRIPT = "typescript"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"
    ASSET = "asset"


# directories never compiled, at any depth below src/
EXCLUDED_DIRS: frozenset[str] = frozenset({"fixtures", "__test__"})
EXCLUDED_EXTENSIONS: frozenset[str] = frozenset({".mdx"})
# foo.test.ts, foo.e2e.jsx, foo.spec.js ...
TEST_FILE_RE = re.compile(r"\.(test|e2e|spec)\.(js|jsx|ts|tsx)$")
DECLARATION_SUFFIX = ".d.ts"

TYPESCRIPT_EXTENSIONS: frozenset[str] = frozenset({".ts", ".tsx"})
STYLESHEET_EXTENSIONS: frozenset[str] = frozenset({".less"})
SCRIPT_EXTENSIONS: frozenset[str] = frozenset({".js", ".jsx"})


@dataclass(frozen=True)
class FileClass:
    role: FileRole
    transform: bool  # goes through the source transformer

    @property
    def excluded(self) -> bool:
        return self.role is FileRole.EXCLUDED


@dataclass(frozen=True)
class FileTask:
    """One source file scheduled for the per-file pipeline."""

    path: Path  # absolute
    rel_path: str  # posix, relative to src/
    role: FileRole
    transform: bool
    output_rel_path: str  # posix, relative to the format output dir


EXCLUDED = FileClass(FileRole.EXCLUDED, transform=False)


def is_excluded_source(rel_path: str) -> bool:
    """True for tests, fixtures and docs that never reach the output."""
    posix = PurePosixPath(rel_path)
    if EXCLUDED_DIRS.intersection(posix.parts[:-1]):
        return True
    if posix.suffix in EXCLUDED_EXTENSIONS:
        return True
    return bool(TEST_FILE_RE.search(posix.name))


def classify(
    rel_path: str,
    *,
    disable_type_check: bool = False,
    stylesheet_enabled: bool = False,
) -> FileClass:
    """Classify one path relative to the package src/ directory.

    Exclusions win over every extension rule. TypeScript files are lowered
    by the type checker and then transformed like any script; with type
    checking disabled the transformer handles them directly. Declaration
    files are never compiled.
    """
    if is_excluded_source(rel_path):
        return EXCLUDED

    name = PurePosixPath(rel_path).name
    suffix = PurePosixPath(rel_path).suffix
    if name.endswith(DECLARATION_SUFFIX):
        return FileClass(FileRole.ASSET, transform=False)

    if suffix in TYPESCRIPT_EXTENSIONS:
        if disable_type_check:
            return FileClass(FileRole.SCRIPT, transform=True)
        return FileClass(FileRole.TYPESCRIPT, transform=True)

    if suffix in STYLESHEET_EXTENSIONS and stylesheet_enabled:
        return FileClass(FileRole.STYLESHEET, transform=False)

    if suffix in SCRIPT_EXTENSIONS:
        return FileClass(FileRole.SCRIPT, transform=True)

    return FileClass(FileRole.ASSET, transform=False)


def output_relpath(rel_path: str, file_class: FileClass) -> str:
    """Output path of a file: every transformed script ends in ``.js``."""
    posix = PurePosixPath(rel_path)
    if file_class.transform:
        return posix.with_suffix(SCRIPT_EXTENSION).as_posix()
    if file_class.role is FileRole.STYLESHEET:
        return posix.with_suffix(STYLESHEET_OUTPUT_EXTENSION).as_posix()
    return posix.as_posix()


def make_file_task(
    path: Path,
    source_root: Path,
    *,
    disable_type_check: bool = False,
    stylesheet_enabled: bool = False,
) -> FileTask | None:
    """Build the FileTask of one file, or None when it is excluded."""
    rel_path = path.relative_to(source_root).as_posix()
    file_class = classify(
        rel_path,
        disable_type_check=disable_type_check,
        stylesheet_enabled=stylesheet_enabled,
    )
    if file_class.excluded:
        return None
    return FileTask(
        path=path,
        rel_path=rel_path,
        role=file_class.role,
        transform=file_class.transform,
        output_rel_path=output_relpath(rel_path, file_class),
    )
