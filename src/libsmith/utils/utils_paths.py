# src/libsmith/utils/utils_paths.py


from collections.abc import Iterable
from pathlib import Path


def get_exist_file(cwd: Path, candidates: Iterable[str]) -> str | None:
    """Return the first candidate (relative to cwd) that is an existing file."""
    for candidate in candidates:
        if (cwd / candidate).is_file():
            return candidate
    return None


def get_exist_files(cwd: Path, candidates: Iterable[str]) -> list[str]:
    """Return every candidate (relative to cwd) that is an existing file."""
    return [c for c in candidates if (cwd / c).is_file()]


def to_posix_rel(path: Path, root: Path) -> str:
    """Path relative to root with forward slashes (for logs and matching)."""
    return path.relative_to(root).as_posix()


def shorten_path_for_display(path: Path | str, *, cwd: Path | None = None) -> str:
    """Show a path relative to cwd when it lies under it, absolute otherwise."""
    path_obj = Path(path).resolve()
    if cwd is not None:
        try:
            rel = path_obj.relative_to(Path(cwd).resolve()).as_posix()
        except ValueError:
            return str(path_obj)
        return rel or "."
    return str(path_obj)
