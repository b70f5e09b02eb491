# src/libsmith/context.py

from dataclasses import dataclass
from pathlib import Path

from .constants import SOURCE_DIR


@dataclass(frozen=True)
class WorkingContext:
    """Where a package build happens.

    Passed explicitly to every step instead of changing the process
    working directory, so nothing depends on ``os.getcwd()``.
    """

    root_path: Path  # monorepo root, or the package itself
    package_path: Path
    cwd: Path
    package_name: str | None = None  # set in monorepo mode, tags log output
    watch: bool = False

    @classmethod
    def for_package(cls, package_path: Path, *, watch: bool = False) -> "WorkingContext":
        path = package_path.resolve()
        return cls(root_path=path, package_path=path, cwd=path, watch=watch)

    @classmethod
    def for_member(
        cls,
        root_path: Path,
        package_path: Path,
        package_name: str,
        *,
        watch: bool = False,
    ) -> "WorkingContext":
        path = package_path.resolve()
        return cls(
            root_path=root_path.resolve(),
            package_path=path,
            cwd=path,
            package_name=package_name,
            watch=watch,
        )

    @property
    def source_path(self) -> Path:
        return self.package_path / SOURCE_DIR

    @property
    def is_member(self) -> bool:
        return self.root_path != self.package_path
