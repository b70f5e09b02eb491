# src/libsmith/utils/__init__.py

from .utils_files import load_jsonc, load_manifest, load_toml
from .utils_matching import compile_glob, glob_match, matches_any
from .utils_paths import (
    get_exist_file,
    get_exist_files,
    shorten_path_for_display,
    to_posix_rel,
)
from .utils_text import plural, remove_path_in_error_message


__all__ = [  # noqa: RUF022
    # utils_files
    "load_jsonc",
    "load_manifest",
    "load_toml",
    # utils_matching
    "compile_glob",
    "glob_match",
    "matches_any",
    # utils_paths
    "get_exist_file",
    "get_exist_files",
    "shorten_path_for_display",
    "to_posix_rel",
    # utils_text
    "plural",
    "remove_path_in_error_message",
]
