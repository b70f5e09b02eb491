# src/libsmith/utils/utils_matching.py


import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path, PurePosixPath


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a path glob to a regex.

    ``*`` and ``?`` never cross a ``/``; ``**`` matches any number of
    segments (``a/**/b`` also matches ``a/b``); ``[...]`` classes and
    ``{x,y}`` alternatives are supported. Always case-sensitive.
    """
    i = 0
    n = len(pattern)
    pieces: list[str] = []
    while i < n:
        ch = pattern[i]

        if ch == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j < n:
                body = pattern[i + 1 : j]
                if body.startswith("!"):
                    body = "^" + body[1:]
                pieces.append(f"[{body}]")
                i = j + 1
            else:
                pieces.append("\\[")
                i += 1
            continue

        if ch == "{":
            j = pattern.find("}", i)
            if j != -1:
                options = pattern[i + 1 : j].split(",")
                pieces.append("(?:" + "|".join(re.escape(o) for o in options) + ")")
                i = j + 1
                continue

        if ch == "*" and i + 1 < n and pattern[i + 1] == "*":
            k = i + 2
            while k < n and pattern[k] == "*":
                k += 1
            if k < n and pattern[k] == "/":
                # "**/" may also match nothing
                pieces.append("(?:.*/)?")
                k += 1
            else:
                pieces.append(".*")
            i = k
            continue

        if ch == "*":
            pieces.append("[^/]*")
        elif ch == "?":
            pieces.append("[^/]")
        else:
            pieces.append(re.escape(ch))
        i += 1

    return re.compile("(?s:" + "".join(pieces) + r")\Z")


def glob_match(path: str | Path, pattern: str) -> bool:
    """Return True if a relative posix path matches a glob pattern."""
    rel = str(PurePosixPath(Path(path).as_posix()))
    pat = pattern.replace("\\", "/")
    if pat.startswith("./"):
        pat = pat[2:]
    return bool(compile_glob(pat).match(rel))


def matches_any(path: str | Path, patterns: Iterable[str]) -> bool:
    return any(glob_match(path, p) for p in patterns)
