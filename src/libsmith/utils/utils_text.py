# src/libsmith/utils/utils_text.py


import re
from pathlib import Path
from typing import Any


def plural(obj: Any) -> str:
    """Return 's' if obj represents a plural count.

    Accepts ints, floats, and any object implementing __len__().
    """
    count: int | float
    try:
        count = len(obj)
    except TypeError:
        count = obj if isinstance(obj, (int, float)) else 0
    return "s" if count != 1 else ""


def remove_path_in_error_message(inner_msg: str, path: Path) -> str:
    """Drop mentions of ``path`` from a wrapped error message.

    Example:
        "Invalid JSONC syntax in /abs/.libsmithrc.jsonc: Expecting value"
        → "Invalid JSONC syntax: Expecting value"
    """
    clean_msg = inner_msg
    for candidate in (str(path), path.name):
        for form in (f"in '{candidate}'", f'in "{candidate}"', f"in {candidate}"):
            clean_msg = clean_msg.replace(form, "")
        clean_msg = clean_msg.replace(candidate, "")

    clean_msg = re.sub(r"\s{2,}", " ", clean_msg)
    clean_msg = re.sub(r"\s*:\s*", ": ", clean_msg)
    return clean_msg.strip(": ").strip()
