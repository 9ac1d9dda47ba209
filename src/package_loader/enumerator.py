"""Immediate-subdirectory enumeration used by package discovery."""

from __future__ import annotations

import os
from pathlib import Path

_SELF_ENTRIES = frozenset({".", ".."})
SEPARATORS = os.sep + (os.altsep or "")


def strip_separators(path: str | Path) -> str:
    return os.fspath(path).rstrip(SEPARATORS)


def find_dirs(path: str | Path) -> dict[str, str]:
    """
    Return the immediate subdirectories of `path` as ``{name: full_path}``.

    Entries are visited in name order. Directory symlinks count as directories;
    regular files and links to files are skipped without a diagnostic.
    `OSError` from opening the directory or classifying an entry propagates.
    """
    base = strip_separators(path) or os.sep
    result: dict[str, str] = {}
    with os.scandir(base) as entries:
        ordered = sorted(entries, key=lambda item: item.name)
        for entry in ordered:
            if entry.name in _SELF_ENTRIES:
                continue
            if entry.is_dir():
                result[entry.name] = os.path.join(base, entry.name)
    return result
