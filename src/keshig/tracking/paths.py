from __future__ import annotations

import stat
from pathlib import Path

from keshig.schemas import PathKind


def classify_path(path: Path) -> PathKind:
    """Classify ``path`` without following a final symlink."""
    try:
        mode = path.lstat().st_mode
    except FileNotFoundError:
        return PathKind.MISSING

    if stat.S_ISLNK(mode):
        return PathKind.SYMLINK
    if stat.S_ISDIR(mode):
        return PathKind.DIRECTORY
    if stat.S_ISREG(mode):
        return PathKind.REGULAR
    return PathKind.DEVICE
