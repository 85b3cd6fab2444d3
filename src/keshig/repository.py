from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from keshig.errors import InvalidPathNameError, NotARepositoryError, PathOutsideRepositoryError
from keshig.schemas import INDEX_SEPARATOR

CONTROL_DIR_NAME = ".git"
INDEX_FILE_NAME = "bin-index"
CONFIG_FILE_NAME = "keshig"
CACHE_DIR_NAME = "bin-cache"


@dataclass(slots=True, frozen=True)
class RepositoryLayout:
    root: Path
    control_dir: Path
    index_file: Path
    config_file: Path
    cache_dir: Path

    @classmethod
    def from_root(cls, root: str | Path) -> RepositoryLayout:
        root_path = Path(root).resolve()
        control_dir = root_path / CONTROL_DIR_NAME
        return cls(
            root=root_path,
            control_dir=control_dir,
            index_file=control_dir / INDEX_FILE_NAME,
            config_file=control_dir / CONFIG_FILE_NAME,
            cache_dir=control_dir / CACHE_DIR_NAME,
        )

    def absolute(self, path: str | Path) -> Path:
        """Absolute form of ``path`` without following a final symlink."""
        candidate = Path(os.path.abspath(path))
        parent = Path(os.path.realpath(candidate.parent))
        return parent / candidate.name

    def relative_key(self, path: str | Path) -> str:
        absolute = self.absolute(path)
        try:
            relative = absolute.relative_to(self.root)
        except ValueError as exc:
            raise PathOutsideRepositoryError(
                f"{display_path(path)} is outside the repository {self.root}"
            ) from exc

        if not relative.parts or relative.parts[0] == CONTROL_DIR_NAME:
            raise PathOutsideRepositoryError(f"{display_path(path)} is not a working tree file")

        key = relative.as_posix()
        try:
            key.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidPathNameError(
                f"{display_path(key)} is not a UTF-8 file name"
            ) from exc
        if INDEX_SEPARATOR in key or "\n" in key or "\r" in key:
            raise InvalidPathNameError(
                f"{display_path(key)} contains {INDEX_SEPARATOR!r} or a line break"
            )
        return key


def find_repository(start: str | Path = ".") -> RepositoryLayout:
    current = Path(start).resolve()
    for candidate in (current, *current.parents):
        if (candidate / CONTROL_DIR_NAME).is_dir():
            return RepositoryLayout.from_root(candidate)
    raise NotARepositoryError(f"{current} is not a git repository")


def display_path(path: str | Path) -> str:
    """Printable form of a path whose name may hold undecodable bytes."""
    return str(path).encode("utf-8", "backslashreplace").decode("utf-8")
