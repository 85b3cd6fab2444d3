from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class BlobCache:
    """Flat directory holding one immutable blob per identifier."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def ensure_directory(self) -> None:
        if not self.directory.is_dir():
            self.directory.mkdir(parents=True, exist_ok=True)
            logger.info("blob_cache created directory=%s", self.directory)

    def blob_path(self, identifier: str) -> Path:
        if not identifier or identifier in {".", ".."} or "/" in identifier or "\\" in identifier:
            raise ValueError(f"invalid blob identifier: {identifier!r}")
        return self.directory / identifier

    def contains(self, identifier: str) -> bool:
        return self.blob_path(identifier).is_file()

    def read_bytes(self, identifier: str) -> bytes:
        return self.blob_path(identifier).read_bytes()
