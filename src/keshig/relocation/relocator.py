from __future__ import annotations

import logging
import shutil
from pathlib import Path

from keshig.errors import RelocationError, UnsupportedPathTypeError
from keshig.fingerprint import file_fingerprint
from keshig.schemas import IndexEntry
from keshig.storage import BlobCache, IndexStore

from .movers import CommandMover, PrivilegedMover

logger = logging.getLogger(__name__)


class CacheRelocator:
    """Moves working tree files into the blob cache under fresh identifiers."""

    def __init__(
        self,
        *,
        cache: BlobCache,
        privileged_mover: PrivilegedMover | None = None,
    ) -> None:
        self.cache = cache
        self.privileged_mover = privileged_mover or CommandMover()

    def relocate(self, source: Path, *, tracked_path: str, index: IndexStore) -> IndexEntry:
        if source.is_symlink() or not source.is_file():
            raise UnsupportedPathTypeError(f"{source} is not a regular file")

        fingerprint = file_fingerprint(source)
        logger.info("relocate start path=%s fingerprint=%s", tracked_path, fingerprint)

        previous = index.get(tracked_path)
        if previous is not None and previous.fingerprint == fingerprint:
            logger.info(
                "relocate content unchanged path=%s previous_identifier=%s",
                tracked_path,
                previous.identifier,
            )

        identifier = self._new_identifier(index)
        entry = IndexEntry(path=tracked_path, fingerprint=fingerprint, identifier=identifier)

        self.cache.ensure_directory()
        destination = self.cache.blob_path(identifier)
        self._move(source, destination)

        if source.exists() or source.is_symlink():
            raise RelocationError(f"Failed to move original file {source}")
        if not destination.is_file():
            raise RelocationError(f"Cache blob {destination} is missing after move")

        logger.info("relocate done path=%s identifier=%s", tracked_path, identifier)
        return entry

    def restore(self, entry: IndexEntry, destination: Path) -> None:
        """Move the blob for ``entry`` back to ``destination``."""
        blob = self.cache.blob_path(entry.identifier)
        logger.warning(
            "restoring relocated file path=%s identifier=%s", entry.path, entry.identifier
        )
        try:
            shutil.move(str(blob), str(destination))
        except OSError as exc:
            raise RelocationError(
                f"Failed to restore {entry.path}; its content is kept at {blob}"
            ) from exc

    def _new_identifier(self, index: IndexStore) -> str:
        identifier = index.generate_unique_identifier()
        while self.cache.contains(identifier):
            logger.warning("identifier already present in cache identifier=%s", identifier)
            identifier = index.generate_unique_identifier()
        return identifier

    def _move(self, source: Path, destination: Path) -> None:
        try:
            shutil.move(str(source), str(destination))
            return
        except OSError as exc:
            logger.warning(
                "move failed, retrying with privileged mover source=%s error=%s",
                source,
                exc,
            )

        status = self.privileged_mover.move(source, destination)
        if status != 0:
            logger.error("privileged move failed source=%s status=%d", source, status)
