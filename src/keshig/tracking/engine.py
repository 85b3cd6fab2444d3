from __future__ import annotations

import logging
from pathlib import Path

from keshig.errors import (
    PathIsDirectoryError,
    PathNotFoundError,
    RelocationError,
    UnsupportedPathTypeError,
)
from keshig.relocation import CacheRelocator
from keshig.repository import RepositoryLayout, display_path
from keshig.schemas import PathKind, StatusCode, TrackAction, TrackOutcome
from keshig.storage import IndexStore
from keshig.vcs import StatusProvider

from .paths import classify_path

logger = logging.getLogger(__name__)

_RELOCATING_CODES = {StatusCode.MODIFIED, StatusCode.UNTRACKED}


class TrackingEngine:
    def __init__(
        self,
        *,
        layout: RepositoryLayout,
        index: IndexStore,
        relocator: CacheRelocator,
        status_provider: StatusProvider,
    ) -> None:
        self.layout = layout
        self.index = index
        self.relocator = relocator
        self.status_provider = status_provider

    def track(self, path: str | Path) -> TrackOutcome:
        """Relocate ``path`` into the cache when git reports it modified or untracked."""
        logger.info("checking path=%s", display_path(path))
        kind = classify_path(self.layout.absolute(path))
        if kind == PathKind.MISSING:
            raise PathNotFoundError(f"{display_path(path)} file does not exist")
        if kind == PathKind.DIRECTORY:
            raise PathIsDirectoryError(f"cannot add directory {display_path(path)}")

        tracked_path = self.layout.relative_key(path)
        target = self.layout.root / tracked_path
        if kind in (PathKind.SYMLINK, PathKind.DEVICE):
            raise UnsupportedPathTypeError(
                f"cannot add {display_path(path)}: {kind} is not relocatable"
            )

        report = self.status_provider.status(tracked_path)
        if report.code not in _RELOCATING_CODES:
            logger.info("no action path=%s code=%s", tracked_path, report.code)
            return TrackOutcome(path=tracked_path, status=report, action=TrackAction.NONE)

        entry = self.relocator.relocate(target, tracked_path=tracked_path, index=self.index)
        try:
            self.index.upsert(entry)
        except (OSError, ValueError) as exc:
            logger.error("index write failed path=%s error=%s", tracked_path, exc)
            self.relocator.restore(entry, target)
            raise RelocationError(
                f"Failed to record {tracked_path} in the index, file restored: {exc}"
            ) from exc
        return TrackOutcome(
            path=tracked_path,
            status=report,
            action=TrackAction.RELOCATED,
            entry=entry,
        )
