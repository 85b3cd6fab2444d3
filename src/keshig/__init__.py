"""keshig: large file tracking for git working trees."""

from .config import KeshigConfig, init_repository, load_config, load_config_or_default
from .repository import RepositoryLayout, find_repository
from .schemas import CorruptRecord, IndexEntry, PathKind, StatusCode, TrackOutcome

__all__ = [
    "CorruptRecord",
    "IndexEntry",
    "KeshigConfig",
    "PathKind",
    "RepositoryLayout",
    "StatusCode",
    "TrackOutcome",
    "find_repository",
    "init_repository",
    "load_config",
    "load_config_or_default",
]
