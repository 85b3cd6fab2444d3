"""Storage layer for the path index + blob cache."""

from .cache import BlobCache
from .index import IndexStore, parse_index_line

__all__ = ["BlobCache", "IndexStore", "parse_index_line"]
