"""Relocation of working tree files into the blob cache."""

from .movers import CommandMover, PrivilegedMover
from .relocator import CacheRelocator

__all__ = ["CacheRelocator", "CommandMover", "PrivilegedMover"]
