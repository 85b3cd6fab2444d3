"""Deciding which working tree paths get relocated."""

from .engine import TrackingEngine
from .paths import classify_path

__all__ = ["TrackingEngine", "classify_path"]
