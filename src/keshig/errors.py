from __future__ import annotations


class KeshigError(Exception):
    """Base class for errors reported to the user."""


class NotARepositoryError(KeshigError):
    pass


class ConfigError(KeshigError):
    pass


class InvalidTargetError(KeshigError):
    """The path cannot be relocated."""


class PathNotFoundError(InvalidTargetError):
    pass


class PathIsDirectoryError(InvalidTargetError):
    pass


class UnsupportedPathTypeError(InvalidTargetError):
    pass


class PathOutsideRepositoryError(InvalidTargetError):
    pass


class RelocationError(KeshigError):
    pass


class CommandFailedError(KeshigError):
    def __init__(self, command: list[str], message: str) -> None:
        super().__init__(f"{' '.join(command)}: {message}")
        self.command = command


class DuplicateEntryError(KeshigError, ValueError):
    pass


class InvalidPathNameError(InvalidTargetError):
    pass
