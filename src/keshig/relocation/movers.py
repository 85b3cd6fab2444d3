from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from keshig.config import DEFAULT_PRIVILEGED_MOVE

logger = logging.getLogger(__name__)


class PrivilegedMover(Protocol):
    def move(self, source: Path, destination: Path) -> int:
        """Move ``source`` to ``destination`` and return the exit status."""


class CommandMover:
    """Moves a file by running an external command, ``sudo mv`` by default."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_PRIVILEGED_MOVE,
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        if not command:
            raise ValueError("command must not be empty.")
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0.")
        self.command = list(command)
        self.timeout_seconds = timeout_seconds

    def move(self, source: Path, destination: Path) -> int:
        args = [*self.command, str(source), str(destination)]
        try:
            completed = subprocess.run(args, timeout=self.timeout_seconds, check=False)
        except FileNotFoundError:
            logger.error("privileged move executable not found command=%s", self.command[0])
            return 127
        except subprocess.TimeoutExpired:
            logger.error("privileged move timed out after=%ss", self.timeout_seconds)
            return 124
        return completed.returncode
