from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from keshig.errors import CommandFailedError
from keshig.schemas import StatusCode, StatusReport

logger = logging.getLogger(__name__)

MODIFIED_TOKEN = "M"
UNTRACKED_TOKEN = "??"


class StatusProvider(Protocol):
    def status(self, path: str) -> StatusReport:
        """Classify a repository-relative path."""


class GitStatusProvider:
    """Runs ``git status --short`` for a single path."""

    def __init__(
        self,
        repo_root: str | Path,
        *,
        git_executable: str = "git",
        timeout_seconds: float | None = 60.0,
    ) -> None:
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0.")
        self.repo_root = Path(repo_root)
        self.git_executable = git_executable
        self.timeout_seconds = timeout_seconds

    def status(self, path: str) -> StatusReport:
        command = [self.git_executable, "status", "--short", "--", path]
        try:
            completed = subprocess.run(
                command,
                cwd=self.repo_root,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise CommandFailedError(command, "executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandFailedError(
                command, f"timed out after {self.timeout_seconds}s"
            ) from exc

        if completed.returncode != 0:
            stderr = completed.stderr.strip() or "no error output"
            raise CommandFailedError(
                command, f"exit status {completed.returncode}: {stderr}"
            )

        report = parse_status_output(completed.stdout)
        logger.info("git status path=%s code=%s token=%s", path, report.code, report.token)
        return report


def parse_status_output(output: str) -> StatusReport:
    """Parse the first line of ``git status --short`` output.

    The two-character ``XY`` code is split on whitespace. Only a lone ``M``
    (``" M"`` or ``"M "``) counts as modified. Combined codes such as
    ``"MM"``, ``"AM"`` or ``"RM"`` are reported as other.
    """
    lines = [line for line in output.splitlines() if line.strip()]
    if not lines:
        return StatusReport(code=StatusCode.UNCHANGED, token="")

    code_field = lines[0][:2]
    tokens = code_field.split()
    token = " ".join(tokens) if tokens else lines[0].strip()

    if UNTRACKED_TOKEN in tokens:
        return StatusReport(code=StatusCode.UNTRACKED, token=token)
    if MODIFIED_TOKEN in tokens:
        return StatusReport(code=StatusCode.MODIFIED, token=token)
    return StatusReport(code=StatusCode.OTHER, token=token)
