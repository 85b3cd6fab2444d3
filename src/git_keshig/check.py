from __future__ import annotations

import os
from collections import defaultdict
from collections.abc import Container
from dataclasses import dataclass
from pathlib import Path

from keshig.repository import CONTROL_DIR_NAME

BINARY_SNIFF_BYTES = 8000
REASON_LARGE = "large"
REASON_BINARY = "binary"


@dataclass(slots=True, frozen=True)
class CheckFinding:
    path: str
    size: int
    reasons: tuple[str, ...]


@dataclass(slots=True)
class CheckResult:
    findings: list[CheckFinding]
    scanned: int
    skipped_counts: dict[str, int]


def find_untracked_large_files(
    root: Path,
    *,
    threshold: int,
    tracked: Container[str] = frozenset(),
) -> CheckResult:
    """Walk the working tree and report large or binary files not yet tracked."""
    if threshold < 1:
        raise ValueError("threshold must be >= 1")

    findings: list[CheckFinding] = []
    skipped_counts: defaultdict[str, int] = defaultdict(int)
    scanned = 0

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name != CONTROL_DIR_NAME)
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.is_symlink():
                skipped_counts["symlink"] += 1
                continue
            if not path.is_file():
                skipped_counts["special"] += 1
                continue

            relative = path.relative_to(root).as_posix()
            if relative in tracked:
                skipped_counts["tracked"] += 1
                continue

            scanned += 1
            try:
                size = path.stat().st_size
                reasons = _classify(path, size=size, threshold=threshold)
            except OSError:
                skipped_counts["unreadable"] += 1
                continue
            if reasons:
                findings.append(CheckFinding(path=relative, size=size, reasons=reasons))

    return CheckResult(
        findings=findings,
        scanned=scanned,
        skipped_counts=dict(sorted(skipped_counts.items())),
    )


def _classify(path: Path, *, size: int, threshold: int) -> tuple[str, ...]:
    reasons: list[str] = []
    if size >= threshold:
        reasons.append(REASON_LARGE)
    if _looks_binary(path):
        reasons.append(REASON_BINARY)
    return tuple(reasons)


def _looks_binary(path: Path) -> bool:
    with path.open("rb") as handle:
        return b"\0" in handle.read(BINARY_SNIFF_BYTES)
