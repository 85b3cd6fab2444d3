from __future__ import annotations

import logging
from pathlib import Path

import typer

from git_keshig.check import find_untracked_large_files
from keshig import RepositoryLayout, find_repository, init_repository, load_config_or_default
from keshig.repository import display_path
from keshig.config import KeshigConfig
from keshig.errors import KeshigError
from keshig.relocation import CacheRelocator, CommandMover
from keshig.schemas import IndexEntry, StatusCode, TrackAction
from keshig.storage import BlobCache, IndexStore
from keshig.tracking import TrackingEngine
from keshig.vcs import GitStatusProvider

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = typer.Typer(help="git-keshig: Help with tracking of large files in git")

_STATUS_LABELS = {
    StatusCode.MODIFIED: "Modified",
    StatusCode.UNTRACKED: "Not indexed",
    StatusCode.UNCHANGED: "Unchanged",
}


@app.command("init")
def init_command(
    url: str = typer.Argument(..., help="Remote url stored for later synchronization."),
    repo_dir: Path = typer.Option(
        Path("."),
        "--repo-dir",
        help="Directory inside the git working tree.",
        file_okay=False,
    ),
) -> None:
    """Initialize keshig in the current git repository."""
    try:
        layout = find_repository(repo_dir)
        config = init_repository(layout, url)
    except KeshigError as exc:
        typer.echo(f"Can't initialize keshig: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"initialized url={config.url} cache={layout.cache_dir}")


@app.command("add")
def add_command(
    path: Path = typer.Argument(
        ...,
        help="File to move into the keshig cache. Relative paths resolve against --repo-dir.",
    ),
    repo_dir: Path = typer.Option(
        Path("."),
        "--repo-dir",
        help="Directory inside the git working tree.",
        file_okay=False,
    ),
) -> None:
    """Relocate a modified or untracked file into the cache."""
    try:
        layout = find_repository(repo_dir)
        config = load_config_or_default(layout.config_file)
        index = IndexStore(layout.index_file)
        index.load()
        engine = _build_engine(layout=layout, config=config, index=index)
        outcome = engine.track(path if path.is_absolute() else repo_dir / path)
    except (KeshigError, OSError) as exc:
        typer.echo(f"Failed to add file {display_path(path)}: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(_STATUS_LABELS.get(outcome.status.code, outcome.status.token))
    if outcome.action == TrackAction.RELOCATED and outcome.entry is not None:
        typer.echo(
            "relocated "
            f"path={outcome.entry.path} "
            f"fingerprint={outcome.entry.fingerprint} "
            f"identifier={outcome.entry.identifier}"
        )


@app.command("list")
def list_command(
    repo_dir: Path = typer.Option(
        Path("."),
        "--repo-dir",
        help="Directory inside the git working tree.",
        file_okay=False,
    ),
) -> None:
    """List files tracked by keshig."""
    try:
        layout = find_repository(repo_dir)
        index = IndexStore(layout.index_file)
        entries = index.load()
    except (KeshigError, OSError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    for record in index.corrupt_records:
        typer.echo(f"skipped index line {record.line_number}: {record.reason}", err=True)

    cache = BlobCache(layout.cache_dir)
    typer.echo(_render_entry_table(entries, cache=cache))
    typer.echo(f"tracked={len(entries)} corrupt={len(index.corrupt_records)}")


@app.command("check")
def check_command(
    threshold: int | None = typer.Option(
        None,
        "--threshold",
        help="Minimum size in bytes for a file to count as large.",
        min=1,
    ),
    repo_dir: Path = typer.Option(
        Path("."),
        "--repo-dir",
        help="Directory inside the git working tree.",
        file_okay=False,
    ),
) -> None:
    """Scan the working tree for large and binary files that are not tracked."""
    try:
        layout = find_repository(repo_dir)
        config = load_config_or_default(layout.config_file)
        tracked: set[str] = set()
        if layout.index_file.exists():
            index = IndexStore(layout.index_file)
            tracked = {entry.path for entry in index.load()}
    except (KeshigError, OSError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    result = find_untracked_large_files(
        layout.root,
        threshold=threshold or config.large_file_threshold,
        tracked=tracked,
    )
    for finding in result.findings:
        typer.echo(
            f"{display_path(finding.path)} size={finding.size} "
            f"reasons={','.join(finding.reasons)}"
        )
    for reason, count in result.skipped_counts.items():
        logging.info("check skipped reason=%s count=%d", reason, count)

    typer.echo(f"candidates={len(result.findings)} scanned={result.scanned}")


def _build_engine(
    *,
    layout: RepositoryLayout,
    config: KeshigConfig,
    index: IndexStore,
) -> TrackingEngine:
    relocator = CacheRelocator(
        cache=BlobCache(layout.cache_dir),
        privileged_mover=CommandMover(config.privileged_move),
    )
    status_provider = GitStatusProvider(
        layout.root,
        timeout_seconds=config.status_timeout_seconds,
    )
    return TrackingEngine(
        layout=layout,
        index=index,
        relocator=relocator,
        status_provider=status_provider,
    )


def _render_entry_table(entries: list[IndexEntry], *, cache: BlobCache) -> str:
    if not entries:
        return "no tracked files"

    headers = ("path", "fingerprint", "identifier", "cached")
    rows = [
        (
            entry.path,
            entry.fingerprint,
            entry.identifier,
            "yes" if cache.contains(entry.identifier) else "no",
        )
        for entry in entries
    ]

    widths = [
        max(len(headers[column]), *(len(row[column]) for row in rows))
        for column in range(len(headers))
    ]

    def _line(values: tuple[str, str, str, str]) -> str:
        return " | ".join(
            value.ljust(widths[index]) for index, value in enumerate(values)
        ).rstrip()

    divider = "-+-".join("-" * width for width in widths)
    body = [_line(headers), divider]
    body.extend(_line(row) for row in rows)
    return "\n".join(body)


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
