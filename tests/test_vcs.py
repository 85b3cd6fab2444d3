from __future__ import annotations

import subprocess

import pytest

import keshig.vcs as vcs_module
from keshig.errors import CommandFailedError, NotARepositoryError
from keshig.repository import RepositoryLayout, find_repository
from keshig.schemas import StatusCode
from keshig.vcs import GitStatusProvider, parse_status_output


@pytest.mark.parametrize(
    ("output", "code", "token"),
    [
        ("?? notes.bin\n", StatusCode.UNTRACKED, "??"),
        (" M notes.bin\n", StatusCode.MODIFIED, "M"),
        ("M  notes.bin\n", StatusCode.MODIFIED, "M"),
        ("MM notes.bin\n", StatusCode.OTHER, "MM"),
        ("AM notes.bin\n", StatusCode.OTHER, "AM"),
        ("RM old.bin -> notes.bin\n", StatusCode.OTHER, "RM"),
        ("A  notes.bin\n", StatusCode.OTHER, "A"),
        (" D notes.bin\n", StatusCode.OTHER, "D"),
        ("", StatusCode.UNCHANGED, ""),
        ("\n\n", StatusCode.UNCHANGED, ""),
    ],
)
def test_parse_status_output(output: str, code: StatusCode, token: str) -> None:
    report = parse_status_output(output)

    assert report.code == code
    assert report.token == token


def test_parse_status_ignores_path_that_looks_like_a_code() -> None:
    report = parse_status_output("A  M\n")

    assert report.code == StatusCode.OTHER


def test_git_status_provider_runs_short_status(monkeypatch, tmp_path) -> None:
    calls: list[dict[str, object]] = []

    def _fake_run(command, **kwargs):
        calls.append({"command": command, **kwargs})
        return subprocess.CompletedProcess(command, 0, stdout="?? notes.bin\n", stderr="")

    monkeypatch.setattr(vcs_module.subprocess, "run", _fake_run)
    provider = GitStatusProvider(tmp_path, timeout_seconds=5.0)

    report = provider.status("notes.bin")

    assert report.code == StatusCode.UNTRACKED
    assert calls[0]["command"] == ["git", "status", "--short", "--", "notes.bin"]
    assert calls[0]["cwd"] == tmp_path
    assert calls[0]["timeout"] == 5.0


def test_git_status_provider_raises_on_failure_status(monkeypatch, tmp_path) -> None:
    def _fake_run(command, **kwargs):
        return subprocess.CompletedProcess(
            command, 128, stdout="?? notes.bin\n", stderr="fatal: not a git repository"
        )

    monkeypatch.setattr(vcs_module.subprocess, "run", _fake_run)

    with pytest.raises(CommandFailedError, match="exit status 128"):
        GitStatusProvider(tmp_path).status("notes.bin")


def test_git_status_provider_raises_when_git_is_missing(tmp_path) -> None:
    provider = GitStatusProvider(tmp_path, git_executable="definitely-not-git-keshig")

    with pytest.raises(CommandFailedError, match="executable not found"):
        provider.status("notes.bin")


def test_git_status_provider_raises_on_timeout(monkeypatch, tmp_path) -> None:
    def _fake_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr(vcs_module.subprocess, "run", _fake_run)

    with pytest.raises(CommandFailedError, match="timed out"):
        GitStatusProvider(tmp_path, timeout_seconds=1.0).status("notes.bin")


def test_find_repository_walks_up_to_control_dir(tmp_path) -> None:
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    layout = find_repository(nested)

    assert layout == RepositoryLayout.from_root(tmp_path)
    assert layout.index_file == tmp_path.resolve() / ".git" / "bin-index"
    assert layout.config_file == tmp_path.resolve() / ".git" / "keshig"
    assert layout.cache_dir == tmp_path.resolve() / ".git" / "bin-cache"


def test_find_repository_requires_control_dir(tmp_path) -> None:
    (tmp_path / ".git").write_text("gitdir: elsewhere\n", encoding="utf-8")

    with pytest.raises(NotARepositoryError):
        find_repository(tmp_path)
