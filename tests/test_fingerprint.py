from __future__ import annotations

import pytest

import keshig.fingerprint as fingerprint_module
from keshig.fingerprint import file_fingerprint


def test_fingerprint_matches_md5_hex(tmp_path) -> None:
    path = tmp_path / "notes.bin"
    path.write_bytes(b"hello")

    assert file_fingerprint(path) == "5d41402abc4b2a76b9719d911017c592"


def test_fingerprint_is_deterministic_and_content_sensitive(tmp_path) -> None:
    first = tmp_path / "a.bin"
    same = tmp_path / "b.bin"
    other = tmp_path / "c.bin"
    first.write_bytes(b"\x00\x01payload")
    same.write_bytes(b"\x00\x01payload")
    other.write_bytes(b"\x00\x01payloaD")

    assert file_fingerprint(first) == file_fingerprint(first)
    assert file_fingerprint(first) == file_fingerprint(same)
    assert file_fingerprint(first) != file_fingerprint(other)


def test_fingerprint_reads_in_chunks(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(fingerprint_module, "CHUNK_SIZE", 4)
    path = tmp_path / "chunked.bin"
    path.write_bytes(b"hello")

    assert file_fingerprint(path) == "5d41402abc4b2a76b9719d911017c592"


def test_fingerprint_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        file_fingerprint(tmp_path / "missing.bin")
