from __future__ import annotations

from git_keshig.check import find_untracked_large_files


def test_check_finds_large_and_binary_files(tmp_path) -> None:
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "huge-object").write_bytes(b"\0" * 64)
    (tmp_path / "README.md").write_text("readme\n", encoding="utf-8")
    (tmp_path / "big.txt").write_text("x" * 32, encoding="utf-8")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "logo.png").write_bytes(b"\x89PNG\0\0")
    (tmp_path / "assets" / "both.bin").write_bytes(b"\0" * 40)
    (tmp_path / "link.bin").symlink_to(tmp_path / "assets" / "both.bin")

    result = find_untracked_large_files(tmp_path, threshold=32)

    assert [(finding.path, finding.reasons) for finding in result.findings] == [
        ("big.txt", ("large",)),
        ("assets/both.bin", ("large", "binary")),
        ("assets/logo.png", ("binary",)),
    ]
    assert result.scanned == 4
    assert result.skipped_counts == {"symlink": 1}


def test_check_skips_tracked_paths(tmp_path) -> None:
    (tmp_path / "model.pt").write_bytes(b"\0model")

    result = find_untracked_large_files(tmp_path, threshold=1024, tracked={"model.pt"})

    assert result.findings == []
    assert result.scanned == 0
    assert result.skipped_counts == {"tracked": 1}
