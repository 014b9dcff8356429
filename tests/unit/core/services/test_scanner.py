from __future__ import annotations

"""
Unit tests for the File Discovery and Classification Service.

Verifies recursive walking with hidden-entry pruning, text/binary
classification by name, the per-file size ceiling and log-and-skip
behaviour for unreadable inputs.
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from compactor4ai.core.services.scanner import (
    is_hidden,
    is_text_file,
    read_files_from_paths,
    read_single_file,
    to_records,
)


@pytest.fixture
def mock_fs_structure(tmp_path: Path) -> Path:
    """Create a temporary project tree for scanning tests."""
    root = tmp_path / "project"
    root.mkdir()

    (root / "src").mkdir()
    (root / ".git").mkdir()
    (root / "assets").mkdir()

    (root / "src" / "main.py").write_text("print('hello')\n", encoding="utf-8")
    (root / "src" / "util.js").write_text("// util\nexport const x = 1;\n", encoding="utf-8")
    (root / "src" / ".secret.env").write_text("KEY=1", encoding="utf-8")
    (root / ".git" / "config").write_text("[core]", encoding="utf-8")
    (root / "assets" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / "Makefile").write_text("all:\n\techo ok\n", encoding="utf-8")

    return root


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("name, expected", [
    ("main.py", True),
    ("README.MD", True),
    ("Dockerfile", True),
    ("Makefile", True),
    (".gitignore", True),
    (".bashrc", True),
    ("logo.png", False),
    ("archive.tar.gz", False),
    ("LICENSE", False),
])
def test_is_text_file(name: str, expected: bool) -> None:
    assert is_text_file(name) is expected


def test_is_hidden_checks_every_component() -> None:
    assert is_hidden(".git/config")
    assert is_hidden("src/.cache/data.json")
    assert not is_hidden("src/main.py")
    assert not is_hidden("./src/main.py")


# -----------------------------------------------------------------------------
# Walking
# -----------------------------------------------------------------------------

def test_directory_walk_skips_hidden_entries(mock_fs_structure: Path) -> None:
    files = read_files_from_paths([str(mock_fs_structure)])
    rel_paths = [f.rel_path.replace("\\", "/") for f in files]

    assert rel_paths == ["Makefile", "assets/logo.png", "src/main.py", "src/util.js"]


def test_binary_files_listed_without_content(mock_fs_structure: Path) -> None:
    files = {f.name: f for f in read_files_from_paths([str(mock_fs_structure)])}

    assert files["logo.png"].is_text is False
    assert files["logo.png"].content == ""
    assert files["main.py"].content == "print('hello')\n"


def test_explicit_file_path_is_read(mock_fs_structure: Path) -> None:
    target = mock_fs_structure / "src" / "util.js"
    files = read_files_from_paths([str(target)])

    assert len(files) == 1
    assert files[0].rel_path == "util.js"
    assert files[0].path == os.path.abspath(str(target))


def test_missing_path_logged_and_skipped(tmp_path: Path, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        files = read_files_from_paths([str(tmp_path / "ghost")])

    assert files == []
    assert "Path does not exist" in caplog.text


# -----------------------------------------------------------------------------
# Single file reads
# -----------------------------------------------------------------------------

def test_oversized_file_skipped(tmp_path: Path, caplog) -> None:
    big = tmp_path / "big.txt"
    big.write_text("x" * 64, encoding="utf-8")

    with patch("compactor4ai.core.services.scanner.MAX_FILE_SIZE", 10):
        with caplog.at_level(logging.WARNING):
            assert read_single_file(str(big)) is None

    assert "too large" in caplog.text


def test_invalid_utf8_skipped(tmp_path: Path, caplog) -> None:
    bad = tmp_path / "bad.txt"
    bad.write_bytes(b"ok \xff\xfe broken")

    with caplog.at_level(logging.WARNING):
        assert read_single_file(str(bad)) is None

    assert "Failed to read" in caplog.text


def test_line_endings_preserved(tmp_path: Path) -> None:
    crlf = tmp_path / "win.txt"
    crlf.write_bytes(b"a\r\nb\r\n")

    info = read_single_file(str(crlf))
    assert info is not None
    assert info.content == "a\r\nb\r\n"


def test_to_records_keeps_text_files_only(mock_fs_structure: Path) -> None:
    records = to_records(read_files_from_paths([str(mock_fs_structure)]))

    assert [r.name for r in records] == ["Makefile", "main.py", "util.js"]
    assert all(r.id == r.path for r in records)
