from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Runs the controller in-process with mocked collaborators to verify
configuration merging, output routing, token reporting and exit codes.
"""

import io
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from compactor4ai.core.processing.tokenizer import TokenizerError
from compactor4ai.domain.processing_models import BatchProcessingError
from compactor4ai.infra.logging import shutdown_logging
from compactor4ai.interface.cli import app as cli_app


@pytest.fixture(autouse=True)
def isolate_logging(capsys):
    """Detach handlers bound to captured streams after each run."""
    yield
    shutdown_logging()


@pytest.fixture
def js_file(tmp_path: Path) -> Path:
    path = tmp_path / "a.js"
    path.write_text("// c\nlet a = 1;\n", encoding="utf-8")
    return path


def test_merge_config_ignores_unknown_and_none_values():
    base = {"mode": "minify", "output_dir": ""}
    merged = cli_app._merge_config(base, {"mode": "raw", "output_dir": None, "junk": 1})

    assert merged == {"mode": "raw", "output_dir": ""}
    assert base["mode"] == "minify"


def test_single_file_to_stdout_without_header(js_file: Path, capsys):
    code = cli_app.main(["--use-defaults", "--no-tokens", "-q", str(js_file)])

    out = capsys.readouterr().out
    assert code == 0
    assert out == "let a = 1;\n"


def test_multiple_files_get_headers(tmp_path: Path, js_file: Path, capsys):
    other = tmp_path / "b.py"
    other.write_text("x = 1  # c\n", encoding="utf-8")

    code = cli_app.main(["--use-defaults", "--no-tokens", "-q", str(js_file), str(other)])

    out = capsys.readouterr().out
    assert code == 0
    assert out == "==> a.js <==\nlet a = 1;\n==> b.py <==\nx = 1\n"


def test_summary_goes_to_stderr_when_content_on_stdout(js_file: Path, capsys):
    cli_app.main(["--use-defaults", "--no-tokens", str(js_file)])

    captured = capsys.readouterr()
    assert "Files processed: 1" in captured.err
    assert "[1/1] a.js" in captured.err
    assert "Files processed" not in captured.out


def test_stdin_input_uses_extension(capsys):
    with patch("sys.stdin", io.StringIO("# c\nrun\n")):
        code = cli_app.main(["--use-defaults", "--no-tokens", "-q", "-m", "remove-comments", "--ext", ".sh"])

    assert code == 0
    assert capsys.readouterr().out == "\nrun\n"


def test_token_counts_reported(js_file: Path, capsys):
    with patch.object(cli_app, "count_tokens", side_effect=lambda text: len(text.split())), \
            patch.object(cli_app, "get_encoding_name", return_value="o200k_base"):
        code = cli_app.main(["--use-defaults", "--json", str(js_file)])

    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert data["tokens_in"] == 6
    assert data["tokens_out"] == 4
    assert data["tokenizer"] == "o200k_base"


def test_tokenizer_failure_is_not_fatal(js_file: Path, capsys):
    with patch.object(cli_app, "count_tokens", side_effect=TokenizerError("offline")):
        code = cli_app.main(["--use-defaults", "--json", str(js_file)])

    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert data["tokens_in"] is None


def test_batch_failure_exits_with_one(js_file: Path, capsys):
    err = BatchProcessingError("Processing failed: boom")
    with patch.object(cli_app, "process_batch_blocking", side_effect=err):
        code = cli_app.main(["--use-defaults", "--no-tokens", str(js_file)])

    assert code == 1
    assert "Processing failed: boom" in capsys.readouterr().err


def test_keyboard_interrupt_exits_with_130(js_file: Path, capsys):
    with patch.object(cli_app, "process_batch_blocking", side_effect=KeyboardInterrupt):
        code = cli_app.main(["--use-defaults", "--no-tokens", str(js_file)])

    assert code == 130


def test_directory_without_text_files_is_invalid_input(tmp_path: Path, capsys):
    (tmp_path / "img.png").write_bytes(b"\x89PNG")

    assert cli_app.main(["--use-defaults", "--no-tokens", str(tmp_path)]) == 2


def test_write_failure_reported(tmp_path: Path, js_file: Path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    code = cli_app.main(["--use-defaults", "--no-tokens", str(js_file), "-o", str(blocker)])

    assert code == 1
    assert "FAILED" in capsys.readouterr().out


def test_dump_config_reflects_overrides(capsys):
    code = cli_app.main(["--use-defaults", "--dump-config", "-m", "raw", "--suffix", ".min"])

    conf = json.loads(capsys.readouterr().out)
    assert code == 0
    assert conf["mode"] == "raw"
    assert conf["output_suffix"] == ".min"
