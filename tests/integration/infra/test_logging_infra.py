from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, handler ownership and log file rotation logic.
"""

import logging
import time
from pathlib import Path

import pytest

from compactor4ai.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    shutdown_logging,
)
from compactor4ai.infra.logging.core import QUEUE_LISTENER_ATTR, parse_level
from compactor4ai.infra.logging.handlers import HANDLER_TAG_ATTR, create_rotating_file_handler


@pytest.fixture(autouse=True)
def reset_logging():
    """Clean up our handlers before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    root = logging.getLogger()
    initial_handler_count = len(root.handlers)

    configure_logging(cfg)
    assert len(root.handlers) == initial_handler_count, "Handlers were duplicated."


def test_force_replaces_only_our_handlers() -> None:
    foreign = logging.NullHandler()
    root = logging.getLogger()
    root.addHandler(foreign)
    try:
        configure_logging(LoggingConfig(level="INFO"))
        configure_logging(LoggingConfig(level="DEBUG"), force=True)

        ours = [h for h in root.handlers if getattr(h, HANDLER_TAG_ATTR, False)]
        assert len(ours) == 1
        assert foreign in root.handlers
        assert root.level == logging.DEBUG
    finally:
        root.removeHandler(foreign)


def test_log_rotation(tmp_path: Path) -> None:
    """TC-02: Verify file rotation when size limit is exceeded."""
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger("test_rotate")

    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Give time for the QueueListener to process
    time.sleep(0.5)
    shutdown_logging()

    assert log_file.exists()
    assert (tmp_path / "test_rotate.log.1").exists(), "Rotation backup file was not created."


def test_queue_listener_architecture() -> None:
    """TC-03: Verify that the root logger uses a QueueHandler-based architecture."""
    configure_logging(LoggingConfig(level="INFO", console=True))

    root = logging.getLogger()
    queue_handlers = [h for h in root.handlers if getattr(h, HANDLER_TAG_ATTR, False)]

    assert len(queue_handlers) == 1
    assert getattr(root, QUEUE_LISTENER_ATTR) is not None

    shutdown_logging()
    assert getattr(root, QUEUE_LISTENER_ATTR) is None


def test_unwritable_log_file_falls_back_to_none(tmp_path: Path, capsys) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    handler = create_rotating_file_handler(
        str(blocker / "app.log"), logging.INFO, logging.Formatter(), 100, 1
    )

    assert handler is None
    assert "Cannot open log file" in capsys.readouterr().err


def test_parse_level_defaults_to_info() -> None:
    assert parse_level("debug") == logging.DEBUG
    assert parse_level("nonsense") == logging.INFO
    assert parse_level(None) == logging.INFO


def test_default_log_path_under_user_data_dir(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(
        "compactor4ai.infra.logging.core.get_user_data_dir", lambda: str(tmp_path)
    )
    assert get_default_log_path() == str(tmp_path / "logs" / "compactor4ai.log")
