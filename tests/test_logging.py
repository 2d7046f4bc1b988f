"""Tests for modtag logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from modtag.logging import configure_logging, get_logger


def test_configure_logging_writes_debug_records_to_file(tmp_path: Path) -> None:
    log_file = tmp_path / "modtag.log"
    logger = configure_logging(log_file=log_file)
    try:
        get_logger("checker").debug("Checking module %s", "lib")
        for handler in logger.handlers:
            handler.flush()

        assert "DEBUG modtag.checker: Checking module lib" in log_file.read_text(encoding="utf-8")
        assert logger.level == logging.DEBUG
    finally:
        for handler in list(logger.handlers):
            handler.close()
        configure_logging()


def test_configure_logging_defaults_to_warnings() -> None:
    logger = configure_logging()

    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
