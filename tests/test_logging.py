"""Tests for spacecompiler logging helpers."""

from __future__ import annotations

import logging
from pathlib import Path

from spacecompiler.logging import configure_logging, get_logger, unit_logger


def test_get_logger_nests_under_package_logger() -> None:
    assert get_logger().name == "spacecompiler"
    assert get_logger("orchestrator").name == "spacecompiler.orchestrator"


def test_configure_logging_levels() -> None:
    assert configure_logging().level == logging.INFO
    assert configure_logging(verbose=True).level == logging.DEBUG
    assert configure_logging(verbose=True, quiet=True).level == logging.WARNING


def test_configure_logging_replaces_handlers(tmp_path: Path) -> None:
    configure_logging()
    logger = configure_logging(log_file=tmp_path / "compile.log")

    assert len(logger.handlers) == 2
    get_logger("test").debug("written to file")
    for handler in logger.handlers:
        handler.flush()

    assert "written to file" in (tmp_path / "compile.log").read_text(encoding="utf-8")
    configure_logging()


def test_unit_logger_prefixes_messages() -> None:
    adapter = unit_logger(logging.getLogger("unit-test"), "guide.md")

    message, kwargs = adapter.process("Tokenizing as text", {})

    assert message == "[guide.md] Tokenizing as text"
    assert kwargs == {}
