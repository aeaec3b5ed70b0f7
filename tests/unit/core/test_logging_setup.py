from __future__ import annotations

import logging
from pathlib import Path

from codehost.core.logging_setup import (
    LOG_FORMAT,
    TRACE,
    configure_logging,
    level_from_name,
    reset_logging_for_tests,
)


def _codehost_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, "formatter", None) and h.formatter._fmt == LOG_FORMAT]


def test_level_names() -> None:
    assert level_from_name("trace") == TRACE == 5
    assert logging.getLevelName(TRACE) == "TRACE"
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("warn") == logging.WARNING
    assert level_from_name("error") == logging.ERROR
    assert level_from_name("bogus") == logging.INFO


def test_configure_is_idempotent_per_target() -> None:
    configure_logging("debug")
    configure_logging("trace")
    handlers = _codehost_handlers()
    assert len(handlers) == 1
    assert handlers[0].level == TRACE
    assert logging.getLogger().level == TRACE
    reset_logging_for_tests()
    assert _codehost_handlers() == []


def test_file_target(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "codehost.log"
    configure_logging("info", log_path)
    logging.getLogger("codehost.test").info("hello from the test")
    reset_logging_for_tests()

    text = log_path.read_text(encoding="utf-8")
    assert "INFO codehost.test: hello from the test" in text


def test_switching_target_replaces_handler(tmp_path: Path) -> None:
    configure_logging("info")
    configure_logging("info", tmp_path / "x.log")
    handlers = _codehost_handlers()
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.FileHandler)
