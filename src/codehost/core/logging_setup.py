from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from codehost.core.utils.io import ensure_directory

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED_TARGET: Optional[str] = None
_CODEHOST_HANDLER: Optional[logging.Handler] = None

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def level_from_name(name: str) -> int:
    """Map a codehost log level name to a stdlib level; unknown names mean INFO."""
    return _LEVELS.get(str(name).lower(), logging.INFO)


def configure_logging(level: str = "info", log_path: Optional[Path] = None) -> None:
    """Install the codehost handler on the root logger.

    Logs go to stderr, or to ``log_path`` when given. Idempotent per target:
    calling again for the same target only updates the level.
    """
    global _CONFIGURED_TARGET, _CODEHOST_HANDLER

    numeric = level_from_name(level)
    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"

    root = logging.getLogger()
    root.setLevel(numeric)

    if _CONFIGURED_TARGET == target and _CODEHOST_HANDLER is not None:
        _CODEHOST_HANDLER.setLevel(numeric)
        return

    if _CODEHOST_HANDLER is not None:
        root.removeHandler(_CODEHOST_HANDLER)
        _CODEHOST_HANDLER.close()
        _CODEHOST_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        ensure_directory(Path(target).parent)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    _CODEHOST_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_logging_for_tests() -> None:
    """Test-only: drop the codehost handler."""
    global _CONFIGURED_TARGET, _CODEHOST_HANDLER
    root = logging.getLogger()
    if _CODEHOST_HANDLER is not None:
        root.removeHandler(_CODEHOST_HANDLER)
        _CODEHOST_HANDLER.close()
    root.setLevel(logging.WARNING)
    _CONFIGURED_TARGET = None
    _CODEHOST_HANDLER = None


__all__ = [
    "TRACE",
    "LOG_FORMAT",
    "level_from_name",
    "configure_logging",
    "reset_logging_for_tests",
]
