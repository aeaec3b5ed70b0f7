"""Core I/O utilities for codehost.

Small, explicit file access helpers:
- Directory management
- Text reads that distinguish "missing" from real I/O failures
- Exclusive creation for first-run files (never clobbers an existing file)
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory for ``path`` exists."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def ensure_directory(path: Path, create: bool = True) -> Path:
    """Ensure directory exists.

    Args:
        path: Directory path to check/create
        create: If True, create directory if missing; if False, raise if missing

    Returns:
        Path: The directory path (guaranteed to exist if create=True)

    Raises:
        FileNotFoundError: If create=False and directory doesn't exist
        NotADirectoryError: If path exists but is not a directory
    """
    path = Path(path)

    if path.exists():
        if not path.is_dir():
            raise NotADirectoryError(f"Path exists but is not a directory: {path}")
        return path

    if create:
        path.mkdir(parents=True, exist_ok=True)
        return path
    raise FileNotFoundError(f"Directory does not exist: {path}")


def read_text(path: PathLike) -> str:
    """Read a UTF-8 text file. Errors propagate unchanged."""
    return Path(path).read_text(encoding="utf-8")


def read_text_if_exists(path: PathLike) -> Optional[str]:
    """Read a UTF-8 text file, returning None when it does not exist.

    Only a missing file is treated as absent. Every other failure
    (``IsADirectoryError``, ``PermissionError``, ...) propagates.
    """
    try:
        return read_text(path)
    except FileNotFoundError:
        return None


def write_text_exclusive(path: PathLike, content: str, *, mode: int = 0o600) -> bool:
    """Create ``path`` with ``content`` only if it does not already exist.

    Returns:
        True when the file was created, False when it already existed.
    """
    path = Path(path)
    ensure_parent_dir(path)
    try:
        fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
    except FileExistsError:
        return False
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)
        f.flush()
        os.fsync(f.fileno())
    return True


__all__ = [
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "read_text",
    "read_text_if_exists",
    "write_text_exclusive",
]
