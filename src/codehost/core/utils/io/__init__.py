"""I/O utilities for codehost.

This package provides safe file operations:
- Core: directory management, text I/O, exclusive creation
- YAML: read with shared locking, string dump
"""
from __future__ import annotations

from .core import (
    PathLike,
    ensure_directory,
    ensure_parent_dir,
    read_text,
    read_text_if_exists,
    write_text_exclusive,
)
from .yaml import (
    dump_yaml_string,
    read_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "read_text",
    "read_text_if_exists",
    "write_text_exclusive",
    # yaml
    "read_yaml",
    "dump_yaml_string",
]
