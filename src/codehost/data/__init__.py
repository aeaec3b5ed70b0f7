"""
codehost data resource helpers.

Provides utilities for accessing bundled configuration defaults and
schemas using importlib.resources.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Args:
        subpackage: Name of the data subpackage (e.g., "config", "schemas")
        filename: Optional filename within the subpackage

    Returns:
        Absolute path to the file or directory

    Example:
        >>> get_data_path("config", "defaults.yaml")
        PosixPath('/path/to/codehost/data/config/defaults.yaml')
    """
    pkg = resources.files("codehost.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


@lru_cache(maxsize=16)
def read_yaml(subpackage: str, filename: str) -> dict[str, Any]:
    """
    Read and parse a bundled YAML data file (cached).

    Bundled files never change at runtime, so caching them is safe; user
    configuration is always read through ``codehost.core.utils.io`` instead.

    Args:
        subpackage: Name of the data subpackage
        filename: YAML filename

    Returns:
        Parsed YAML content as dictionary
    """
    path = get_data_path(subpackage, filename)
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def get_bundled_defaults() -> dict[str, Any]:
    """Return the bundled ``config/defaults.yaml`` mapping."""
    return read_yaml("config", "defaults.yaml")


__all__ = ["get_data_path", "read_yaml", "get_bundled_defaults"]
