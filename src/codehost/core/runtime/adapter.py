"""Translate a resolved configuration into the editor runtime's arguments.

The editor expects its own argument shape: a single workspace file or
folder to open, a fixed connection token, license terms accepted, and the
port as a string.
"""
from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from codehost.core.config.models import ResolvedConfiguration
from codehost.core.options.registry import EXTENSION_MANAGEMENT_OPTIONS
from codehost.data import get_bundled_defaults

logger = logging.getLogger(__name__)


def _runtime_section() -> dict:
    section = get_bundled_defaults().get("runtime")
    return section if isinstance(section, dict) else {}


def connection_token() -> str:
    return str(_runtime_section().get("connection_token", "0000"))


def workspace_suffix() -> str:
    return str(_runtime_section().get("workspace_suffix", ".code-workspace"))


@dataclass(frozen=True)
class RuntimeArgs:
    """Arguments handed to the editor runtime.

    ``options`` carries every resolved option under its hyphenated name;
    the remaining fields are the runtime-specific additions and overrides.
    """

    options: Mapping[str, Any] = field(default_factory=dict)
    workspace: str = ""
    folder: str = ""
    files: Tuple[str, ...] = ()
    positionals: Tuple[str, ...] = ()
    connection_token: str = "0000"
    accept_server_license_terms: bool = True
    help: bool = False
    version: bool = False
    port: str = "8080"

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.options)
        out.update(
            {
                "workspace": self.workspace,
                "folder": self.folder,
                "files": list(self.files),
                "_": list(self.positionals),
                "connection-token": self.connection_token,
                "accept-server-license-terms": self.accept_server_license_terms,
                "help": self.help,
                "version": self.version,
                "port": self.port,
            }
        )
        return out


def _classify(path: str) -> Optional[str]:
    """Return ``workspace``, ``file``, ``folder`` or None (unknown) for ``path``."""
    try:
        mode = os.stat(path).st_mode
    except FileNotFoundError:
        return "folder"
    except (OSError, ValueError) as exc:
        # ValueError: embedded NUL byte.
        logger.debug("cannot stat %s: %s", path, exc)
        return None
    if stat.S_ISREG(mode):
        return "workspace" if path.endswith(workspace_suffix()) else "file"
    if stat.S_ISDIR(mode):
        return "folder"
    return None


def to_runtime_args(
    resolved: ResolvedConfiguration,
    cwd: Optional[Union[str, Path]] = None,
) -> RuntimeArgs:
    """Build :class:`RuntimeArgs` from ``resolved``.

    Each positional is made absolute against ``cwd``. The first workspace
    file and the first folder are picked; other regular files are passed
    through in ``files``.
    """
    base = str(cwd) if cwd is not None else os.getcwd()
    workspace = ""
    folder = ""
    files: List[str] = []
    for entry in resolved.positionals:
        absolute = os.path.normpath(os.path.join(base, entry))
        kind = _classify(absolute)
        if kind == "workspace" and not workspace:
            workspace = absolute
        elif kind == "folder" and not folder:
            folder = absolute
        elif kind == "file":
            files.append(absolute)

    options = resolved.to_dict(redact=False)
    options.pop("_", None)
    return RuntimeArgs(
        options=options,
        workspace=workspace,
        folder=folder,
        files=tuple(files),
        positionals=tuple(resolved.positionals),
        connection_token=connection_token(),
        accept_server_license_terms=True,
        help=bool(resolved.help),
        version=bool(resolved.version),
        port=str(resolved.port),
    )


def should_spawn_cli_process(resolved: ResolvedConfiguration) -> bool:
    """True when the invocation asks for extension management."""
    return any(resolved.get(name) for name in EXTENSION_MANAGEMENT_OPTIONS)


__all__ = [
    "RuntimeArgs",
    "connection_token",
    "to_runtime_args",
    "should_spawn_cli_process",
]
