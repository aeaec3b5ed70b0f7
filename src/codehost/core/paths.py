"""Runtime path resolution.

codehost stores user data, configuration and the recorded endpoint of the
running instance in per-user directories. They are resolved once into a
:class:`RuntimePaths` value that is passed to every consumer explicitly,
so tests can point a whole invocation at a temporary directory.

Precedence (highest to lowest) for each directory:
1. XDG environment variable (``XDG_DATA_HOME``, ``XDG_CONFIG_HOME``)
2. XDG default under the home directory (``~/.local/share``, ``~/.config``)

The runtime directory holding the endpoint file is the system temp dir.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from codehost.data import get_bundled_defaults


def _paths_section() -> dict:
    section = get_bundled_defaults().get("paths")
    return section if isinstance(section, dict) else {}


def _xdg_dir(env: Mapping[str, str], var: str, fallback: str, home: Path) -> Path:
    raw = env.get(var)
    if isinstance(raw, str) and raw.strip():
        p = Path(raw.strip()).expanduser()
        if p.is_absolute():
            return p
    return home / fallback


@dataclass(frozen=True)
class RuntimePaths:
    data_dir: Path
    config_dir: Path
    runtime_dir: Path

    @property
    def endpoint_file(self) -> Path:
        """File whose contents name the socket of the running instance."""
        return self.runtime_dir / str(_paths_section().get("endpoint_file", "vscode-ipc"))

    @property
    def default_config_file(self) -> Path:
        return self.config_dir / str(_paths_section().get("config_file", "config.yaml"))

    @classmethod
    def from_environ(
        cls,
        env: Optional[Mapping[str, str]] = None,
        *,
        home: Optional[Path] = None,
    ) -> "RuntimePaths":
        """Resolve the per-user directories from ``env`` (default: ``os.environ``)."""
        env = os.environ if env is None else env
        home = home or Path.home()
        app = str(_paths_section().get("app_name", "code-server"))
        return cls(
            data_dir=_xdg_dir(env, "XDG_DATA_HOME", ".local/share", home) / app,
            config_dir=_xdg_dir(env, "XDG_CONFIG_HOME", ".config", home) / app,
            runtime_dir=Path(tempfile.gettempdir()),
        )

    @classmethod
    def under(cls, root: Path) -> "RuntimePaths":
        """All directories below ``root`` (isolated installs and tests)."""
        root = Path(root)
        return cls(
            data_dir=root / "data",
            config_dir=root / "config",
            runtime_dir=root / "run",
        )


__all__ = ["RuntimePaths"]
