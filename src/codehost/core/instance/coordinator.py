"""Decide whether an invocation should be handed to a running instance.

Rules, first match wins:

1. Running inside a session of an existing instance (its IPC endpoint is
   inherited through the environment): always reuse that endpoint.
2. ``--reuse-window`` or ``--new-window``: return whatever endpoint is
   recorded, without checking it. These flags do nothing for a new server,
   and the receiving side copes with a stale endpoint.
3. An explicit ``--port``: never reuse; the user asked for a new listener.
4. No file or folder arguments: nothing to hand off, never reuse.
5. Otherwise reuse the recorded endpoint only if a probe connects to it.
"""
from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from codehost.core.config.models import ResolvedConfiguration
from codehost.core.paths import RuntimePaths
from codehost.data import get_bundled_defaults

from .probe import probe_recorded_instance, read_endpoint_file

logger = logging.getLogger(__name__)


def _instance_section() -> dict:
    section = get_bundled_defaults().get("instance")
    return section if isinstance(section, dict) else {}


def default_probe_timeout() -> float:
    return float(_instance_section().get("probe_timeout_seconds", 2.0))


def inherited_endpoint_env_var() -> str:
    return str(_instance_section().get("inherited_endpoint_env", "VSCODE_IPC_HOOK_CLI"))


def should_reuse_existing(
    resolved: ResolvedConfiguration,
    *,
    paths: RuntimePaths,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> Optional[str]:
    """Return the endpoint of the instance to reuse, or None to start a new one."""
    env = os.environ if env is None else env

    inherited = env.get(inherited_endpoint_env_var())
    if inherited:
        logger.debug("reusing inherited endpoint %s", inherited)
        return inherited

    if resolved.reuse_window or resolved.new_window:
        return read_endpoint_file(paths.endpoint_file)

    if resolved.is_explicit("port"):
        return None

    if not resolved.positionals:
        return None

    result = probe_recorded_instance(
        paths.endpoint_file,
        default_probe_timeout() if timeout is None else timeout,
    )
    logger.debug("probe of recorded instance: %s", result.status.value)
    return result.endpoint if result.is_live else None


__all__ = [
    "default_probe_timeout",
    "inherited_endpoint_env_var",
    "should_reuse_existing",
]
