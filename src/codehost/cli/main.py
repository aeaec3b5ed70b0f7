"""Entry point of the ``codehost`` command.

Flow: parse argv, answer ``--help``/``--version`` directly, read the config
file, resolve, configure logging, then either hand the invocation to a
running instance, defer extension management to the editor CLI, or print
the startup summary.
"""
from __future__ import annotations

import http.client
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, MutableMapping, Optional, Union

from codehost import __version__
from codehost.core.config import ResolvedConfiguration, load_config_for, resolve
from codehost.core.config.models import REDACTED
from codehost.core.instance import (
    build_open_request,
    default_probe_timeout,
    send_open_request,
    should_reuse_existing,
)
from codehost.core.logging_setup import configure_logging
from codehost.core.network import Address, format_address
from codehost.core.options import AuthType, CliError, Feature, parse
from codehost.core.paths import RuntimePaths
from codehost.core.runtime import should_spawn_cli_process, to_runtime_args

from ._help import render_help
from ._output import OutputFormatter

logger = logging.getLogger(__name__)

_SECRET_ENV_VARS = ("PASSWORD", "HASHED_PASSWORD")


class MissingPasswordError(CliError):
    kind = "missing_password"

    def __init__(self) -> None:
        super().__init__(
            "Please pass in a password via the config file or environment "
            "variable ($PASSWORD or $HASHED_PASSWORD)"
        )


def _redacted(data: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(data)
    for key in ("password", "hashed-password"):
        if out.get(key):
            out[key] = REDACTED
    return out


def _listen_address(resolved: ResolvedConfiguration) -> str:
    if resolved.socket:
        return resolved.socket
    return format_address(Address(resolved.host, resolved.port), resolved.protocol)


def _summary_lines(resolved: ResolvedConfiguration) -> List[str]:
    lines = [
        f"codehost {__version__}",
        f"Using user-data-dir {resolved.user_data_dir}",
    ]
    if resolved.config:
        lines.append(f"Using config file {resolved.config}")
    suffix = " (randomized by --link)" if resolved.link is not None else ""
    lines.append(
        f"{resolved.protocol.upper()} server listening on {_listen_address(resolved)}{suffix}"
    )
    if resolved.auth == AuthType.PASSWORD.value:
        lines.append("  - Authentication is enabled")
        if resolved.using_env_password:
            lines.append("    - Using password from $PASSWORD")
        elif resolved.using_env_hashed_password:
            lines.append("    - Using password from $HASHED_PASSWORD")
        elif resolved.config:
            lines.append(f"    - Using password from {resolved.config}")
    else:
        lines.append("  - Authentication is disabled")
    if resolved.cert is not None:
        lines.append(f"  - Using certificate for HTTPS: {resolved.cert.value}")
    else:
        lines.append("  - Not serving HTTPS")
    if resolved.proxy_domain:
        lines.append(f"  - Proxying the following domains: {', '.join(resolved.proxy_domain)}")
    if resolved.enable:
        lines.append("Enabling the following experimental features:")
        known = {feature.value for feature in Feature}
        for name in resolved.enable:
            if name in known:
                lines.append(f"  - \"{name}\"")
            else:
                logger.warning("unknown experimental feature %r", name)
                lines.append(f"  X \"{name}\" (unknown feature)")
        lines.append(
            "  Experimental features carry no stability guarantees. Reproduce bugs "
            "with all of them turned off before reporting."
        )
    return lines


def _open_in_existing_instance(
    resolved: ResolvedConfiguration,
    endpoint: str,
    formatter: OutputFormatter,
    cwd: Optional[Union[str, Path]],
) -> int:
    payload = build_open_request(resolved, cwd)
    try:
        send_open_request(endpoint, payload, timeout=default_probe_timeout())
    except (OSError, http.client.HTTPException) as exc:
        formatter.error(exc, f"failed to reach running instance at {endpoint}: {exc}",
                        error_code="open_request")
        return 1
    formatter.success(
        {"endpoint": endpoint, "request": payload},
        f"Opened in existing instance at {endpoint}",
        status="reused",
    )
    return 0


def run(
    argv: List[str],
    *,
    formatter: OutputFormatter,
    env: Optional[MutableMapping[str, str]] = None,
    paths: Optional[RuntimePaths] = None,
    cwd: Optional[Union[str, Path]] = None,
) -> int:
    env = os.environ if env is None else env

    raw = parse(argv, cwd=cwd)
    if raw.get("help"):
        formatter.text(render_help())
        return 0
    if raw.get("version"):
        formatter.success({"version": __version__}, __version__)
        return 0

    paths = paths or RuntimePaths.from_environ(env)
    config_args = load_config_for(raw, env, paths)
    resolved = resolve(raw, env, config_args, paths=paths)
    configure_logging(resolved.log)

    # Child processes must not inherit the credentials.
    for var in _SECRET_ENV_VARS:
        env.pop(var, None)

    if should_spawn_cli_process(resolved):
        logger.debug("extension management requested; deferring to the editor CLI")
        formatter.success(
            {"runtime-args": _redacted(to_runtime_args(resolved, cwd).to_dict())},
            "Extension management is handled by the editor CLI",
            status="spawn_cli",
        )
        return 0

    endpoint = should_reuse_existing(resolved, paths=paths, env=env)
    if endpoint:
        return _open_in_existing_instance(resolved, endpoint, formatter, cwd)

    if (
        resolved.auth == AuthType.PASSWORD.value
        and not resolved.password
        and not resolved.hashed_password
    ):
        raise MissingPasswordError()

    lines = _summary_lines(resolved)
    formatter.success(
        {
            "address": _listen_address(resolved),
            "auth": resolved.auth_method(),
            "config": resolved.to_dict(),
            "runtime-args": _redacted(to_runtime_args(resolved, cwd).to_dict()),
        },
        "\n".join(lines),
    )
    return 0


def _json_requested(argv: List[str]) -> bool:
    """Whether ``--json`` was given as an option rather than a positional."""
    try:
        return bool(parse(argv).get("json"))
    except CliError:
        # Errors still honour --json when it precedes the option terminator.
        head = argv[: argv.index("--")] if "--" in argv else argv
        return "--json" in head


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the codehost CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    formatter = OutputFormatter(json_mode=_json_requested(argv))
    try:
        return run(argv, formatter=formatter)
    except CliError as exc:
        formatter.error(exc, error_code=exc.kind)
        return 1


__all__ = ["main", "run", "MissingPasswordError"]
