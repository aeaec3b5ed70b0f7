"""Defaults resolution.

Combines the command line, the environment and the config file into a
:class:`ResolvedConfiguration`. Resolution is a pure function of its
inputs: the environment is passed in as a mapping and nothing is cached
between calls, so resolving the same arguments against a changed
environment gives a fresh answer.

Per-option precedence is ``argv > env > config > default`` (see
``codehost.core.config.layers``), with these cascades on top:

- log level: argv ``--verbose`` -> trace; argv ``--log``; ``verbose`` from
  any other layer -> trace; then ``$LOG_LEVEL``, config ``log``, ``info``.
  ``verbose`` is then true exactly when the level is trace.
- host/port: folded through the bind address resolver, config file first
  and command line second.
- ``cert`` given without a value: certificate and key paths are derived
  from the data directory.
- proxy domains: case-folded, leading ``*.`` removed, de-duplicated.
- ``link`` overrides auth, host, port, cert and socket last of all.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from codehost.core.network.bind import (
    DEFAULT_ADDRESS,
    bind_addr_from_all_sources,
    port_from_environment,
)
from codehost.core.options.errors import MissingCompanionError
from codehost.core.options.parser import RawArguments
from codehost.core.options.registry import (
    Arity,
    AuthType,
    LogLevel,
    OptionalValue,
    iter_options,
)
from codehost.core.paths import RuntimePaths
from codehost.data import get_bundled_defaults

from .layers import (
    ARGV,
    CONFIG,
    DEFAULT,
    DERIVED,
    ArgumentsLayer,
    DefaultsLayer,
    EnvironmentLayer,
    LayerStack,
)
from .models import ResolvedConfiguration, attr_name

logger = logging.getLogger(__name__)


def build_layers(
    raw: RawArguments,
    env: Mapping[str, str],
    config_file: Optional[RawArguments],
    paths: RuntimePaths,
) -> LayerStack:
    return LayerStack(
        [
            ArgumentsLayer(raw, ARGV),
            EnvironmentLayer(env),
            ArgumentsLayer(config_file, CONFIG),
            DefaultsLayer(paths),
        ]
    )


def resolve_log_level(stack: LayerStack) -> Tuple[str, str]:
    """Return ``(level, source)`` following the verbose/log cascade."""
    argv = stack.layer(ARGV)
    if argv.get("verbose"):
        return LogLevel.TRACE.value, ARGV
    if argv.get("log"):
        return argv.get("log"), ARGV
    verbose, source = stack.lookup("verbose")
    if verbose:
        return LogLevel.TRACE.value, source or DEFAULT
    level, source = stack.lookup("log")
    if level:
        return level, source or DEFAULT
    return LogLevel.INFO.value, DEFAULT


def normalize_proxy_domains(domains: Iterable[str]) -> Tuple[str, ...]:
    """Case-fold, strip a leading ``*.`` and drop duplicates (first seen wins)."""
    seen: Dict[str, None] = {}
    for domain in domains:
        d = domain.strip().casefold()
        if d.startswith("*."):
            d = d[2:]
        if d:
            seen.setdefault(d, None)
    return tuple(seen)


def _address_sources(
    config_file: Mapping[str, Any],
    raw: Mapping[str, Any],
    env: Mapping[str, str],
) -> Tuple[str, str]:
    """Which layer ended up supplying host and port (mirrors the fold order)."""
    host_source = port_source = DEFAULT
    env_port = port_from_environment(env)
    for name, args in ((CONFIG, config_file), (ARGV, raw)):
        if args.get("bind-addr"):
            host_source = port_source = name
        if args.get("host"):
            host_source = name
        if env_port is not None:
            port_source = "env"
        if args.get("port") is not None:
            port_source = name
    return host_source, port_source


def _certificate_paths(paths: RuntimePaths, cert_host: Optional[str]) -> Tuple[str, str]:
    section = get_bundled_defaults().get("cert") or {}
    host = cert_host or str(section.get("default_host", "localhost"))
    base = Path(paths.data_dir)
    return str(base / f"{host}.crt"), str(base / f"{host}.key")


def resolve(
    raw: RawArguments,
    env: Optional[Mapping[str, str]] = None,
    config_file: Optional[RawArguments] = None,
    *,
    paths: Optional[RuntimePaths] = None,
) -> ResolvedConfiguration:
    """Resolve ``raw`` against the environment and config file.

    Args:
        raw: Arguments parsed from the command line.
        env: Environment snapshot (default: ``os.environ``).
        config_file: Arguments parsed from the config file, if any.
        paths: Runtime directories (default: derived from ``env``).

    Raises:
        MissingCompanionError: A certificate path is set but no key is set
            in any layer.
    """
    env = os.environ if env is None else env
    paths = paths or RuntimePaths.from_environ(env)
    config_args = config_file if config_file is not None else RawArguments()
    stack = build_layers(raw, env, config_args, paths)

    values: Dict[str, Any] = {}
    sources: Dict[str, str] = {}
    for spec in iter_options():
        value, source = stack.lookup(spec.name)
        if value is None:
            continue
        if spec.arity is Arity.REPEATABLE:
            value = tuple(value)
        values[spec.name] = value
        sources[spec.name] = source or DEFAULT

    if "extensions-dir" not in values:
        values["extensions-dir"] = str(Path(values["user-data-dir"]) / "extensions")
        sources["extensions-dir"] = DERIVED

    level, level_source = resolve_log_level(stack)
    values["log"] = level
    values["verbose"] = level == LogLevel.TRACE.value
    sources["log"] = sources["verbose"] = level_source

    addr = bind_addr_from_all_sources(config_args, raw, env=env, default=DEFAULT_ADDRESS)
    values["host"], values["port"] = addr.host, addr.port
    sources["host"], sources["port"] = _address_sources(config_args, raw, env)

    using_env_hashed_password = sources.get("hashed-password") == "env"
    using_env_password = sources.get("password") == "env" and not using_env_hashed_password

    cert = values.get("cert")
    if isinstance(cert, OptionalValue):
        if cert.is_empty:
            cert_path, key_path = _certificate_paths(paths, values.get("cert-host"))
            values["cert"] = OptionalValue(cert_path)
            values["cert-key"] = key_path
            sources["cert"] = sources["cert-key"] = DERIVED
        elif not values.get("cert-key"):
            raise MissingCompanionError("cert", "cert-key")

    if "proxy-domain" in values:
        values["proxy-domain"] = normalize_proxy_domains(values["proxy-domain"])

    if values.get("link") is not None:
        logger.debug("--link set: disabling auth, TLS and socket, binding localhost:0")
        values["auth"] = AuthType.NONE.value
        values["host"] = DEFAULT_ADDRESS.host
        values["port"] = 0
        values.pop("cert", None)
        values.pop("socket", None)
        for name in ("auth", "host", "port", "cert", "socket"):
            sources[name] = DERIVED

    if config_args.from_config_file:
        values["config"] = config_args.source
        sources.setdefault("config", CONFIG)

    resolved = ResolvedConfiguration(
        **{attr_name(name): value for name, value in values.items()},
        positionals=raw.positionals,
        using_env_password=using_env_password,
        using_env_hashed_password=using_env_hashed_password,
        sources=sources,
    )
    logger.debug("resolved configuration: %s", resolved.to_dict())
    return resolved


__all__ = [
    "build_layers",
    "resolve",
    "resolve_log_level",
    "normalize_proxy_domains",
]
