"""Bind address computation.

The listening address comes from several competing sources. Applied in
order, each later source overriding only the field it names:

1. the incoming default (``localhost:8080`` unless the caller says otherwise)
2. ``bind-addr`` (``host:port``), which sets both fields
3. ``host``
4. ``$PORT``
5. ``port``

So an explicit ``port`` beats ``$PORT``, ``$PORT`` beats the port inside
``bind-addr``, and host and port never travel as a pair except through
``bind-addr``.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

from codehost.core.options.errors import InvalidValueError

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"[0-9]+")

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
MAX_PORT = 65535


@dataclass(frozen=True)
class Address:
    """Host and port to listen on. Port 0 asks the OS for any free port."""

    host: str
    port: int

    def __post_init__(self) -> None:
        if not isinstance(self.port, int) or not 0 <= self.port <= MAX_PORT:
            raise InvalidValueError(
                f"port must be between 0 and {MAX_PORT}, got {self.port!r}",
                option="port",
            )

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"


DEFAULT_ADDRESS = Address(DEFAULT_HOST, DEFAULT_PORT)


def parse_bind_addr(value: str) -> Address:
    """Parse ``host:port`` (IPv6 hosts in brackets). A missing port means 8080."""
    try:
        parts = urlsplit(f"http://{value}")
        host = parts.hostname
        port = parts.port
    except ValueError as exc:
        raise InvalidValueError(
            f"--bind-addr must be host:port with a numeric port, got {value!r}",
            option="bind-addr",
        ) from exc
    if not host:
        raise InvalidValueError(f"--bind-addr is missing a host: {value!r}", option="bind-addr")
    return Address(host, DEFAULT_PORT if port is None else port)


def port_from_environment(env: Mapping[str, str]) -> Optional[int]:
    """Return ``$PORT`` as an int, or None when unset or not a number."""
    raw = env.get("PORT")
    if raw is None or not str(raw).strip():
        return None
    raw = str(raw).strip()
    if not _DIGITS_RE.fullmatch(raw):
        logger.debug("ignoring non-numeric $PORT=%r", raw)
        return None
    return int(raw, 10)


def resolve_address(
    default: Address,
    args: Mapping[str, Any],
    env: Mapping[str, str],
) -> Address:
    """Apply one source of ``bind-addr``/``host``/``port`` on top of ``default``.

    ``args`` is any mapping of option name to value (argv, config file).
    """
    addr = default
    bind_addr = args.get("bind-addr")
    if bind_addr:
        addr = parse_bind_addr(bind_addr)
    host = args.get("host")
    if host:
        addr = replace(addr, host=host)
    env_port = port_from_environment(env)
    if env_port is not None:
        addr = replace(addr, port=env_port)
    port = args.get("port")
    if port is not None:
        addr = replace(addr, port=port)
    return addr


def bind_addr_from_all_sources(
    *sources: Mapping[str, Any],
    env: Mapping[str, str],
    default: Address = DEFAULT_ADDRESS,
) -> Address:
    """Fold :func:`resolve_address` over ``sources``, lowest precedence first."""
    addr = default
    for source in sources:
        addr = resolve_address(addr, source, env)
    return addr


def format_address(addr: Address, protocol: str = "http") -> str:
    return f"{protocol}://{addr}"


__all__ = [
    "Address",
    "DEFAULT_ADDRESS",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "parse_bind_addr",
    "port_from_environment",
    "resolve_address",
    "bind_addr_from_all_sources",
    "format_address",
]
