"""Liveness probing of a recorded instance endpoint.

A running instance records the path of its IPC socket in a small file. A
later invocation reads that file and, when it needs to know, connects to
the socket to tell a live instance from a stale record. Connection
failures of any kind are an expected outcome here and are reported as
"unreachable", never raised.
"""
from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from codehost.core.utils.io import read_text_if_exists

logger = logging.getLogger(__name__)


class ProbeStatus(str, Enum):
    NO_ENDPOINT = "no_endpoint"
    UNREACHABLE = "unreachable"
    LIVE = "live"


@dataclass(frozen=True)
class InstanceProbeResult:
    """Outcome of a probe; ``endpoint`` is set only when the instance is live."""

    status: ProbeStatus
    endpoint: Optional[str] = None

    @property
    def is_live(self) -> bool:
        return self.status is ProbeStatus.LIVE


def read_endpoint_file(path: Path) -> Optional[str]:
    """Return the endpoint recorded in ``path``, or None if there is none.

    Only a missing (or empty) file means "none"; any other read failure,
    such as ``path`` being a directory, propagates.
    """
    contents = read_text_if_exists(path)
    if contents is None:
        return None
    return contents.strip() or None


def probe_endpoint(endpoint: str, timeout: float) -> bool:
    """Try to connect to the Unix socket ``endpoint`` within ``timeout`` seconds."""
    family = getattr(socket, "AF_UNIX", None)
    if family is None:
        logger.debug("unix sockets unavailable; treating %s as unreachable", endpoint)
        return False

    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.settimeout(max(0.01, float(timeout)))
        sock.connect(endpoint)
        return True
    except (OSError, ValueError) as exc:
        logger.debug("endpoint %s is not live: %s", endpoint, exc)
        return False
    finally:
        sock.close()


def probe_recorded_instance(endpoint_file: Path, timeout: float) -> InstanceProbeResult:
    endpoint = read_endpoint_file(endpoint_file)
    if endpoint is None:
        return InstanceProbeResult(ProbeStatus.NO_ENDPOINT)
    if probe_endpoint(endpoint, timeout):
        return InstanceProbeResult(ProbeStatus.LIVE, endpoint)
    return InstanceProbeResult(ProbeStatus.UNREACHABLE)


__all__ = [
    "ProbeStatus",
    "InstanceProbeResult",
    "read_endpoint_file",
    "probe_endpoint",
    "probe_recorded_instance",
]
