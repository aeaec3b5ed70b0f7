"""Forward an open request to a running instance over its IPC socket."""
from __future__ import annotations

import http.client
import json
import logging
import os
import socket
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from codehost.core.config.models import ResolvedConfiguration
from codehost.core.options.errors import CliError

logger = logging.getLogger(__name__)


class OpenRequestError(CliError):
    """The invocation cannot be expressed as an open request."""

    kind = "open_request"


class UnixHTTPConnection(http.client.HTTPConnection):
    """HTTP/1.1 connection over a Unix domain socket."""

    def __init__(self, socket_path: str, timeout: float) -> None:
        super().__init__("localhost", timeout=timeout)
        self.socket_path = socket_path

    def connect(self) -> None:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self.socket_path)
        except OSError:
            sock.close()
            raise
        self.sock = sock


def build_open_request(
    resolved: ResolvedConfiguration,
    cwd: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """Build the ``open`` payload for the positional paths of an invocation.

    Raises:
        OpenRequestError: ``--new-window`` with file paths, or no paths at all.
    """
    base = str(cwd) if cwd is not None else os.getcwd()
    file_uris: List[str] = []
    folder_uris: List[str] = []
    for entry in resolved.positionals:
        fp = os.path.normpath(os.path.join(base, entry))
        if os.path.isfile(fp):
            file_uris.append(fp)
        else:
            folder_uris.append(fp)

    if resolved.new_window and file_uris:
        raise OpenRequestError("--new-window can only be used with folder paths")
    if not file_uris and not folder_uris:
        raise OpenRequestError("Please specify at least one file or folder")

    return {
        "type": "open",
        "folderURIs": folder_uris,
        "fileURIs": file_uris,
        "forceReuseWindow": resolved.reuse_window,
        "forceNewWindow": resolved.new_window,
    }


def send_open_request(endpoint: str, payload: Dict[str, Any], *, timeout: float) -> str:
    """POST ``payload`` as JSON to ``/`` on ``endpoint``; return the response body.

    Connection and protocol errors propagate to the caller.
    """
    conn = UnixHTTPConnection(endpoint, timeout)
    try:
        conn.request(
            "POST",
            "/",
            body=json.dumps(payload),
            headers={"Content-Type": "application/json"},
        )
        response = conn.getresponse()
        body = response.read().decode("utf-8", errors="replace")
    finally:
        conn.close()
    logger.debug("got message from running instance: %s", body)
    return body


__all__ = [
    "OpenRequestError",
    "UnixHTTPConnection",
    "build_open_request",
    "send_open_request",
]
