"""Test helper modules for the codehost test suite.

- instance_server: a stand-in for a running instance listening on its IPC socket
"""
from __future__ import annotations

from tests.helpers.instance_server import InstanceServer

__all__ = ["InstanceServer"]
