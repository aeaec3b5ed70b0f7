import shutil
import sys
import tempfile
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'codehost' and the repo root importable for 'tests.helpers'
for p in (SRC_ROOT, REPO_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from codehost.core.logging_setup import reset_logging_for_tests
from codehost.core.paths import RuntimePaths
from tests.helpers.instance_server import InstanceServer

# Environment variables codehost reads. A developer shell (or a terminal opened
# inside a running instance) may set any of them, so every test starts without.
_LEAK_PRONE_ENV_KEYS = [
    "PASSWORD",
    "HASHED_PASSWORD",
    "LOG_LEVEL",
    "PORT",
    "VSCODE_IPC_HOOK_CLI",
    "CODEHOST_CONFIG",
    "XDG_DATA_HOME",
    "XDG_CONFIG_HOME",
]


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    for key in _LEAK_PRONE_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    reset_logging_for_tests()


@pytest.fixture
def runtime_paths(tmp_path) -> RuntimePaths:
    """Isolated data/config/runtime directories below tmp_path."""
    paths = RuntimePaths.under(tmp_path / "codehost")
    for d in (paths.data_dir, paths.config_dir, paths.runtime_dir):
        d.mkdir(parents=True, exist_ok=True)
    return paths


@pytest.fixture
def socket_dir():
    """Short directory for Unix sockets (tmp_path can exceed the path limit)."""
    path = Path(tempfile.mkdtemp(prefix="ch-"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def instance_server(socket_dir):
    server = InstanceServer(socket_dir / "ipc.sock").start()
    yield server
    server.stop()


@pytest.fixture
def garbled_instance_server(socket_dir):
    """A socket that answers with a malformed HTTP status line."""
    server = InstanceServer(socket_dir / "bad.sock", raw_reply=b"HTTP/1.1 abc OK\r\n\r\n").start()
    yield server
    server.stop()
