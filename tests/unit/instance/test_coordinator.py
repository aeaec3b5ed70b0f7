from __future__ import annotations

from pathlib import Path

import pytest

from codehost.core.config import resolve
from codehost.core.instance import (
    ProbeStatus,
    default_probe_timeout,
    probe_endpoint,
    probe_recorded_instance,
    read_endpoint_file,
    should_reuse_existing,
)
from codehost.core.options import parse


def _resolved(runtime_paths, *argv: str, env=None):
    return resolve(parse(list(argv)), env=env or {}, paths=runtime_paths)


class TestReadEndpointFile:
    def test_returns_contents(self, tmp_path: Path) -> None:
        path = tmp_path / "vscode-ipc"
        path.write_text("/tmp/some.sock\n", encoding="utf-8")
        assert read_endpoint_file(path) == "/tmp/some.sock"
        assert read_endpoint_file(path) == read_endpoint_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        assert read_endpoint_file(tmp_path / "not-a-file") is None

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "vscode-ipc"
        path.write_text("  \n", encoding="utf-8")
        assert read_endpoint_file(path) is None

    def test_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(IsADirectoryError):
            read_endpoint_file(tmp_path)


class TestProbe:
    def test_live_socket(self, instance_server) -> None:
        assert probe_endpoint(str(instance_server.socket_path), timeout=1.0) is True

    def test_missing_socket(self, socket_dir: Path) -> None:
        assert probe_endpoint(str(socket_dir / "gone.sock"), timeout=1.0) is False

    def test_plain_file_is_not_live(self, socket_dir: Path) -> None:
        path = socket_dir / "file"
        path.write_text("x", encoding="utf-8")
        assert probe_endpoint(str(path), timeout=1.0) is False

    def test_recorded_instance_states(self, runtime_paths, instance_server) -> None:
        endpoint_file = runtime_paths.endpoint_file
        assert probe_recorded_instance(endpoint_file, 1.0).status is ProbeStatus.NO_ENDPOINT

        endpoint_file.write_text(str(instance_server.socket_path.parent / "stale.sock"), encoding="utf-8")
        result = probe_recorded_instance(endpoint_file, 1.0)
        assert result.status is ProbeStatus.UNREACHABLE
        assert not result.is_live
        assert result.endpoint is None

        endpoint_file.write_text(str(instance_server.socket_path), encoding="utf-8")
        result = probe_recorded_instance(endpoint_file, 1.0)
        assert result.is_live
        assert result.endpoint == str(instance_server.socket_path)


def test_default_probe_timeout() -> None:
    assert default_probe_timeout() == 2.0


class TestShouldReuseExisting:
    def test_inherited_endpoint_always_wins(self, runtime_paths) -> None:
        env = {"VSCODE_IPC_HOOK_CLI": "test"}
        assert should_reuse_existing(_resolved(runtime_paths), paths=runtime_paths, env=env) == "test"

        resolved = _resolved(runtime_paths, "--port", "8081", "./file")
        assert should_reuse_existing(resolved, paths=runtime_paths, env=env) == "test"

    @pytest.mark.parametrize("flag", ["--reuse-window", "--new-window"])
    def test_window_flags_return_recorded_endpoint_unchecked(self, runtime_paths, flag: str) -> None:
        resolved = _resolved(runtime_paths, flag)
        assert should_reuse_existing(resolved, paths=runtime_paths, env={}) is None

        runtime_paths.endpoint_file.write_text("test", encoding="utf-8")
        assert should_reuse_existing(resolved, paths=runtime_paths, env={}) == "test"

        resolved = _resolved(runtime_paths, flag, "--port", "8081")
        assert should_reuse_existing(resolved, paths=runtime_paths, env={}) == "test"

    def test_probe_decides_for_positionals(self, runtime_paths, socket_dir: Path, instance_server) -> None:
        assert should_reuse_existing(_resolved(runtime_paths), paths=runtime_paths, env={}) is None

        with_file = _resolved(runtime_paths, "./file")
        assert should_reuse_existing(with_file, paths=runtime_paths, env={}) is None

        runtime_paths.endpoint_file.write_text(str(socket_dir / "socket"), encoding="utf-8")
        assert should_reuse_existing(with_file, paths=runtime_paths, env={}, timeout=1.0) is None

        runtime_paths.endpoint_file.write_text(str(instance_server.socket_path), encoding="utf-8")
        assert should_reuse_existing(with_file, paths=runtime_paths, env={}, timeout=1.0) == str(
            instance_server.socket_path
        )

        with_port = _resolved(runtime_paths, "./file", "--port", "8081")
        assert should_reuse_existing(with_port, paths=runtime_paths, env={}) is None

    def test_env_port_is_not_an_explicit_port(self, runtime_paths, instance_server) -> None:
        runtime_paths.endpoint_file.write_text(str(instance_server.socket_path), encoding="utf-8")
        resolved = _resolved(runtime_paths, "./file", env={"PORT": "9000"})
        assert should_reuse_existing(resolved, paths=runtime_paths, env={}, timeout=1.0) == str(
            instance_server.socket_path
        )
