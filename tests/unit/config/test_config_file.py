from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest
import yaml

from codehost.core.config import (
    config_mapping_to_argv,
    default_config_file_text,
    load_config_for,
    read_config_file,
    resolve_config_path,
)
from codehost.core.config.config_file import config_args_from_mapping, generate_password
from codehost.core.options import ConfigFileError, InvalidEnumValueError, OptionalValue, parse


def test_default_config_file_text() -> None:
    assert default_config_file_text("s3cret-pw") == (
        "bind-addr: 127.0.0.1:8080\n"
        "auth: password\n"
        "password: s3cret-pw\n"
        "cert: false\n"
    )


def test_generate_password_is_random_hex() -> None:
    first, second = generate_password(), generate_password()
    assert len(first) == 24
    int(first, 16)
    assert first != second


def test_config_mapping_to_argv() -> None:
    mapping = {
        "auth": "none",
        "port": 9000,
        "open": True,
        "cert": None,
        "disable-telemetry": False,
        "proxy-domain": ["a.com", "b.com"],
    }
    assert config_mapping_to_argv(mapping) == [
        "--auth=none",
        "--port=9000",
        "--open",
        "--cert",
        "--proxy-domain=a.com",
        "--proxy-domain=b.com",
    ]


class TestResolveConfigPath:
    def test_argv_wins(self, runtime_paths, tmp_path: Path) -> None:
        raw = parse(["--config", "mine.yaml"], cwd=tmp_path)
        env = {"CODEHOST_CONFIG": "/elsewhere.yaml"}
        assert resolve_config_path(raw, env, runtime_paths) == tmp_path / "mine.yaml"

    def test_env_var(self, runtime_paths) -> None:
        env = {"CODEHOST_CONFIG": "/elsewhere.yaml"}
        assert resolve_config_path(parse([]), env, runtime_paths) == Path("/elsewhere.yaml")

    def test_default_location(self, runtime_paths) -> None:
        assert resolve_config_path(parse([]), {}, runtime_paths) == runtime_paths.config_dir / "config.yaml"


class TestReadConfigFile:
    def test_creates_default_file_once(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        args = read_config_file(path)

        assert path.exists()
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["auth"] == "password"
        assert data["cert"] is False
        assert args["password"] == data["password"]
        assert args["bind-addr"] == "127.0.0.1:8080"
        assert "cert" not in args
        assert args.source == str(path)

        # An existing file is never overwritten.
        path.write_text("auth: none\n", encoding="utf-8")
        assert dict(read_config_file(path)) == {"auth": "none"}

    def test_missing_file_without_create(self, tmp_path: Path) -> None:
        path = tmp_path / "absent.yaml"
        args = read_config_file(path, create=False)
        assert dict(args) == {}
        assert args.from_config_file
        assert not path.exists()

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert dict(read_config_file(path)) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("auth: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigFileError, match="invalid YAML"):
            read_config_file(path)

    def test_top_level_must_be_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- auth\n- none\n", encoding="utf-8")
        with pytest.raises(ConfigFileError, match=f"error reading {path}"):
            read_config_file(path)

    def test_schema_rejects_nested_mappings(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("auth:\n  type: none\n", encoding="utf-8")
        with pytest.raises(ConfigFileError, match="auth"):
            read_config_file(path)

    def test_option_errors_name_the_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("auth: sometimes\n", encoding="utf-8")
        with pytest.raises(InvalidEnumValueError) as exc:
            read_config_file(path)
        assert str(exc.value) == f"error reading {path}: --auth valid values: [password, none]"

    def test_reading_a_directory_propagates(self, tmp_path: Path) -> None:
        with pytest.raises(IsADirectoryError):
            read_config_file(tmp_path, create=False)

    def test_secrets_and_relative_paths(self, tmp_path: Path) -> None:
        path = tmp_path / "cfg" / "config.yaml"
        path.parent.mkdir()
        path.write_text(
            "hashed-password: $argon2i$v=19$m=4096\n"
            "cert: certs/server.crt\n"
            "user-data-dir: data\n",
            encoding="utf-8",
        )
        args = read_config_file(path)
        assert args["hashed-password"] == "$argon2i$v=19$m=4096"
        assert args["cert"] == OptionalValue(str(tmp_path / "cfg" / "certs" / "server.crt"))
        assert args["user-data-dir"] == str(tmp_path / "cfg" / "data")


def test_config_args_from_mapping_none(tmp_path: Path) -> None:
    args = config_args_from_mapping(None, tmp_path / "c.yaml")
    assert dict(args) == {}
    assert args.source == str(tmp_path / "c.yaml")


def test_load_config_for_uses_env_var(runtime_paths, tmp_path: Path) -> None:
    path = tmp_path / "from-env.yaml"
    path.write_text("port: 9000\n", encoding="utf-8")
    args = load_config_for(parse([]), {"CODEHOST_CONFIG": str(path)}, runtime_paths)
    assert args["port"] == 9000
    assert not runtime_paths.default_config_file.exists()
