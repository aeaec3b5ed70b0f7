from __future__ import annotations

from codehost.core.config.layers import (
    ArgumentsLayer,
    DefaultsLayer,
    EnvironmentLayer,
    LayerStack,
)
from codehost.core.options import RawArguments, parse


def test_arguments_layer_reads_parsed_values() -> None:
    layer = ArgumentsLayer(parse(["--auth", "none"]), "argv")
    assert layer.get("auth") == "none"
    assert layer.has("auth")
    assert not layer.has("host")


def test_arguments_layer_accepts_none() -> None:
    layer = ArgumentsLayer(None, "config")
    assert layer.get("auth") is None


def test_environment_layer_bindings() -> None:
    layer = EnvironmentLayer(
        {"PASSWORD": "pw", "HASHED_PASSWORD": "hash", "LOG_LEVEL": "debug", "PORT": "9000", "HOST": "x"}
    )
    assert layer.get("password") == "pw"
    assert layer.get("hashed-password") == "hash"
    assert layer.get("log") == "debug"
    assert layer.get("port") == 9000
    assert layer.get("host") is None


def test_environment_layer_ignores_empty_and_invalid_values() -> None:
    layer = EnvironmentLayer({"PASSWORD": "", "LOG_LEVEL": "bogus", "PORT": "eighty"})
    assert layer.get("password") is None
    assert layer.get("log") is None
    assert layer.get("port") is None


def test_defaults_layer_uses_bundled_options(runtime_paths) -> None:
    layer = DefaultsLayer(runtime_paths)
    assert layer.get("auth") == "password"
    assert layer.get("host") == "localhost"
    assert layer.get("port") == 8080
    assert layer.get("log") == "info"
    assert layer.get("proxy-domain") == ()
    assert layer.get("user-data-dir") == str(runtime_paths.data_dir)


def test_defaults_layer_accepts_override_mapping(runtime_paths) -> None:
    layer = DefaultsLayer(runtime_paths, bundled={"auth": "none"})
    assert layer.get("auth") == "none"
    assert layer.get("host") is None


def test_stack_returns_first_layer_with_a_value(runtime_paths) -> None:
    stack = LayerStack(
        [
            ArgumentsLayer(RawArguments({"log": "error"}), "argv"),
            EnvironmentLayer({"LOG_LEVEL": "debug", "PASSWORD": "pw"}),
            ArgumentsLayer(RawArguments({"password": "cfg", "host": "h"}, source="/c.yaml"), "config"),
            DefaultsLayer(runtime_paths),
        ]
    )
    assert stack.lookup("log") == ("error", "argv")
    assert stack.lookup("password") == ("pw", "env")
    assert stack.lookup("host") == ("h", "config")
    assert stack.lookup("auth") == ("password", "default")
    assert stack.lookup("locale") == (None, None)
    assert stack.layer("env").name == "env"
