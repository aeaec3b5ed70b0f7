"""Config file handling.

The config file is a YAML mapping of long option names to values. It is the
lowest-precedence user layer. On first run a default file with a freshly
generated password is written so the server is never left unprotected.

Location (highest to lowest):
1. ``--config`` on the command line
2. ``$CODEHOST_CONFIG``
3. ``<config_dir>/config.yaml`` from :class:`RuntimePaths`
"""
from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Any, List, Mapping

import yaml

from codehost.core.options.errors import ConfigFileError
from codehost.core.options.parser import RawArguments, parse
from codehost.core.paths import RuntimePaths
from codehost.core.schemas import SchemaValidationError, validate_payload
from codehost.core.utils.io import dump_yaml_string, read_yaml, write_text_exclusive

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CODEHOST_CONFIG"
SCHEMA_NAME = "config-file.schema"


def generate_password() -> str:
    """24 hex characters of fresh randomness."""
    return secrets.token_hex(12)


def default_config_file_text(password: str) -> str:
    return dump_yaml_string(
        {
            "bind-addr": "127.0.0.1:8080",
            "auth": "password",
            "password": password,
            "cert": False,
        }
    )


def resolve_config_path(
    raw: Mapping[str, Any],
    env: Mapping[str, str],
    paths: RuntimePaths,
) -> Path:
    explicit = raw.get("config")
    if explicit:
        return Path(explicit)
    from_env = env.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()
    return paths.default_config_file


def ensure_config_file(path: Path) -> bool:
    """Write the default config file unless one exists. Returns True if written."""
    written = write_text_exclusive(path, default_config_file_text(generate_password()))
    if written:
        logger.info("Wrote default config file to %s", path)
    return written


def config_mapping_to_argv(mapping: Mapping[str, Any]) -> List[str]:
    """Convert a config mapping into ``--name[=value]`` tokens.

    ``true`` and null become a bare ``--name``; ``false`` is dropped; lists
    repeat the option once per item.
    """
    tokens: List[str] = []
    for name, value in mapping.items():
        if value is True or value is None:
            tokens.append(f"--{name}")
        elif value is False:
            continue
        elif isinstance(value, list):
            tokens.extend(f"--{name}={item}" for item in value)
        else:
            tokens.append(f"--{name}={value}")
    return tokens


def config_args_from_mapping(data: Any, path: Path) -> RawArguments:
    """Validate a loaded config document and parse it into arguments."""
    if data is None:
        return RawArguments(source=str(path))
    if not isinstance(data, dict):
        raise ConfigFileError(f"error reading {path}: invalid config: {data!r}")
    try:
        validate_payload(data, SCHEMA_NAME)
    except SchemaValidationError as exc:
        raise ConfigFileError(f"error reading {path}: {exc}") from exc
    return parse(
        config_mapping_to_argv(data),
        config_file=path,
        check_companion_options=False,
    )


def read_config_file(path: Path, *, create: bool = True) -> RawArguments:
    """Load the config file at ``path`` into arguments.

    A missing file is created with defaults when ``create`` is set and read
    as empty otherwise. Other I/O errors propagate.

    Raises:
        ConfigFileError: Invalid YAML or an invalid option mapping.
        CliError: An option in the file failed to parse.
    """
    path = Path(path)
    if create:
        ensure_config_file(path)
    try:
        data = read_yaml(path, default=None, raise_on_error=True)
    except FileNotFoundError:
        if create:
            raise
        return RawArguments(source=str(path))
    except yaml.YAMLError as exc:
        raise ConfigFileError(f"error reading {path}: invalid YAML: {exc}") from exc
    return config_args_from_mapping(data, path)


def load_config_for(
    raw: Mapping[str, Any],
    env: Mapping[str, str],
    paths: RuntimePaths,
    *,
    create: bool = True,
) -> RawArguments:
    """Locate and read the config file for an invocation."""
    return read_config_file(resolve_config_path(raw, env, paths), create=create)


__all__ = [
    "CONFIG_ENV_VAR",
    "generate_password",
    "default_config_file_text",
    "resolve_config_path",
    "ensure_config_file",
    "config_mapping_to_argv",
    "config_args_from_mapping",
    "read_config_file",
    "load_config_for",
]
