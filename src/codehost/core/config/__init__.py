"""Layered configuration: command line, environment, config file, defaults."""
from .config_file import (
    CONFIG_ENV_VAR,
    config_mapping_to_argv,
    default_config_file_text,
    load_config_for,
    read_config_file,
    resolve_config_path,
)
from .layers import (
    ArgumentsLayer,
    DefaultsLayer,
    EnvironmentLayer,
    Layer,
    LayerStack,
)
from .models import ResolvedConfiguration
from .resolver import normalize_proxy_domains, resolve, resolve_log_level

__all__ = [
    "CONFIG_ENV_VAR",
    "config_mapping_to_argv",
    "default_config_file_text",
    "load_config_for",
    "read_config_file",
    "resolve_config_path",
    "ArgumentsLayer",
    "DefaultsLayer",
    "EnvironmentLayer",
    "Layer",
    "LayerStack",
    "ResolvedConfiguration",
    "normalize_proxy_domains",
    "resolve",
    "resolve_log_level",
]
