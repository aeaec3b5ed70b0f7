"""Configuration layers.

A resolved configuration is built by querying an ordered list of layers per
option and taking the first one that has a value:

1. ``argv``    - options given on the command line
2. ``env``     - environment bindings ($PASSWORD, $HASHED_PASSWORD,
                 $LOG_LEVEL, $PORT)
3. ``config``  - the config file
4. ``default`` - bundled defaults (``codehost.data/config/defaults.yaml``)
                 plus directories derived from :class:`RuntimePaths`

Each layer is independently testable and new layers can be slotted in
without touching the resolver's per-option logic.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from codehost.core.network.bind import port_from_environment
from codehost.core.options.parser import RawArguments
from codehost.core.options.registry import LOG_LEVELS
from codehost.core.paths import RuntimePaths
from codehost.data import get_bundled_defaults

logger = logging.getLogger(__name__)

ARGV = "argv"
ENV = "env"
CONFIG = "config"
DEFAULT = "default"
DERIVED = "derived"


class Layer(ABC):
    """One source of option values."""

    name: str = ""

    @abstractmethod
    def get(self, option: str) -> Any:
        """Return the value for ``option``, or None when this layer has none."""

    def has(self, option: str) -> bool:
        return self.get(option) is not None


class ArgumentsLayer(Layer):
    """Parsed arguments from argv or from a config file."""

    def __init__(self, args: Optional[RawArguments], name: str) -> None:
        self.args = args if args is not None else RawArguments()
        self.name = name

    def get(self, option: str) -> Any:
        return self.args.get(option)


class EnvironmentLayer(Layer):
    """Environment variables bound to specific options.

    Empty variables count as unset. An unknown ``$LOG_LEVEL`` or a
    non-numeric ``$PORT`` is ignored rather than treated as an error.
    """

    name = ENV

    BINDINGS: Dict[str, str] = {
        "password": "PASSWORD",
        "hashed-password": "HASHED_PASSWORD",
        "log": "LOG_LEVEL",
        "port": "PORT",
    }

    def __init__(self, env: Mapping[str, str]) -> None:
        self.env = env

    def get(self, option: str) -> Any:
        var = self.BINDINGS.get(option)
        if var is None:
            return None
        if option == "port":
            return port_from_environment(self.env)
        raw = self.env.get(var)
        if not raw:
            return None
        if option == "log" and raw not in LOG_LEVELS:
            logger.debug("ignoring unknown $LOG_LEVEL=%r", raw)
            return None
        return raw


class DefaultsLayer(Layer):
    """Bundled defaults plus path defaults from :class:`RuntimePaths`."""

    name = DEFAULT

    def __init__(self, paths: RuntimePaths, bundled: Optional[Mapping[str, Any]] = None) -> None:
        if bundled is None:
            section = get_bundled_defaults().get("options")
            bundled = section if isinstance(section, dict) else {}
        values: Dict[str, Any] = dict(bundled)
        values.setdefault("user-data-dir", str(paths.data_dir))
        self.values = values

    def get(self, option: str) -> Any:
        value = self.values.get(option)
        if isinstance(value, list):
            return tuple(value)
        return value


class LayerStack:
    """Layers in precedence order, highest first."""

    def __init__(self, layers: Sequence[Layer]) -> None:
        self.layers: List[Layer] = list(layers)

    def layer(self, name: str) -> Layer:
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(name)

    def lookup(self, option: str) -> Tuple[Any, Optional[str]]:
        """Return ``(value, layer_name)`` from the first layer with a value."""
        for layer in self.layers:
            value = layer.get(option)
            if value is not None:
                return value, layer.name
        return None, None


__all__ = [
    "ARGV",
    "ENV",
    "CONFIG",
    "DEFAULT",
    "DERIVED",
    "Layer",
    "ArgumentsLayer",
    "EnvironmentLayer",
    "DefaultsLayer",
    "LayerStack",
]
