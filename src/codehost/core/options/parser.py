"""Argument vector scanner.

Turns a list of command-line tokens into :class:`RawArguments` using the
option registry. The parser never applies defaults, so callers can tell
exactly which options the user supplied; defaults are layered on later by
``codehost.core.config.resolver``.

The same parser reads config files: the file's mapping is converted into
``--name=value`` tokens and parsed with ``config_file`` set, which permits
secret options and resolves relative paths against the file's directory.
"""
from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .errors import (
    AmbiguousOptionLikeValueError,
    CliError,
    InvalidEnumValueError,
    InvalidValueError,
    MissingCompanionError,
    MissingValueError,
    SecretOnCommandLineError,
    UnknownOptionError,
)
from .registry import Arity, Domain, OptionalValue, OptionSpec, find_short, get_option, has_option

logger = logging.getLogger(__name__)

ARGV_SOURCE = "argv"
REDACTED = "<redacted>"

_INTEGER_RE = re.compile(r"[-+]?[0-9]+")


def split_on_first_equals(text: str) -> Tuple[str, Optional[str]]:
    """Split ``name=value`` on the first ``=`` only.

    Returns ``(text, None)`` when there is no ``=`` at all, so an embedded
    empty value (``auth=``) stays distinguishable from no value.
    """
    name, sep, value = text.partition("=")
    return (name, value) if sep else (name, None)


class RawArguments(Mapping):
    """Options supplied by one source (argv or a config file).

    Keys are canonical option names and are present only when supplied.
    Repeatable options hold tuples. Instances are immutable.
    """

    __slots__ = ("_values", "_positionals", "_source")

    def __init__(
        self,
        values: Optional[Dict[str, Any]] = None,
        positionals: Sequence[str] = (),
        *,
        source: str = ARGV_SOURCE,
    ) -> None:
        frozen: Dict[str, Any] = {}
        for key, value in (values or {}).items():
            frozen[key] = tuple(value) if isinstance(value, list) else value
        self._values = frozen
        self._positionals = tuple(positionals)
        self._source = source

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RawArguments({self.to_dict()!r}, source={self._source!r})"

    @property
    def positionals(self) -> Tuple[str, ...]:
        return self._positionals

    @property
    def source(self) -> str:
        return self._source

    @property
    def from_config_file(self) -> bool:
        return self._source != ARGV_SOURCE

    def to_dict(self, *, redact: bool = True) -> Dict[str, Any]:
        """Plain dict for logging/display; secrets are masked by default."""
        out: Dict[str, Any] = {}
        for key, value in self._values.items():
            if redact and get_option(key).forbidden_on_command_line:
                out[key] = REDACTED
            elif isinstance(value, OptionalValue):
                out[key] = {"value": value.value}
            elif isinstance(value, tuple):
                out[key] = list(value)
            else:
                out[key] = value
        if self._positionals:
            out["_"] = list(self._positionals)
        return out


class _Scanner:
    """Single left-to-right pass over an argument vector."""

    def __init__(self, argv: Sequence[str], *, allow_secrets: bool, base_dir: Path) -> None:
        self.argv = list(argv)
        self.allow_secrets = allow_secrets
        self.base_dir = base_dir
        self.index = 0
        self.values: Dict[str, Any] = {}
        self.positionals: List[str] = []

    def run(self) -> None:
        ended = False
        while self.index < len(self.argv):
            arg = self.argv[self.index]
            self.index += 1

            if ended or not arg.startswith("-") or arg == "-":
                self.positionals.append(arg)
                continue
            if arg == "--":
                ended = True
                continue

            if arg.startswith("--"):
                name, value = split_on_first_equals(arg[2:])
                if not has_option(name):
                    raise UnknownOptionError(f"--{name}")
                self._apply(get_option(name), value)
                continue

            alias = arg[1:]
            spec = find_short(alias)
            if spec is not None:
                self._apply(spec, None)
                continue
            bundle = [find_short(ch) for ch in alias]
            if any(s is None or not s.is_flag for s in bundle):
                raise UnknownOptionError(arg)
            for flag in bundle:
                self._apply(flag, None)

    def _next_value(self, spec: OptionSpec) -> Optional[str]:
        """Consume the following token as a value if it is not option-like."""
        if self.index >= len(self.argv):
            if spec.is_optional_value:
                return None
            raise MissingValueError(spec.name)
        nxt = self.argv[self.index]
        if nxt.startswith("-"):
            if spec.is_optional_value:
                return None
            raise AmbiguousOptionLikeValueError(spec.name, nxt)
        self.index += 1
        return nxt

    def _apply(self, spec: OptionSpec, value: Optional[str]) -> None:
        name = spec.name
        if spec.forbidden_on_command_line and not self.allow_secrets:
            raise SecretOnCommandLineError(name, spec.env_var or name.upper())

        if spec.is_flag:
            if value is not None:
                raise InvalidValueError(f"--{name} does not take a value", option=name)
            self.values[name] = True
            return

        if value is None:
            value = self._next_value(spec)

        if not value:
            if spec.is_optional_value:
                self.values[name] = OptionalValue(None)
                return
            raise MissingValueError(name)

        # Config files write ``cert: false`` to mean "not set".
        if spec.is_optional_value and value == "false":
            return

        if spec.is_path:
            value = os.path.normpath(os.path.join(str(self.base_dir), value))

        self._store(spec, self._coerce(spec, value))

    def _coerce(self, spec: OptionSpec, value: str) -> Any:
        if spec.domain is Domain.INTEGER:
            if not _INTEGER_RE.fullmatch(value):
                raise InvalidValueError(f"--{spec.name} must be a number", option=spec.name)
            return int(value, 10)
        if spec.domain is Domain.ENUM:
            if value not in spec.choices:
                raise InvalidEnumValueError(spec.name, spec.choices)
            return value
        if spec.domain is Domain.OPTIONAL:
            return OptionalValue(value)
        return value

    def _store(self, spec: OptionSpec, value: Any) -> None:
        if spec.arity is Arity.REPEATABLE:
            self.values.setdefault(spec.name, []).append(value)
        else:
            self.values[spec.name] = value


def check_companions(values: Mapping) -> None:
    """Fail when an option with a non-empty value lacks its required companion."""
    for name, value in values.items():
        companion = get_option(name).requires_companion
        if not companion:
            continue
        empty = value.is_empty if isinstance(value, OptionalValue) else not value
        if not empty and companion not in values:
            raise MissingCompanionError(name, companion)


def parse(
    argv: Sequence[str],
    *,
    config_file: Optional[Union[str, Path]] = None,
    cwd: Optional[Union[str, Path]] = None,
    check_companion_options: bool = True,
) -> RawArguments:
    """Parse ``argv`` into :class:`RawArguments`.

    Args:
        argv: Tokens to parse (without the program name).
        config_file: Set when the tokens were produced from a config file.
            Secret options are then permitted, relative paths resolve
            against the file's directory and error messages name the file.
        cwd: Base directory for relative paths on the command line
            (default: the process working directory).
        check_companion_options: Enforce ``requires_companion`` within this
            source alone. Config files skip this because the companion may
            come from another layer; the resolver checks across layers.

    Raises:
        CliError: One of its subclasses for every invalid input.
    """
    if config_file is not None:
        base_dir = Path(config_file).parent
    else:
        base_dir = Path(cwd) if cwd is not None else Path(os.getcwd())

    scanner = _Scanner(argv, allow_secrets=config_file is not None, base_dir=base_dir)
    try:
        scanner.run()
        if check_companion_options:
            check_companions(scanner.values)
    except CliError as exc:
        if config_file is not None:
            raise exc.prefixed(f"error reading {config_file}: ")
        raise

    args = RawArguments(
        scanner.values,
        scanner.positionals,
        source=str(config_file) if config_file is not None else ARGV_SOURCE,
    )
    logger.debug("parsed %s: %s", args.source, args.to_dict())
    return args


__all__ = [
    "ARGV_SOURCE",
    "RawArguments",
    "split_on_first_equals",
    "check_companions",
    "parse",
]
