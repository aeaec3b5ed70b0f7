"""Static table of every option codehost recognizes.

The registry holds data only: option shape (arity and value domain),
aliases, and the constraints the parser enforces. Lookups are by canonical
long name or by short alias.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple


class Arity(str, Enum):
    FLAG = "flag"
    SINGLE = "single"
    REPEATABLE = "repeatable"


class Domain(str, Enum):
    STRING = "string"
    ENUM = "enum"
    INTEGER = "integer"
    PATH = "path"
    OPTIONAL = "optional"


class AuthType(str, Enum):
    PASSWORD = "password"
    NONE = "none"


class LogLevel(str, Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class Feature(str, Enum):
    """Experimental features accepted by ``--enable`` (none at the moment)."""


LOG_LEVELS: Tuple[str, ...] = tuple(level.value for level in LogLevel)


@dataclass(frozen=True)
class OptionalValue:
    """Value of an option whose presence matters even without a value.

    ``OptionalValue(None)`` means "given with no value"; an absent option is
    simply missing from the arguments.
    """

    value: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.value


@dataclass(frozen=True)
class OptionSpec:
    name: str
    description: str
    arity: Arity = Arity.SINGLE
    domain: Domain = Domain.STRING
    short: Tuple[str, ...] = ()
    choices: Tuple[str, ...] = ()
    forbidden_on_command_line: bool = False
    env_var: Optional[str] = None
    requires_companion: Optional[str] = None
    resolve_path: bool = False
    beta: bool = False
    deprecated: bool = False

    @property
    def is_flag(self) -> bool:
        return self.arity is Arity.FLAG

    @property
    def is_path(self) -> bool:
        return self.resolve_path or self.domain is Domain.PATH

    @property
    def is_optional_value(self) -> bool:
        return self.domain is Domain.OPTIONAL


def _flag(name: str, description: str, **kwargs) -> OptionSpec:
    return OptionSpec(name, description, arity=Arity.FLAG, **kwargs)


_OPTIONS: Tuple[OptionSpec, ...] = (
    OptionSpec(
        "auth",
        "The type of authentication to use.",
        domain=Domain.ENUM,
        choices=tuple(a.value for a in AuthType),
    ),
    OptionSpec(
        "password",
        "The password for password authentication (can only be passed in via "
        "$PASSWORD or the config file).",
        forbidden_on_command_line=True,
        env_var="PASSWORD",
    ),
    OptionSpec(
        "hashed-password",
        "The password hashed with argon2 for password authentication (can only "
        "be passed in via $HASHED_PASSWORD or the config file). Takes precedence "
        "over 'password'.",
        forbidden_on_command_line=True,
        env_var="HASHED_PASSWORD",
    ),
    OptionSpec(
        "cert",
        "Path to certificate. A self signed certificate is generated if none is "
        "provided.",
        domain=Domain.OPTIONAL,
        requires_companion="cert-key",
        resolve_path=True,
    ),
    OptionSpec(
        "cert-host",
        "Hostname to use when generating a self signed certificate.",
    ),
    OptionSpec(
        "cert-key",
        "Path to certificate key when using non-generated cert.",
        domain=Domain.PATH,
    ),
    _flag("disable-telemetry", "Disable telemetry."),
    _flag("disable-update-check", "Disable update check. Without this flag, codehost "
          "checks for updates once a week and notifies you."),
    _flag("help", "Show this output.", short=("h",)),
    _flag("json", "Output JSON where supported (--version, startup summary)."),
    _flag("open", "Open in browser on startup. Does not work remotely."),
    OptionSpec(
        "bind-addr",
        "Address to bind to in host:port. You can also use $PORT to override "
        "the port.",
    ),
    OptionSpec("host", "Host to bind to; overrides the host from --bind-addr."),
    OptionSpec(
        "port",
        "Port to bind to; overrides the port from --bind-addr.",
        domain=Domain.INTEGER,
        env_var="PORT",
    ),
    OptionSpec(
        "config",
        "Path to the config file. Defaults to $CODEHOST_CONFIG or "
        "~/.config/code-server/config.yaml.",
        domain=Domain.PATH,
    ),
    OptionSpec(
        "socket",
        "Path to a socket (bind-addr will be ignored).",
        domain=Domain.PATH,
    ),
    _flag("version", "Display version information.", short=("v",)),
    OptionSpec(
        "proxy-domain",
        "Domain used for proxying ports.",
        arity=Arity.REPEATABLE,
    ),
    _flag("ignore-last-opened", "Ignore the last opened directory or workspace in "
          "favor of an empty window."),
    _flag("new-window", "Force to open a new window."),
    _flag("reuse-window", "Force to open a file or folder in an already opened window."),
    OptionSpec(
        "link",
        "Securely bind codehost via our cloud service with the passed name. "
        "You'll get a URL you can share with others. Authentication is disabled.",
        domain=Domain.OPTIONAL,
        beta=True,
        deprecated=True,
    ),
    OptionSpec(
        "enable",
        "Enable an experimental feature.",
        arity=Arity.REPEATABLE,
    ),
    OptionSpec(
        "user-data-dir",
        "Path to the user data directory.",
        domain=Domain.PATH,
    ),
    OptionSpec(
        "extensions-dir",
        "Path to the extensions directory.",
        domain=Domain.PATH,
    ),
    OptionSpec(
        "builtin-extensions-dir",
        "Path to the built-in extensions directory.",
        domain=Domain.PATH,
    ),
    OptionSpec(
        "extra-extensions-dir",
        "Path to an extra user extension directory.",
        arity=Arity.REPEATABLE,
        domain=Domain.PATH,
    ),
    _flag("list-extensions", "List installed extensions."),
    _flag("force", "Avoid prompts when installing extensions."),
    _flag("show-versions", "Show the versions of installed extensions."),
    OptionSpec(
        "install-extension",
        "Install or update an extension by id or vsix path.",
        arity=Arity.REPEATABLE,
    ),
    OptionSpec(
        "uninstall-extension",
        "Uninstall an extension by id.",
        arity=Arity.REPEATABLE,
    ),
    OptionSpec(
        "locate-extension",
        "Print the installation path of an extension by id.",
        arity=Arity.REPEATABLE,
    ),
    OptionSpec("locale", "The locale to use (e.g. en-US or zh-TW)."),
    OptionSpec(
        "log",
        "Log level to use.",
        domain=Domain.ENUM,
        choices=LOG_LEVELS,
        env_var="LOG_LEVEL",
    ),
    _flag("verbose", "Enable verbose logging.", short=("vvv",)),
)

_BY_NAME: Dict[str, OptionSpec] = {opt.name: opt for opt in _OPTIONS}
_BY_SHORT: Dict[str, OptionSpec] = {s: opt for opt in _OPTIONS for s in opt.short}

# Options that only make sense for the editor runtime's own CLI.
EXTENSION_MANAGEMENT_OPTIONS: Tuple[str, ...] = (
    "list-extensions",
    "install-extension",
    "uninstall-extension",
    "locate-extension",
)


def get_option(name: str) -> OptionSpec:
    """Return the option registered under canonical ``name``.

    Raises:
        KeyError: If no such option exists.
    """
    return _BY_NAME[name]


def has_option(name: str) -> bool:
    return name in _BY_NAME


def find_short(alias: str) -> Optional[OptionSpec]:
    """Return the option whose short alias is exactly ``alias``."""
    return _BY_SHORT.get(alias)


def iter_options() -> Iterator[OptionSpec]:
    """Yield every option in declaration order."""
    return iter(_OPTIONS)


__all__ = [
    "Arity",
    "Domain",
    "AuthType",
    "LogLevel",
    "Feature",
    "LOG_LEVELS",
    "OptionalValue",
    "OptionSpec",
    "EXTENSION_MANAGEMENT_OPTIONS",
    "get_option",
    "has_option",
    "find_short",
    "iter_options",
]
