"""Option registry and argument vector parsing."""
from .errors import (
    AmbiguousOptionLikeValueError,
    CliError,
    ConfigFileError,
    InvalidEnumValueError,
    InvalidValueError,
    MissingCompanionError,
    MissingValueError,
    SecretOnCommandLineError,
    UnknownOptionError,
)
from .parser import RawArguments, check_companions, parse, split_on_first_equals
from .registry import (
    AuthType,
    Feature,
    LogLevel,
    OptionalValue,
    OptionSpec,
    find_short,
    get_option,
    iter_options,
)

__all__ = [
    "AmbiguousOptionLikeValueError",
    "CliError",
    "ConfigFileError",
    "InvalidEnumValueError",
    "InvalidValueError",
    "MissingCompanionError",
    "MissingValueError",
    "SecretOnCommandLineError",
    "UnknownOptionError",
    "RawArguments",
    "check_companions",
    "parse",
    "split_on_first_equals",
    "AuthType",
    "Feature",
    "LogLevel",
    "OptionalValue",
    "OptionSpec",
    "find_short",
    "get_option",
    "iter_options",
]
