"""Stable error types for option parsing and configuration resolution.

This module intentionally contains only exception classes so that tests that
reload parser/resolver modules do not accidentally create multiple distinct
exception class objects (which can break `pytest.raises` matching).

Every error is terminal for the current invocation: the CLI prints the
message and exits with a non-zero status.
"""

from __future__ import annotations

from typing import Optional, Sequence


class CliError(ValueError):
    """Base class for every parse or resolution failure."""

    kind = "error"

    def __init__(self, message: str, *, option: Optional[str] = None) -> None:
        super().__init__(message)
        self.option = option

    def prefixed(self, prefix: str) -> "CliError":
        """Prepend ``prefix`` to the message in place and return self."""
        self.args = (f"{prefix}{self.args[0]}",) + tuple(self.args[1:])
        return self


class MissingValueError(CliError):
    """An option that needs a value was given none."""

    kind = "missing_value"

    def __init__(self, option: str) -> None:
        super().__init__(f"--{option} requires a value", option=option)


class AmbiguousOptionLikeValueError(MissingValueError):
    """The token after a valued option looks like another option."""

    kind = "ambiguous_option_like_value"

    def __init__(self, option: str, token: str) -> None:
        super().__init__(option)
        self.token = token


class InvalidValueError(CliError):
    """A value could not be coerced to the option's type."""

    kind = "invalid_value"


class InvalidEnumValueError(InvalidValueError):
    """A value is not one of the option's allowed literals."""

    kind = "invalid_enum_value"

    def __init__(self, option: str, choices: Sequence[str]) -> None:
        self.choices = tuple(choices)
        super().__init__(
            f"--{option} valid values: [{', '.join(self.choices)}]",
            option=option,
        )


class UnknownOptionError(CliError):
    """The token does not name any registered option."""

    kind = "unknown_option"

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown option {token}", option=token)


class SecretOnCommandLineError(CliError):
    """A secret-bearing option was supplied through argv."""

    kind = "secret_on_command_line"

    def __init__(self, option: str, env_var: str) -> None:
        self.permitted_sources = ("config file", f"${env_var}")
        super().__init__(
            f"--{option} can only be set in the config file or passed in via ${env_var}",
            option=option,
        )


class MissingCompanionError(CliError):
    """An option was set without the companion option it requires."""

    kind = "missing_companion"

    def __init__(self, option: str, companion: str) -> None:
        self.companion = companion
        super().__init__(f"--{companion} is missing", option=option)


class ConfigFileError(CliError):
    """The config file exists but does not hold a valid option mapping."""

    kind = "config_file"


__all__ = [
    "CliError",
    "MissingValueError",
    "AmbiguousOptionLikeValueError",
    "InvalidValueError",
    "InvalidEnumValueError",
    "UnknownOptionError",
    "SecretOnCommandLineError",
    "MissingCompanionError",
    "ConfigFileError",
]
