from __future__ import annotations

import pytest

from codehost.core.options.registry import (
    EXTENSION_MANAGEMENT_OPTIONS,
    LOG_LEVELS,
    Arity,
    Domain,
    find_short,
    get_option,
    has_option,
    iter_options,
)


def test_option_names_are_unique_and_lowercase() -> None:
    names = [spec.name for spec in iter_options()]
    assert len(names) == len(set(names))
    assert all(name == name.lower() and not name.startswith("-") for name in names)


def test_short_aliases_are_unique() -> None:
    shorts = [s for spec in iter_options() for s in spec.short]
    assert len(shorts) == len(set(shorts))
    assert find_short("h").name == "help"
    assert find_short("v").name == "version"
    assert find_short("vvv").name == "verbose"
    assert find_short("x") is None


def test_secret_options_name_their_environment_variable() -> None:
    for spec in iter_options():
        if spec.forbidden_on_command_line:
            assert spec.env_var
    assert get_option("password").env_var == "PASSWORD"
    assert get_option("hashed-password").env_var == "HASHED_PASSWORD"


def test_enum_options_have_choices() -> None:
    for spec in iter_options():
        assert bool(spec.choices) == (spec.domain is Domain.ENUM)
    assert get_option("auth").choices == ("password", "none")
    assert get_option("log").choices == LOG_LEVELS == ("trace", "debug", "info", "warn", "error")


def test_cert_shape() -> None:
    cert = get_option("cert")
    assert cert.is_optional_value
    assert cert.is_path
    assert cert.requires_companion == "cert-key"
    assert has_option(cert.requires_companion)


def test_link_is_beta_and_deprecated() -> None:
    link = get_option("link")
    assert link.beta and link.deprecated
    assert link.is_optional_value


def test_extension_management_options_are_registered() -> None:
    for name in EXTENSION_MANAGEMENT_OPTIONS:
        assert has_option(name)
    assert get_option("list-extensions").arity is Arity.FLAG
    assert get_option("install-extension").arity is Arity.REPEATABLE


def test_unknown_option_lookup_raises() -> None:
    assert not has_option("nope")
    with pytest.raises(KeyError):
        get_option("nope")
