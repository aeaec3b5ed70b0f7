from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Tuple

from codehost.core.options.registry import AuthType, LogLevel, OptionalValue

REDACTED = "<redacted>"

_SECRET_FIELDS = frozenset({"password", "hashed_password"})


def attr_name(option: str) -> str:
    """Map a canonical option name to its attribute (``cert-key`` -> ``cert_key``)."""
    return option.replace("-", "_")


@dataclass(frozen=True)
class ResolvedConfiguration:
    """Fully defaulted, internally consistent configuration for one invocation.

    Built once by :func:`codehost.core.config.resolver.resolve` and never
    mutated. ``sources`` records which layer supplied each option; it is
    informational only.
    """

    # authentication
    auth: str = AuthType.PASSWORD.value
    password: Optional[str] = None
    hashed_password: Optional[str] = None
    # networking
    host: str = "localhost"
    port: int = 8080
    bind_addr: Optional[str] = None
    socket: Optional[str] = None
    # TLS
    cert: Optional[OptionalValue] = None
    cert_host: Optional[str] = None
    cert_key: Optional[str] = None
    # directories
    user_data_dir: str = ""
    extensions_dir: str = ""
    builtin_extensions_dir: Optional[str] = None
    extra_extensions_dir: Tuple[str, ...] = ()
    config: Optional[str] = None
    # behavior
    open: bool = False
    verbose: bool = False
    help: bool = False
    version: bool = False
    json: bool = False
    new_window: bool = False
    reuse_window: bool = False
    disable_update_check: bool = False
    disable_telemetry: bool = False
    ignore_last_opened: bool = False
    link: Optional[OptionalValue] = None
    proxy_domain: Tuple[str, ...] = ()
    enable: Tuple[str, ...] = ()
    locale: Optional[str] = None
    log: str = LogLevel.INFO.value
    # extension management
    list_extensions: bool = False
    force: bool = False
    show_versions: bool = False
    install_extension: Tuple[str, ...] = ()
    uninstall_extension: Tuple[str, ...] = ()
    locate_extension: Tuple[str, ...] = ()
    # positional file/folder arguments, in encounter order
    positionals: Tuple[str, ...] = ()
    # provenance
    using_env_password: bool = False
    using_env_hashed_password: bool = False
    sources: Mapping[str, str] = field(default_factory=dict, compare=False)

    def get(self, option: str, default: Any = None) -> Any:
        """Look up a value by canonical option name."""
        return getattr(self, attr_name(option), default)

    def source_of(self, option: str) -> Optional[str]:
        return self.sources.get(option)

    def is_explicit(self, option: str) -> bool:
        """True when the option was given on the command line."""
        return self.sources.get(option) == "argv"

    def auth_method(self) -> str:
        """Which credential validates sessions: ``none``, ``hashed-password`` or ``password``."""
        if self.auth == AuthType.NONE.value:
            return AuthType.NONE.value
        if self.hashed_password:
            return "hashed-password"
        return "password"

    @property
    def protocol(self) -> str:
        return "https" if self.cert is not None else "http"

    def to_dict(self, *, redact: bool = True) -> Dict[str, Any]:
        """Hyphenated, JSON-friendly view; secrets are masked by default."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "sources":
                continue
            value = getattr(self, f.name)
            if redact and f.name in _SECRET_FIELDS and value:
                value = REDACTED
            elif isinstance(value, OptionalValue):
                value = {"value": value.value}
            elif isinstance(value, tuple):
                value = list(value)
            key = "_" if f.name == "positionals" else f.name.replace("_", "-")
            out[key] = value
        return out


__all__ = ["ResolvedConfiguration", "attr_name", "REDACTED"]
