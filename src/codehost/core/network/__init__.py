"""Network address resolution."""
from .bind import (
    DEFAULT_ADDRESS,
    Address,
    bind_addr_from_all_sources,
    format_address,
    parse_bind_addr,
    port_from_environment,
    resolve_address,
)

__all__ = [
    "DEFAULT_ADDRESS",
    "Address",
    "bind_addr_from_all_sources",
    "format_address",
    "parse_bind_addr",
    "port_from_environment",
    "resolve_address",
]
