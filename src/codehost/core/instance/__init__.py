"""Single-instance coordination: find, probe and talk to a running instance."""
from .coordinator import default_probe_timeout, should_reuse_existing
from .ipc import OpenRequestError, build_open_request, send_open_request
from .probe import (
    InstanceProbeResult,
    ProbeStatus,
    probe_endpoint,
    probe_recorded_instance,
    read_endpoint_file,
)

__all__ = [
    "default_probe_timeout",
    "should_reuse_existing",
    "OpenRequestError",
    "build_open_request",
    "send_open_request",
    "InstanceProbeResult",
    "ProbeStatus",
    "probe_endpoint",
    "probe_recorded_instance",
    "read_endpoint_file",
]
