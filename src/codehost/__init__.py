"""
codehost - launcher for a browser-hosted editor server

codehost turns a command-line invocation into a validated runtime
configuration and decides whether to start a new server or hand the
request to an instance that is already running.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
