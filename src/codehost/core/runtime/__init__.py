"""Adapter from resolved configuration to editor runtime arguments."""
from .adapter import RuntimeArgs, should_spawn_cli_process, to_runtime_args

__all__ = ["RuntimeArgs", "should_spawn_cli_process", "to_runtime_args"]
