"""codehost command-line interface."""
from ._output import OutputFormatter
from .main import main

__all__ = ["OutputFormatter", "main"]
