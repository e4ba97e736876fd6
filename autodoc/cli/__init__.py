"""Console output for the command-line interface."""

from .console import ConsoleRenderer

__all__ = ["ConsoleRenderer"]
