"""Main CLI module for uelog.

This module re-exports the CLI for convenience. The main implementation
is in __main__.py.
"""

from uelog.__main__ import cli

__all__ = ["cli"]
