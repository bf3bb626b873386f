"""CLI module for depgraph-extractor.

This module provides the command-line interface. It supports both CLI
arguments and environment variables for configuration.
"""

from .main import build_config, cli, main, run_extraction

__all__ = [
    "cli",
    "main",
    "build_config",
    "run_extraction",
]
