"""
Adapters module - I/O surfaces.

Adapters are thin wrappers over the registry. They hold no registry
logic, only argument parsing and output.
"""

from beranouns.adapters.cli import main

__all__ = ["main"]
