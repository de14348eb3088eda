"""
Typegraph CLI - run queries against a schema from the command line.
"""

from __future__ import annotations

from .main import app, main

__all__ = ["main", "app"]
