"""CLI command implementations exposed via `fontsmith.ui.cli`.

Each sibling module defines one command function; the Typer application
registers them from the table in :mod:`fontsmith.ui.cli.app`.
"""

from __future__ import annotations

from .config import config_app
from .install import install
from .purge import purge
from .refresh import refresh
from .search import search


__all__ = ["config_app", "install", "purge", "refresh", "search"]
