"""Public CLI exports for fontsmith."""

from __future__ import annotations

from .app import COMMANDS, app, main
from .state import emit_error, emit_warning, get_cli_state


__all__ = [
    "COMMANDS",
    "app",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "main",
]
