"""Render resolver and source diagnostics on the terminal."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fontsmith.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


# Shown at default verbosity; every other event needs -v.
_DEFAULT_EVENTS = frozenset({"font_unresolved"})


class CliEmitter(DiagnosticEmitter):
    """Emitter printing through the CLI message helpers."""

    def __init__(self, state: CLIState | None = None, *, debug_enabled: bool | None = None) -> None:
        self._state = state or get_cli_state()
        self.debug_enabled = (
            self._state.show_tracebacks if debug_enabled is None else bool(debug_enabled)
        )

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        summary = format_event_message(name, payload)
        if summary is None:
            return
        if name in _DEFAULT_EVENTS:
            emit_warning(summary)
        elif self._state.verbosity >= 1:
            render_message("info", summary)


__all__ = ["CliEmitter"]
