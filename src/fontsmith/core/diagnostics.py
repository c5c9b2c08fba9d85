"""Diagnostics channel between sources, the resolver and their callers.

Core code never prints. It reports through a :class:`DiagnosticEmitter`,
which the CLI renders with rich and library users route to :mod:`logging`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Receiver for warnings, errors and named progress events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Discard everything."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Forward diagnostics to a :class:`logging.Logger`.

    Tracebacks are attached only when ``debug_enabled`` is set; known events
    are logged at INFO with their formatted message, others at DEBUG.
    """

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def _log(self, level: int, message: str, exc: BaseException | None) -> None:
        exc_info = exc if exc is not None and self.debug_enabled else None
        self._logger.log(level, message, exc_info=exc_info)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._log(logging.WARNING, message, exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._log(logging.ERROR, message, exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        summary = format_event_message(name, payload)
        if summary is None:
            self._logger.debug("event %s: %s", name, dict(payload))
        else:
            self._logger.info(summary)


def _field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "<unknown>" if value in (None, "") else str(value)


def _source_refresh(data: Mapping[str, Any]) -> str | None:
    source = _field(data, "source")
    return {
        "downloaded": f"Source '{source}' refreshed",
        "already_up_to_date": f"Source '{source}' already up-to-date",
    }.get(data.get("outcome"))


def _font_resolved(data: Mapping[str, Any]) -> str:
    variants = data.get("variants")
    count = f" ({variants} variants)" if variants is not None else ""
    return f"Resolved '{_field(data, 'font')}' from '{_field(data, 'source')}'{count}"


def _font_unresolved(data: Mapping[str, Any]) -> str:
    reason = data.get("reason")
    return f"Failed to resolve '{_field(data, 'font')}'" + (f": {reason}" if reason else "")


_FORMATTERS: dict[str, Callable[[Mapping[str, Any]], str | None]] = {
    "source_refresh": _source_refresh,
    "font_resolved": _font_resolved,
    "font_unresolved": _font_unresolved,
    "asset_fetch": lambda data: f"Fetching: {_field(data, 'url')}",
    "asset_cached": lambda data: (
        f"Reusing cached file for '{_field(data, 'font')}' ({_field(data, 'variant')})"
    ),
}


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """One-line summary of a known event, ``None`` for unknown events."""
    formatter = _FORMATTERS.get(name)
    return formatter(payload) if formatter is not None else None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
