"""Per-invocation CLI state: verbosity, loaded configuration and consoles."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import logging
import sys
from typing import TYPE_CHECKING, Any, TextIO

import click
import typer

from fontsmith.core.config import FontsmithConfig
from fontsmith.core.exceptions import exception_messages


if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

__all__ = [
    "CLIState",
    "configure_logging",
    "emit_error",
    "emit_info",
    "emit_success",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "reset_logging",
    "set_cli_state",
]

_LOGGER_NAME = "fontsmith"
_HANDLER_TAG = "_fontsmith_cli"


def _console_for(existing: Console | None, stream: TextIO, **options: Any) -> Console:
    # Test runners swap sys.stdout/sys.stderr between invocations.
    if existing is not None and existing.file is stream:
        return existing
    from rich.console import Console

    return Console(file=stream, **options)


@dataclass(slots=True)
class CLIState:
    """Options of the running command.

    ``verbosity`` is the number of ``-v`` flags minus the number of ``-s``
    flags: below zero informational output is hidden, below minus one
    warnings are hidden too.
    """

    verbosity: int = 0
    show_tracebacks: bool = False
    config_path: Path | None = None
    config: FontsmithConfig | None = None
    _stdout: Console | None = field(default=None, init=False, repr=False)
    _stderr: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        self._stdout = _console_for(self._stdout, sys.stdout)
        return self._stdout

    @property
    def err_console(self) -> Console:
        self._stderr = _console_for(self._stderr, sys.stderr, highlight=False)
        return self._stderr

    @property
    def quiet(self) -> bool:
        return self.verbosity < 0


_CURRENT: ContextVar[CLIState | None] = ContextVar("fontsmith_cli_state", default=None)


def get_cli_state(
    ctx: typer.Context | click.Context | None = None,
    *,
    create: bool = True,
) -> CLIState:
    """Find the state attached to the click context chain.

    Outside of a command (library use, tests) the last state seen in this
    context variable scope is returned instead.
    """
    ctx = ctx or click.get_current_context(silent=True)
    state = ctx.find_object(CLIState) if ctx is not None else None
    if state is None and ctx is not None and create:
        state = ctx.ensure_object(CLIState)
    if state is None:
        state = _CURRENT.get()
    if state is None:
        if not create:
            raise RuntimeError("No CLI state is active.")
        state = CLIState()
    _CURRENT.set(state)
    return state


def set_cli_state(
    *,
    ctx: typer.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Apply global options to the active state and return it."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = verbosity
    if debug is not None:
        state.show_tracebacks = debug
    return state


def _log_level(verbosity: int) -> int:
    if verbosity < 0:
        return logging.ERROR
    return {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)


def configure_logging(state: CLIState) -> None:
    """Send ``fontsmith.*`` log records to stderr through rich."""
    from rich.logging import RichHandler

    reset_logging()
    handler = RichHandler(
        console=state.err_console,
        show_path=state.verbosity >= 3,
        rich_tracebacks=state.show_tracebacks,
    )
    setattr(handler, _HANDLER_TAG, True)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.addHandler(handler)
    logger.setLevel(_log_level(state.verbosity))


def reset_logging() -> None:
    """Remove the handler added by :func:`configure_logging`."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def _details(message: str, exception: BaseException, verbosity: int) -> list[str]:
    lines: list[str] = []
    text = str(exception).strip()
    if text and text not in message:
        lines.append(text)
    lines.append(f"type: {type(exception).__name__}")
    causes = exception_messages(exception)[1:]
    if verbosity >= 2 and causes:
        lines.append("caused by:")
        lines.extend(f"  {cause}" for cause in causes)
    return lines


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``info``/``success`` on stdout and ``warning``/``error`` on stderr.

    Exception details are appended from ``-v`` on, and the cause chain from
    ``-vv`` on.
    """
    state = get_cli_state()

    if level in {"info", "success"}:
        if not state.quiet:
            state.console.print(
                message,
                style="bold green" if level == "success" else None,
                markup=False,
                highlight=False,
                soft_wrap=True,
            )
        return

    from rich.text import Text

    colour = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {colour}"), (message, colour))
    if exception is not None and state.verbosity >= 1:
        text.append("\n" + "\n".join(_details(message, exception, state.verbosity)), style=colour)
    state.err_console.print(text, soft_wrap=True)


def emit_info(message: str) -> None:
    render_message("info", message)


def emit_success(message: str) -> None:
    render_message("success", message)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    """Print a warning unless warnings were silenced with ``-ss``."""
    if get_cli_state().verbosity < -1:
        return
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)

