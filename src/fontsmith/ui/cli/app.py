"""Typer application wiring for the fontsmith CLI."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import typer

from fontsmith.core.exceptions import exception_hint
from fontsmith.version import get_version

from ._options import ConfigOption, DebugOption, SilentOption, VerbosityOption
from .commands import config_app, install, purge, refresh, search
from .state import configure_logging, emit_error, get_cli_state, reset_logging, set_cli_state


COMMANDS: dict[str, Callable[..., Any]] = {
    "refresh": refresh,
    "install": install,
    "purge": purge,
    "search": search,
}

SUBCOMMANDS: dict[str, typer.Typer] = {
    "config": config_app,
}


app = typer.Typer(
    help="Install web fonts from remote catalogs.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"fontsmith {get_version()}")
        raise typer.Exit()


@app.callback()
def cli(
    ctx: typer.Context,
    verbose: VerbosityOption = 0,
    silent: SilentOption = 0,
    debug: DebugOption = False,
    config: ConfigOption = None,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Install web fonts from remote catalogs."""
    state = set_cli_state(ctx=ctx, verbosity=verbose - silent, debug=debug)
    state.config_path = config
    configure_logging(state)
    ctx.call_on_close(reset_logging)


for _name, _handler in COMMANDS.items():
    app.command(name=_name)(_handler)
for _name, _group in SUBCOMMANDS.items():
    app.add_typer(_group, name=_name)


def main() -> None:
    """Console script entry point.

    Errors escaping a command are reported as a single line, or as a rich
    traceback with ``--debug``, and turn into exit status 1.
    """
    try:
        app()
    except (typer.Exit, SystemExit):
        raise
    except Exception as exc:
        state = get_cli_state()
        if not state.show_tracebacks:
            emit_error(exception_hint(exc) or type(exc).__name__, exception=exc)
            raise typer.Exit(code=1) from exc
        from rich.traceback import Traceback

        state.err_console.print(
            Traceback.from_exception(
                type(exc), exc, exc.__traceback__, show_locals=state.verbosity >= 2
            )
        )
        raise typer.Exit(code=1) from exc


__all__ = ["COMMANDS", "app", "main"]
