"""Implementation of the ``fontsmith config`` command group."""

from __future__ import annotations

from typing import Annotated

import typer

from fontsmith.core.config import dump_config
from fontsmith.core.exceptions import SerialisationError

from ..presenter import present_config
from ..state import emit_error, get_cli_state
from ..utils import build_host, config_path, load_cli_config


def print_config(
    ctx: typer.Context,
    raw: Annotated[
        bool,
        typer.Option("--raw", help="Print the configuration file as YAML."),
    ] = False,
) -> None:
    """Print the effective configuration."""
    state = get_cli_state(ctx)
    config = load_cli_config(state)
    if raw:
        try:
            payload = dump_config(config)
        except SerialisationError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc
        typer.echo(payload, nl=False)
        return
    host = build_host(state)
    present_config(
        state,
        config,
        path=config_path(state),
        cache_root=host.cache_root,
        font_install_dir=host.font_install_dir,
    )


def show_path(ctx: typer.Context) -> None:
    """Print the location of the configuration file."""
    typer.echo(str(config_path(get_cli_state(ctx))))


CONFIG_COMMANDS = {
    "print": print_config,
    "path": show_path,
}

config_app = typer.Typer(help="Inspect the fontsmith configuration.", no_args_is_help=True)
for _name, _handler in CONFIG_COMMANDS.items():
    config_app.command(name=_name)(_handler)


__all__ = ["CONFIG_COMMANDS", "config_app", "print_config", "show_path"]
