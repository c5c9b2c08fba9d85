"""Helpers shared by CLI commands."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Iterable
from pathlib import Path
from typing import Any, TypeVar

import typer

from fontsmith.core.config import FontsmithConfig, load_config
from fontsmith.core.exceptions import FontsmithError
from fontsmith.core.host import Host
from fontsmith.core.user_dir import resolve_user_dir
from fontsmith.sources import FontSource, create_sources

from .diagnostics import CliEmitter
from .state import CLIState, emit_error


T = TypeVar("T")


def config_path(state: CLIState) -> Path:
    """Return the configuration file the CLI operates on."""
    return state.config_path or resolve_user_dir().config_file


def load_cli_config(state: CLIState) -> FontsmithConfig:
    """Load (and cache on the state) the configuration, exiting on failure."""
    if state.config is None:
        try:
            state.config = load_config(config_path(state))
        except (FontsmithError, OSError) as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc
    return state.config


def build_host(state: CLIState) -> Host:
    return Host.from_config(load_cli_config(state))


def build_sources(
    state: CLIState,
    host: Host,
    *,
    only: Iterable[str] | None = None,
) -> list[FontSource]:
    """Instantiate the enabled sources, exiting on configuration errors."""
    try:
        return create_sources(host, only=only, emitter=CliEmitter(state))
    except FontsmithError as exc:
        emit_error(f"{exc} Check 'enabled_sources' in {config_path(state)}.", exception=exc)
        raise typer.Exit(code=1) from exc


def run_async(coroutine: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coroutine)


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


__all__ = ["build_host", "build_sources", "config_path", "load_cli_config", "plural", "run_async"]
