"""Implementation of the ``fontsmith refresh`` command."""

from __future__ import annotations

import typer

from fontsmith.fonts.resolver import MultiSourceResolver
from fontsmith.sources import RefreshOutcome

from .._options import ForceOption
from ..diagnostics import CliEmitter
from ..state import emit_error, emit_info, emit_success, emit_warning, get_cli_state
from ..utils import build_host, build_sources, plural, run_async


def refresh(ctx: typer.Context, force: ForceOption = False) -> None:
    """Refresh the local catalog of every enabled source."""
    state = get_cli_state(ctx)
    host = build_host(state)
    sources = build_sources(state, host)
    if not sources:
        emit_warning("No sources are enabled. Please enable sources in your configuration file.")
        return

    emit_info(f"Refreshing: {', '.join(source.name for source in sources)}")
    resolver = MultiSourceResolver(sources, emitter=CliEmitter(state))
    results = run_async(resolver.refresh(force=force))

    downloaded = sum(1 for result in results.values() if result is RefreshOutcome.DOWNLOADED)
    up_to_date = sum(
        1 for result in results.values() if result is RefreshOutcome.ALREADY_UP_TO_DATE
    )
    errored = len(results) - downloaded - up_to_date

    if errored:
        emit_error(f"{plural(errored, 'source')} failed to refresh.")
        raise typer.Exit(code=1)

    parts: list[str] = []
    if downloaded:
        parts.append(f"{plural(downloaded, 'source')} refreshed")
    if up_to_date:
        parts.append(f"{plural(up_to_date, 'source')} already up-to-date")
    emit_success(", ".join(parts) + ".")


__all__ = ["refresh"]
