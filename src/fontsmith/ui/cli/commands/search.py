"""Implementation of the ``fontsmith search`` command."""

from __future__ import annotations

from typing import Annotated

import typer

from fontsmith.core.exceptions import FontsmithError

from ..presenter import present_search_results
from ..state import emit_error, emit_warning, get_cli_state
from ..utils import build_host, build_sources, run_async


def search(
    ctx: typer.Context,
    tags: Annotated[
        list[str] | None,
        typer.Option("--tag", "-t", help="Only list families carrying this tag (repeatable)."),
    ] = None,
    source_id: Annotated[
        str | None,
        typer.Option("--source", help="Only search this source."),
    ] = None,
) -> None:
    """List catalog families, optionally filtered by tags."""
    state = get_cli_state(ctx)
    host = build_host(state)
    sources = build_sources(state, host, only=[source_id] if source_id else None)
    if not sources:
        if source_id:
            emit_error(f"No enabled source matches '{source_id}'.")
        else:
            emit_error("No sources are enabled.")
        raise typer.Exit(code=1)

    rows: list[tuple[str, str]] = []
    failures = 0
    for source in sources:
        try:
            families = run_async(source.search(tags or ()))
        except NotImplementedError:
            emit_warning(f"Source '{source.id}' does not support searching.")
            continue
        except FontsmithError as exc:
            emit_error(str(exc), exception=exc)
            failures += 1
            continue
        rows.extend((source.id, family) for family in families)

    if rows:
        present_search_results(state, rows)
    elif not failures:
        emit_warning("No matching families.")
    if failures:
        raise typer.Exit(code=1)


__all__ = ["search"]
