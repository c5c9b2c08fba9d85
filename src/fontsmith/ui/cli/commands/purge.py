"""Implementation of the ``fontsmith purge`` command."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from fontsmith.core.user_dir import remove_tree

from ..state import emit_error, emit_info, emit_success, get_cli_state
from ..utils import build_host


class PurgeTarget(str, Enum):
    CACHE = "cache"
    FONTS = "fonts"
    ALL = "all"


_QUESTIONS = {
    PurgeTarget.CACHE: "Are you sure you want to purge the cache?",
    PurgeTarget.FONTS: "Are you sure you want to purge all fontsmith-installed fonts?",
    PurgeTarget.ALL: "Are you sure you want to purge all fontsmith data?",
}


def purge(
    ctx: typer.Context,
    target: Annotated[
        PurgeTarget,
        typer.Argument(help="What to delete: cached catalogs and files, installed fonts, or both."),
    ],
    confirm: Annotated[
        bool,
        typer.Option("--confirm", "-c", help="Confirm the deletion."),
    ] = False,
) -> None:
    """Delete cached data and/or installed fonts."""
    state = get_cli_state(ctx)
    if not confirm:
        emit_error(f"{_QUESTIONS[target]} Re-run with --confirm to proceed.")
        raise typer.Exit(code=1)

    host = build_host(state)
    targets: list[tuple[str, Path]] = []
    if target in {PurgeTarget.CACHE, PurgeTarget.ALL}:
        targets.append(("cache", host.cache_root))
    if target in {PurgeTarget.FONTS, PurgeTarget.ALL}:
        targets.append(("installed fonts", host.font_install_dir))

    for label, path in targets:
        emit_info(f"Purging {label} ({path})...")
        try:
            removed = remove_tree(path)
        except OSError as exc:
            emit_error(f"Could not purge {label}: {exc}", exception=exc)
            raise typer.Exit(code=1) from exc
        if removed:
            emit_success(f"Purged {label}.")
        else:
            emit_success(f"The {label} had already been deleted.")


__all__ = ["PurgeTarget", "purge"]
