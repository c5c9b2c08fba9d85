"""Rich-aware presenters for CLI output."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rich import box
from rich.table import Table

from fontsmith.core.config import FontsmithConfig

from .state import CLIState


_NOT_SET = "<not set>"


def _build_table(*, title: str | None, columns: Sequence[str]) -> Table:
    """Create a Rich table with the house style."""
    table = Table(
        title=title or None,
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    for column in columns:
        table.add_column(column, overflow="fold")
    return table


def _describe_list(values: Sequence[str]) -> str:
    return f"[{len(values)}] {', '.join(values)}" if values else "[0]"


def _describe_path(value: Path | None, default: Path) -> str:
    if value is None:
        return f"{_NOT_SET} (using {default})"
    return str(value)


def present_config(
    state: CLIState,
    config: FontsmithConfig,
    *,
    path: Path,
    cache_root: Path,
    font_install_dir: Path,
) -> None:
    """Render the effective settings as a table."""
    general = config.fontsmith
    table = _build_table(title=f"Configuration ({path})", columns=("Setting", "Value"))
    table.add_row("enabled_sources", _describe_list(general.enabled_sources))
    table.add_row("cache_dir", _describe_path(general.cache_dir, cache_root))
    table.add_row("font_install_dir", _describe_path(general.font_install_dir, font_install_dir))
    table.add_row("http_timeout", f"{general.http_timeout:g}s")
    for source_id, settings in sorted(config.sources.items()):
        rendered = ", ".join(f"{key}={value}" for key, value in sorted(settings.items()))
        table.add_row(f"sources.{source_id}", rendered or "{}")
    state.console.print(table)


def present_search_results(state: CLIState, rows: Sequence[tuple[str, str]]) -> None:
    """Render ``(source id, family id)`` rows."""
    table = _build_table(title=None, columns=("Source", "Family"))
    for source_id, family in rows:
        table.add_row(source_id, family)
    state.console.print(table)


__all__ = ["present_config", "present_search_results"]
