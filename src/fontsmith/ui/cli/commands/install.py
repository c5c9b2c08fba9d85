"""Implementation of the ``fontsmith install`` command."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import typer

from fontsmith.core.exceptions import FontSpecError, InstallError, ResolutionError
from fontsmith.fonts.install import OutputFormat, install_font_files
from fontsmith.fonts.resolver import MultiSourceResolver
from fontsmith.fonts.specs import FontDescription, FontSpec
from fontsmith.fonts.stylesheet import write_stylesheet
from fontsmith.fonts.variants import VariantSpec

from .._options import DirectoryOption, FontSpecArgument, FormatOption, StylesheetOption
from ..diagnostics import CliEmitter
from ..state import emit_error, emit_info, emit_success, emit_warning, get_cli_state
from ..utils import build_host, build_sources, plural, run_async


def parse_fontspecs(values: list[str]) -> list[FontSpec]:
    """Parse request strings, warning about and skipping invalid ones."""
    specs: list[FontSpec] = []
    for raw in values:
        try:
            specs.append(FontSpec.parse(raw))
        except FontSpecError as exc:
            emit_warning(f"Invalid fontspec '{raw}': {exc}")
    if not specs:
        reason = "The fontspec was invalid" if len(values) == 1 else "All fontspecs were invalid"
        emit_error(f"{reason}. Perhaps you made a typo?")
        raise typer.Exit(code=1)
    return specs


def install(
    ctx: typer.Context,
    fontspecs: FontSpecArgument,
    directory: DirectoryOption = None,
    output_format: FormatOption = None,
    stylesheet: StylesheetOption = None,
) -> None:
    """Resolve fonts against the enabled sources and install their files."""
    state = get_cli_state(ctx)
    specs = parse_fontspecs(fontspecs)

    host = build_host(state)
    pins = {spec.source for spec in specs}
    only = None if None in pins else {pin for pin in pins if pin}
    sources = build_sources(state, host, only=only)
    if not sources:
        if only:
            ids = ", ".join(sorted(only))
            emit_error(f"No enabled source matches {ids} (perhaps the source is disabled?).")
        else:
            emit_error("No sources are enabled. Please enable sources in your configuration file.")
        raise typer.Exit(code=1)

    resolver = MultiSourceResolver(sources, emitter=CliEmitter(state))
    report = run_async(resolver.resolve(specs))
    try:
        report.raise_for_failures()
    except ResolutionError as exc:
        emit_error(str(exc))
        raise typer.Exit(code=1) from exc

    acquisition = run_async(resolver.acquire(report))

    target_dir = directory or host.font_install_dir
    if output_format is None:
        output_format = OutputFormat.FLAT_DIRECTORY if directory else OutputFormat.FLAT

    failed = list(acquisition.failed)
    installed: list[tuple[FontDescription, Mapping[VariantSpec, Path]]] = []
    for font_id, acquired in acquisition.acquired.items():
        emit_info(f"Installing {font_id}")
        try:
            files = install_font_files(
                target_dir, acquired.resolved.spec.font_id, acquired.files, output_format
            )
        except OSError as exc:
            emit_error(f"Could not install font {font_id}: {exc}", exception=exc)
            failed.append(font_id)
            continue
        installed.append((acquired.resolved.description, files))

    if stylesheet is not None and installed:
        write_stylesheet(stylesheet, installed)
        emit_info(f"Wrote stylesheet {stylesheet}")

    if failed:
        error = InstallError(failed)
        emit_error(str(error))
        raise typer.Exit(code=1) from error

    used_sources = {resolved.source.name for resolved in report.resolved.values()}
    font_ids = list(report.resolved)
    fonts = f"font {font_ids[0]}" if len(font_ids) == 1 else f"{len(font_ids)} fonts"
    if len(used_sources) == 1:
        origin = next(iter(used_sources))
    else:
        origin = plural(len(used_sources), "source")
    emit_success(f"Successfully installed {fonts} from {origin}!")


__all__ = ["install", "parse_fontspecs"]
