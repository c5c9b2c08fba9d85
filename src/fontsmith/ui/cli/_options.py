"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fontsmith.fonts.install import OutputFormat


OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

VerbosityOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase output verbosity (repeat for more detail).",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

SilentOption = Annotated[
    int,
    typer.Option(
        "--silent",
        "-s",
        count=True,
        help="Decrease output verbosity (repeat to hide warnings).",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="Configuration file to use instead of the default location.",
        dir_okay=False,
        resolve_path=True,
        envvar="FONTSMITH_CONFIG",
    ),
]

FontSpecArgument = Annotated[
    list[str],
    typer.Argument(
        metavar="FONTSPEC...",
        help="Fonts to install as [source:]font-id[@variant,...], e.g. 'roboto@700,italic'.",
        show_default=False,
    ),
]

DirectoryOption = Annotated[
    Path | None,
    typer.Option(
        "--directory",
        "-d",
        help="Install into this directory instead of the configured font directory.",
        file_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

FormatOption = Annotated[
    OutputFormat | None,
    typer.Option(
        "--format",
        "-f",
        help="Output layout. Defaults to 'flat-directory' with --directory, 'flat' otherwise.",
        case_sensitive=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

StylesheetOption = Annotated[
    Path | None,
    typer.Option(
        "--stylesheet",
        help="Also write a CSS file with @font-face rules for the installed files.",
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ForceOption = Annotated[
    bool,
    typer.Option(
        "--force",
        help="Download catalogs even when their freshness marker is unchanged.",
    ),
]
