"""Copy acquired font files to their install location."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
import shutil

from .variants import DEFAULT_WEIGHT, Style, VariantSpec


class OutputFormat(str, Enum):
    """Directory layouts supported by ``install``."""

    FLAT = "flat"
    FLAT_DIRECTORY = "flat-directory"


def variant_filename(font_id: str, variant: VariantSpec, suffix: str = "") -> str:
    """Return the install file name of a variant.

    ``roboto-regular``, ``roboto-italic``, ``roboto-700``, ``roboto-700-italic``
    and ``roboto-wght`` / ``roboto-wght-italic`` for the variable axis.
    """
    italic = variant.style is Style.ITALIC
    weight = variant.weight
    if weight.is_variable:
        stem = f"{font_id}-wght"
        if italic:
            stem += "-italic"
    elif weight.value == DEFAULT_WEIGHT:
        stem = f"{font_id}-{'italic' if italic else 'regular'}"
    else:
        stem = f"{font_id}-{weight.value}"
        if italic:
            stem += "-italic"
    return f"{stem}{suffix}"


def target_path(
    directory: Path,
    font_id: str,
    variant: VariantSpec,
    source_file: Path,
    output_format: OutputFormat = OutputFormat.FLAT,
) -> Path:
    """Return where ``source_file`` is installed for the given layout."""
    base = directory / font_id if output_format is OutputFormat.FLAT_DIRECTORY else directory
    return base / variant_filename(font_id, variant, source_file.suffix)


def install_font_files(
    directory: Path,
    font_id: str,
    files: Mapping[VariantSpec, Path],
    output_format: OutputFormat = OutputFormat.FLAT,
) -> dict[VariantSpec, Path]:
    """Copy the cached files of one font, returning the installed paths."""
    installed: dict[VariantSpec, Path] = {}
    for variant in sorted(files):
        source_file = files[variant]
        destination = target_path(directory, font_id, variant, source_file, output_format)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_file, destination)
        installed[variant] = destination
    return installed


__all__ = ["OutputFormat", "install_font_files", "target_path", "variant_filename"]
