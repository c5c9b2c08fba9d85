"""Font request model, cache layout and install helpers.

Architecture
: `VariantSpec` / `VariantFilter` describe concrete catalog variants and the
  wildcard filters users request; `is_covered_by` is the only matching rule.
: `FontSpec` parses ``[source:]font-id[@filter,...]`` strings into
  `InstallRequest` values that sources answer with an `InstallSpec`.
: `SourceCache` pins each source's catalog, freshness marker and downloaded
  files under one directory, naming files after the hash of their remote
  location so repeated installs never download twice.
: `install_font_files` and `write_stylesheet` turn acquired files into an
  installed layout and an optional ``@font-face`` stylesheet.

The multi-source resolver lives in :mod:`fontsmith.fonts.resolver`; it is not
re-exported here because it depends on the source registry.
"""

from fontsmith.fonts.cache import SourceCache
from fontsmith.fonts.install import OutputFormat, install_font_files
from fontsmith.fonts.specs import FontDescription, FontSpec, InstallRequest, InstallSpec
from fontsmith.fonts.stylesheet import render_stylesheet, write_stylesheet
from fontsmith.fonts.variants import (
    ALL_VARIANTS,
    Style,
    StyleWildcard,
    VariantFilter,
    VariantSpec,
    Weight,
    WeightWildcard,
    filter_variants,
)


__all__ = [
    "ALL_VARIANTS",
    "FontDescription",
    "FontSpec",
    "InstallRequest",
    "InstallSpec",
    "OutputFormat",
    "SourceCache",
    "Style",
    "StyleWildcard",
    "VariantFilter",
    "VariantSpec",
    "Weight",
    "WeightWildcard",
    "filter_variants",
    "install_font_files",
    "render_stylesheet",
    "write_stylesheet",
]
