"""Primary public API for fontsmith."""

from __future__ import annotations

from fontsmith.core.config import FontsmithConfig, load_config
from fontsmith.core.exceptions import (
    FontsmithError,
    InstallError,
    NotFoundError,
    ResolutionError,
)
from fontsmith.core.host import Host
from fontsmith.fonts.resolver import MultiSourceResolver, ResolutionReport
from fontsmith.fonts.specs import FontDescription, FontSpec, InstallRequest, InstallSpec
from fontsmith.fonts.variants import (
    Style,
    StyleWildcard,
    VariantFilter,
    VariantSpec,
    Weight,
    WeightWildcard,
)
from fontsmith.sources import FontSource, RefreshOutcome, create_source, create_sources
from fontsmith.version import get_version


__version__ = get_version()

__all__ = [
    "FontDescription",
    "FontSource",
    "FontSpec",
    "FontsmithConfig",
    "FontsmithError",
    "Host",
    "InstallError",
    "InstallRequest",
    "InstallSpec",
    "MultiSourceResolver",
    "NotFoundError",
    "RefreshOutcome",
    "ResolutionError",
    "ResolutionReport",
    "Style",
    "StyleWildcard",
    "VariantFilter",
    "VariantSpec",
    "Weight",
    "WeightWildcard",
    "__version__",
    "create_source",
    "create_sources",
    "get_version",
    "load_config",
]
