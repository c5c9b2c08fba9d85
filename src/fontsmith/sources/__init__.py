"""Registry of the font catalog backends shipped with fontsmith."""

from __future__ import annotations

from collections.abc import Iterable

from fontsmith.core.diagnostics import DiagnosticEmitter
from fontsmith.core.exceptions import UnknownSourceError
from fontsmith.core.host import Host

from .base import FontSource, RefreshOutcome
from .google_fonts import GoogleFontsSource


SOURCE_TYPES: dict[str, type[FontSource]] = {
    GoogleFontsSource.id: GoogleFontsSource,
}


def available_sources() -> tuple[str, ...]:
    """Return the ids of every registered backend."""
    return tuple(SOURCE_TYPES)


def create_source(
    source_id: str,
    host: Host,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> FontSource:
    """Instantiate a registered backend bound to ``host``."""
    try:
        source_type = SOURCE_TYPES[source_id]
    except KeyError as exc:
        raise UnknownSourceError(source_id) from exc
    return source_type(host, emitter=emitter)


def create_sources(
    host: Host,
    *,
    only: Iterable[str] | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> list[FontSource]:
    """Instantiate the enabled sources in priority order.

    ``only`` narrows the selection to the given ids; ids that are not enabled
    in the configuration are skipped. Unknown ids in the configuration raise
    :class:`~fontsmith.core.exceptions.UnknownSourceError`.
    """
    wanted = set(only) if only is not None else None
    sources: list[FontSource] = []
    for source_id in host.enabled_sources:
        if wanted is not None and source_id not in wanted:
            continue
        sources.append(create_source(source_id, host, emitter=emitter))
    return sources


__all__ = [
    "SOURCE_TYPES",
    "FontSource",
    "GoogleFontsSource",
    "RefreshOutcome",
    "available_sources",
    "create_source",
    "create_sources",
]
