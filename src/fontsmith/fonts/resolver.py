"""Concurrent multi-source resolution with first-success-wins fallback.

Requests are grouped by their source pin and every group is resolved on
its own, so a pinned request always reaches its source. Unpinned requests
are tried against every enabled source in priority order: for each source,
all fonts still lacking a successful resolution are resolved concurrently,
and a success is never replaced by a later source. Fonts that a group could
not resolve end up in :attr:`ResolutionReport.unresolved`.

Acquisition and catalog refreshes run concurrently across fonts and sources;
a failure only affects the font or source it belongs to.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path

from fontsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from fontsmith.core.exceptions import (
    FontsmithError,
    InstallError,
    ResolutionError,
    UnknownSourceError,
    exception_hint,
)
from fontsmith.sources.base import FontSource, RefreshOutcome

from .specs import FontDescription, FontSpec, InstallSpec
from .variants import VariantSpec


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedFont:
    """A font matched by a source, ready to be acquired."""

    source: FontSource
    spec: InstallSpec
    description: FontDescription

    @property
    def font_id(self) -> str:
        return self.spec.font_id


@dataclass(frozen=True, slots=True)
class ResolutionFailure:
    """The last error seen while resolving a font."""

    font_id: str
    error: BaseException
    source_id: str | None = None

    @property
    def reason(self) -> str:
        return exception_hint(self.error) or type(self.error).__name__


@dataclass(slots=True)
class ResolutionReport:
    resolved: dict[str, ResolvedFont] = field(default_factory=dict)
    unresolved: dict[str, ResolutionFailure] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.unresolved

    def raise_for_failures(self) -> None:
        """Raise :class:`ResolutionError` naming the unresolved count, if any."""
        if self.unresolved:
            raise ResolutionError(list(self.unresolved))


@dataclass(frozen=True, slots=True)
class AcquiredFont:
    """Cached files of a resolved font."""

    resolved: ResolvedFont
    files: dict[VariantSpec, Path]


@dataclass(slots=True)
class AcquisitionReport:
    acquired: dict[str, AcquiredFont] = field(default_factory=dict)
    failed: dict[str, BaseException] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_failures(self) -> None:
        if self.failed:
            raise InstallError(list(self.failed))


_Outcome = ResolvedFont | ResolutionFailure


def merge_outcome(current: _Outcome | None, new: _Outcome) -> _Outcome:
    """Keep an existing success, otherwise take the newer outcome."""
    if isinstance(current, ResolvedFont):
        return current
    return new


class MultiSourceResolver:
    """Resolve and acquire fonts across several sources.

    ``sources`` is the list of enabled sources in priority order.
    """

    def __init__(
        self,
        sources: Sequence[FontSource],
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.sources = list(sources)
        self.emitter = emitter or NullEmitter()

    def candidates(self, pin: str | None) -> list[FontSource]:
        if pin is None:
            return list(self.sources)
        return [source for source in self.sources if source.id == pin]

    @staticmethod
    def partition(specs: Sequence[FontSpec]) -> dict[str | None, list[FontSpec]]:
        """Group requests by source pin, preserving first-seen order."""
        groups: dict[str | None, list[FontSpec]] = {}
        for spec in specs:
            groups.setdefault(spec.source, []).append(spec)
        return groups

    async def _refresh_one(
        self, source: FontSource, force: bool
    ) -> RefreshOutcome | BaseException:
        try:
            outcome = await source.refresh(force)
        except (FontsmithError, OSError) as exc:
            self.emitter.error(f"[{source.name}] Error when refreshing: {exc}", exc)
            return exc
        self.emitter.event("source_refresh", {"source": source.name, "outcome": outcome.value})
        return outcome

    async def refresh(self, force: bool = False) -> dict[str, RefreshOutcome | BaseException]:
        """Refresh every source concurrently, keyed by source id."""
        results = await asyncio.gather(
            *(self._refresh_one(source, force) for source in self.sources)
        )
        return {source.id: result for source, result in zip(self.sources, results)}

    async def _resolve_one(self, source: FontSource, spec: FontSpec) -> _Outcome:
        try:
            install_spec, description = await source.resolve(spec.to_request())
        except (FontsmithError, OSError) as exc:
            logger.debug("[%s] failed to resolve %s: %s", source.id, spec.font_id, exc)
            return ResolutionFailure(spec.font_id, exc, source.id)
        return ResolvedFont(source, install_spec, description)

    async def _resolve_partition(
        self, pin: str | None, group: Sequence[FontSpec]
    ) -> dict[str, _Outcome]:
        """Resolve one pin group; the result holds an outcome for every font of it."""
        outcomes: dict[str, _Outcome] = {}
        candidates = self.candidates(pin)
        if not candidates:
            error: FontsmithError = (
                UnknownSourceError(pin) if pin else FontsmithError("No sources enabled.")
            )
            for spec in group:
                outcomes[spec.font_id] = ResolutionFailure(spec.font_id, error, pin)
            return outcomes

        for source in candidates:
            pending = [
                spec for spec in group if not isinstance(outcomes.get(spec.font_id), ResolvedFont)
            ]
            if not pending:
                break
            results = await asyncio.gather(*(self._resolve_one(source, spec) for spec in pending))
            for spec, result in zip(pending, results):
                outcomes[spec.font_id] = merge_outcome(outcomes.get(spec.font_id), result)
                if isinstance(result, ResolvedFont):
                    self.emitter.event(
                        "font_resolved",
                        {
                            "font": spec.font_id,
                            "source": source.id,
                            "variants": len(result.spec.variants),
                        },
                    )
        return outcomes

    async def resolve(self, specs: Sequence[FontSpec]) -> ResolutionReport:
        """Resolve every request, one pin group after the other.

        A font failing in any group is unresolved, even when another group
        resolved the same font id; the first group's success is kept.
        """
        report = ResolutionReport()
        for pin, group in self.partition(specs).items():
            outcomes = await self._resolve_partition(pin, group)
            for font_id, outcome in outcomes.items():
                if isinstance(outcome, ResolvedFont):
                    report.resolved.setdefault(font_id, outcome)
                elif font_id not in report.unresolved:
                    report.unresolved[font_id] = outcome
                    self.emitter.event(
                        "font_unresolved", {"font": font_id, "reason": outcome.reason}
                    )
        return report

    async def _acquire_one(self, resolved: ResolvedFont) -> AcquiredFont | BaseException:
        source = resolved.source
        try:
            files = await source.acquire(resolved.spec, source.cache_dir)
        except (FontsmithError, OSError) as exc:
            logger.debug("[%s] failed to acquire %s: %s", source.id, resolved.font_id, exc)
            return exc
        return AcquiredFont(resolved, files)

    async def acquire(self, report: ResolutionReport) -> AcquisitionReport:
        """Download every resolved font into its source cache."""
        fonts = list(report.resolved.items())
        results = await asyncio.gather(*(self._acquire_one(resolved) for _, resolved in fonts))
        acquisition = AcquisitionReport()
        for (font_id, resolved), result in zip(fonts, results):
            if isinstance(result, AcquiredFont):
                acquisition.acquired[font_id] = result
            else:
                acquisition.failed[font_id] = result
                self.emitter.error(
                    f"Failed to download '{font_id}' from '{resolved.source.id}'.",
                    result,
                )
        return acquisition


__all__ = [
    "AcquiredFont",
    "AcquisitionReport",
    "MultiSourceResolver",
    "ResolutionFailure",
    "ResolutionReport",
    "ResolvedFont",
    "merge_outcome",
]
