from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from fontsmith.core.exceptions import (
    CatalogMissingError,
    FontsmithError,
    InstallError,
    NoSuchFamilyError,
    ResolutionError,
    UnknownSourceError,
)
from fontsmith.core.host import Host
from fontsmith.fonts.resolver import (
    MultiSourceResolver,
    ResolutionFailure,
    ResolvedFont,
    merge_outcome,
)
from fontsmith.fonts.specs import FontDescription, FontSpec, InstallRequest, InstallSpec
from fontsmith.fonts.variants import VariantSpec, filter_variants
from fontsmith.sources import FontSource, RefreshOutcome


class RecordingEmitter:
    debug_enabled = False

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append(message)

    def event(self, name: str, payload: dict[str, Any]) -> None:
        self.events.append((name, dict(payload)))


class FakeSource(FontSource):
    id = "fake"
    name = "Fake"

    def __init__(
        self,
        source_id: str,
        host: Host,
        families: dict[str, list[str]],
        *,
        broken: set[str] | None = None,
        refresh_error: Exception | None = None,
    ) -> None:
        super().__init__(host)
        self.id = source_id
        self.name = source_id.title()
        self.families = families
        self.broken = broken or set()
        self.refresh_error = refresh_error
        self.resolve_calls: list[str] = []
        self.barrier: tuple[asyncio.Event, int] | None = None
        self._entered = 0

    async def refresh(self, force: bool = False) -> RefreshOutcome:
        if self.refresh_error is not None:
            raise self.refresh_error
        return RefreshOutcome.DOWNLOADED if force else RefreshOutcome.ALREADY_UP_TO_DATE

    async def resolve(self, request: InstallRequest) -> tuple[InstallSpec, FontDescription]:
        self.resolve_calls.append(request.font_id)
        if self.barrier is not None:
            event, expected = self.barrier
            self._entered += 1
            if self._entered == expected:
                event.set()
            await asyncio.wait_for(event.wait(), timeout=2)
        variants = self.families.get(request.font_id)
        if variants is None:
            raise NoSuchFamilyError(request.font_id, self.id)
        selected = filter_variants([VariantSpec.parse(v) for v in variants], request.variants)
        description = FontDescription(request.font_id, request.font_id.title(), "1")
        return InstallSpec.from_variants(request.font_id, selected), description

    async def acquire(self, spec: InstallSpec, cache_dir: Path) -> dict[VariantSpec, Path]:
        if spec.font_id in self.broken:
            raise FontsmithError(f"cannot download {spec.font_id}")
        paths: dict[VariantSpec, Path] = {}
        for variant in spec.variants:
            path = cache_dir / spec.font_id / f"{variant}.ttf"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"font")
            paths[variant] = path
        return paths


@pytest.fixture()
def host(tmp_path: Path) -> Host:
    return Host(cache_root=tmp_path / "cache", font_install_dir=tmp_path / "fonts", version="0")


def _specs(*texts: str) -> list[FontSpec]:
    return [FontSpec.parse(text) for text in texts]


def test_falls_back_to_later_sources(host: Host) -> None:
    alpha = FakeSource("alpha", host, {"roboto": ["regular"]})
    beta = FakeSource("beta", host, {"roboto": ["regular", "700"], "lobster": ["regular"]})
    emitter = RecordingEmitter()
    resolver = MultiSourceResolver([alpha, beta], emitter=emitter)

    report = asyncio.run(resolver.resolve(_specs("roboto", "lobster")))

    assert report.ok
    assert report.resolved["roboto"].source is alpha
    assert report.resolved["lobster"].source is beta
    # a font resolved by an earlier source is not requested again
    assert beta.resolve_calls == ["lobster"]
    resolved_events = [payload for name, payload in emitter.events if name == "font_resolved"]
    assert {(event["font"], event["source"]) for event in resolved_events} == {
        ("roboto", "alpha"),
        ("lobster", "beta"),
    }


def test_reports_only_unresolvable_fonts(host: Host) -> None:
    alpha = FakeSource("alpha", host, {"roboto": ["regular"]})
    beta = FakeSource("beta", host, {"lobster": ["regular"]})
    emitter = RecordingEmitter()
    resolver = MultiSourceResolver([alpha, beta], emitter=emitter)

    report = asyncio.run(resolver.resolve(_specs("roboto", "comic-sans", "lobster")))

    assert sorted(report.resolved) == ["lobster", "roboto"]
    assert list(report.unresolved) == ["comic-sans"]
    failure = report.unresolved["comic-sans"]
    assert failure.source_id == "beta"
    assert "No such family 'comic-sans'" in failure.reason
    assert ("font_unresolved", {"font": "comic-sans", "reason": failure.reason}) in emitter.events

    with pytest.raises(ResolutionError, match="1 font failed to resolve") as excinfo:
        report.raise_for_failures()
    assert excinfo.value.unresolved == ("comic-sans",)


def test_pinned_requests_only_use_their_source(host: Host) -> None:
    alpha = FakeSource("alpha", host, {"roboto": ["regular"]})
    beta = FakeSource("beta", host, {"roboto": ["regular", "italic"]})
    resolver = MultiSourceResolver([alpha, beta])

    report = asyncio.run(resolver.resolve(_specs("beta:roboto@italic")))

    assert alpha.resolve_calls == []
    resolved = report.resolved["roboto"]
    assert resolved.source is beta
    assert [str(variant) for variant in resolved.spec.variants] == ["italic"]


def test_unknown_pin_is_unresolved(host: Host) -> None:
    resolver = MultiSourceResolver([FakeSource("alpha", host, {"roboto": ["regular"]})])

    report = asyncio.run(resolver.resolve(_specs("missing:roboto")))

    assert not report.ok
    assert isinstance(report.unresolved["roboto"].error, UnknownSourceError)


def test_no_sources_leaves_everything_unresolved() -> None:
    report = asyncio.run(MultiSourceResolver([]).resolve(_specs("roboto")))
    assert report.unresolved["roboto"].reason == "No sources enabled."


def test_resolves_fonts_of_one_source_concurrently(host: Host) -> None:
    alpha = FakeSource("alpha", host, {"roboto": ["regular"], "lobster": ["regular"]})

    async def scenario():
        alpha.barrier = (asyncio.Event(), 2)
        return await MultiSourceResolver([alpha]).resolve(_specs("roboto", "lobster"))

    report = asyncio.run(scenario())

    assert sorted(report.resolved) == ["lobster", "roboto"]


def test_acquire_isolates_failures(host: Host) -> None:
    alpha = FakeSource(
        "alpha", host, {"roboto": ["regular", "700"], "lobster": ["regular"]}, broken={"lobster"}
    )
    emitter = RecordingEmitter()
    resolver = MultiSourceResolver([alpha], emitter=emitter)

    report = asyncio.run(resolver.resolve(_specs("roboto", "lobster")))
    acquisition = asyncio.run(resolver.acquire(report))

    assert list(acquisition.acquired) == ["roboto"]
    files = acquisition.acquired["roboto"].files
    assert set(files) == {VariantSpec.parse("regular"), VariantSpec.parse("700")}
    assert all(path.is_file() for path in files.values())
    assert isinstance(acquisition.failed["lobster"], FontsmithError)
    assert emitter.errors == ["Failed to download 'lobster' from 'alpha'."]
    with pytest.raises(InstallError, match="1 font failed to install"):
        acquisition.raise_for_failures()


def test_refresh_collects_outcomes_per_source(host: Host) -> None:
    alpha = FakeSource("alpha", host, {})
    beta = FakeSource("beta", host, {}, refresh_error=CatalogMissingError("beta"))
    emitter = RecordingEmitter()
    resolver = MultiSourceResolver([alpha, beta], emitter=emitter)

    outcomes = asyncio.run(resolver.refresh(force=True))

    assert outcomes["alpha"] is RefreshOutcome.DOWNLOADED
    assert isinstance(outcomes["beta"], CatalogMissingError)
    assert ("source_refresh", {"source": "Alpha", "outcome": "downloaded"}) in emitter.events
    assert len(emitter.errors) == 1
    assert emitter.errors[0].startswith("[Beta] Error when refreshing")


def test_merge_outcome_keeps_first_success(host: Host) -> None:
    source = FakeSource("alpha", host, {})
    success = ResolvedFont(
        source, InstallSpec("roboto"), FontDescription("roboto", "Roboto", "1")
    )
    failure = ResolutionFailure("roboto", NoSuchFamilyError("roboto"), "beta")
    other = ResolutionFailure("roboto", NoSuchFamilyError("roboto"), "gamma")

    assert merge_outcome(None, failure) is failure
    assert merge_outcome(failure, success) is success
    assert merge_outcome(success, failure) is success
    assert merge_outcome(failure, other) is other


def test_failed_pin_is_not_hidden_by_unpinned_success(host: Host) -> None:
    alpha = FakeSource("alpha", host, {"roboto": ["regular"]})
    emitter = RecordingEmitter()
    resolver = MultiSourceResolver([alpha], emitter=emitter)

    report = asyncio.run(resolver.resolve(_specs("missing:roboto", "roboto")))

    assert not report.ok
    assert list(report.unresolved) == ["roboto"]
    assert isinstance(report.unresolved["roboto"].error, UnknownSourceError)
    assert report.resolved["roboto"].source is alpha
    with pytest.raises(ResolutionError, match="1 font failed to resolve"):
        report.raise_for_failures()


def test_pinned_request_reaches_its_source_after_unpinned_success(host: Host) -> None:
    alpha = FakeSource("alpha", host, {"roboto": ["regular", "700"]})
    beta = FakeSource("beta", host, {})
    resolver = MultiSourceResolver([alpha, beta])

    report = asyncio.run(resolver.resolve(_specs("roboto", "beta:roboto@700")))

    assert alpha.resolve_calls == ["roboto"]
    assert beta.resolve_calls == ["roboto"]
    assert report.unresolved["roboto"].source_id == "beta"


def test_each_pin_group_resolves_with_its_own_filter(host: Host) -> None:
    alpha = FakeSource("alpha", host, {"roboto": ["regular"]})
    beta = FakeSource("beta", host, {"roboto": ["regular", "700"]})
    resolver = MultiSourceResolver([alpha, beta])

    report = asyncio.run(resolver.resolve(_specs("roboto", "beta:roboto@700")))

    assert report.ok
    assert beta.resolve_calls == ["roboto"]
    # the first group's success is kept
    assert report.resolved["roboto"].source is alpha
