"""Google Fonts catalog backend.

The catalog is a single JSON document mirrored from the Google Fonts API and
published on a Git branch. The branch head commit serves as freshness marker,
so refreshing an unchanged catalog costs one small API request.

Endpoints default to the public mirror and can be overridden per source in
the configuration file (``commit_url`` / ``index_url``) or through the
``FONTSMITH_GOOGLE_FONTS_COMMIT_URL`` / ``FONTSMITH_GOOGLE_FONTS_INDEX_URL``
environment variables.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import requests

from fontsmith.core.diagnostics import DiagnosticEmitter
from fontsmith.core.exceptions import (
    CatalogMissingError,
    DeserialisationError,
    FontsmithError,
    NoMatchingVariantError,
    NoSuchFamilyError,
    SerialisationError,
)
from fontsmith.core.host import Host
from fontsmith.core.http import HttpClient
from fontsmith.fonts.cache import SourceCache
from fontsmith.fonts.specs import FontDescription, InstallRequest, InstallSpec
from fontsmith.fonts.variants import VariantSpec, filter_variants

from .base import FontSource, RefreshOutcome


logger = logging.getLogger(__name__)

DEFAULT_COMMIT_URL = "https://api.github.com/repos/fontpm/data/branches/data"
DEFAULT_INDEX_URL = "https://raw.githubusercontent.com/fontpm/data/data/google-fonts.json"
COMMIT_URL_ENV = "FONTSMITH_GOOGLE_FONTS_COMMIT_URL"
INDEX_URL_ENV = "FONTSMITH_GOOGLE_FONTS_INDEX_URL"


class FamilyRecord(BaseModel):
    """One family entry of the catalog."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str
    version: int = 0
    tags: list[str] = Field(default_factory=list)
    last_modified: int = Field(default=0, alias="lastModified")
    files: dict[str, str] = Field(default_factory=dict)
    variants: list[str] = Field(default_factory=list)

    def defined_variants(self) -> list[VariantSpec]:
        return [VariantSpec.parse(variant) for variant in self.variants]

    def describe(self) -> FontDescription:
        return FontDescription(font_id=self.id, name=self.display_name, version=str(self.version))


class Catalog(BaseModel):
    """Catalog snapshot: families by id and family ids by tag."""

    families: dict[str, FamilyRecord] = Field(default_factory=dict)
    tags: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def from_json(cls, payload: str | bytes) -> Catalog:
        try:
            return cls.model_validate_json(payload)
        except ValidationError as exc:
            raise DeserialisationError(f"Invalid Google Fonts catalog: {exc}") from exc

    def to_json(self) -> str:
        try:
            return self.model_dump_json(by_alias=True)
        except (TypeError, ValueError) as exc:
            raise SerialisationError(f"Unable to serialise Google Fonts catalog: {exc}") from exc

    def get_family(self, font_id: str) -> FamilyRecord | None:
        return self.families.get(font_id)

    def all_families(self) -> list[str]:
        return sorted(self.families)

    def families_with_tag(self, tag: str) -> list[str]:
        return list(self.tags.get(tag, ()))

    def search_by_tags(self, tags: Sequence[str]) -> list[str]:
        """Return the families carrying every tag, sorted by id."""
        if not tags:
            return self.all_families()
        # Start from the rarest tag so the intersection stays small.
        candidates = min((self.families_with_tag(tag) for tag in tags), key=len)
        required = set(tags)
        matches = {
            font_id
            for font_id in candidates
            if font_id in self.families and required.issubset(self.families[font_id].tags)
        }
        return sorted(matches)


class GoogleFontsSource(FontSource):
    """Fonts from the Google Fonts catalog."""

    id = "google-fonts"
    name = "Google Fonts"

    def __init__(
        self,
        host: Host,
        *,
        emitter: DiagnosticEmitter | None = None,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(host, emitter=emitter)
        settings: dict[str, Any] = dict(host.config_for(self.id) or {})
        self.commit_url = str(
            settings.get("commit_url") or os.environ.get(COMMIT_URL_ENV) or DEFAULT_COMMIT_URL
        )
        self.index_url = str(
            settings.get("index_url") or os.environ.get(INDEX_URL_ENV) or DEFAULT_INDEX_URL
        )
        self.cache = SourceCache(self.cache_dir)
        self.http = HttpClient(
            user_agent=host.user_agent(), timeout=host.http_timeout, session=session
        )

    async def latest_marker(self) -> str:
        payload = await self.http.fetch_json(self.commit_url)
        try:
            return str(payload["commit"]["sha"])
        except (KeyError, TypeError) as exc:
            raise DeserialisationError(
                f"Unexpected branch payload from '{self.commit_url}'."
            ) from exc

    async def refresh(self, force: bool = False) -> RefreshOutcome:
        latest = await self.latest_marker()
        logger.debug("[%s] latest marker: %s", self.id, latest)

        if not force:
            current = await asyncio.to_thread(self.cache.read_marker)
            logger.debug("[%s] cached marker: %s", self.id, current or "<none>")
            has_catalog = await asyncio.to_thread(self.cache.has_catalog)
            if current is not None and has_catalog and current == latest:
                return RefreshOutcome.ALREADY_UP_TO_DATE

        raw = await self.http.fetch_bytes(self.index_url)
        catalog = await asyncio.to_thread(Catalog.from_json, raw)
        await asyncio.to_thread(self.cache.write_catalog, catalog.to_json())
        # The marker goes last: a crash before this line forces a re-fetch.
        await asyncio.to_thread(self.cache.write_marker, latest)
        logger.debug("[%s] stored %d families", self.id, len(catalog.families))
        return RefreshOutcome.DOWNLOADED

    def _load_catalog(self) -> Catalog:
        payload = self.cache.read_catalog()
        if payload is None:
            raise CatalogMissingError(self.id)
        return Catalog.from_json(payload)

    async def catalog(self) -> Catalog:
        return await asyncio.to_thread(self._load_catalog)

    async def resolve(self, request: InstallRequest) -> tuple[InstallSpec, FontDescription]:
        catalog = await self.catalog()
        family = catalog.get_family(request.font_id)
        if family is None:
            raise NoSuchFamilyError(request.font_id, self.id)
        selected = filter_variants(family.defined_variants(), request.variants)
        if not selected:
            wanted = ", ".join(str(variant) for variant in request.variants)
            raise NoMatchingVariantError(
                f"Family '{request.font_id}' has no variant matching {wanted}."
            )
        return InstallSpec.from_variants(family.id, selected), family.describe()

    async def acquire(self, spec: InstallSpec, cache_dir: Path) -> dict[VariantSpec, Path]:
        catalog = await self.catalog()
        family = catalog.get_family(spec.font_id)
        if family is None:
            raise FontsmithError(f"Font '{spec.font_id}' does not exist in '{self.id}'.")

        cache = SourceCache(cache_dir)
        paths: dict[VariantSpec, Path] = {}
        for variant in spec.variants:
            remote = family.files.get(str(variant))
            if remote is None:
                raise FontsmithError(
                    f"Could not get file for variant '{variant}' of '{spec.font_id}'."
                )
            target = cache.asset_path(spec.font_id, variant, remote)
            paths[variant] = target
            if await asyncio.to_thread(target.exists):
                self.emitter.event("asset_cached", {"font": spec.font_id, "variant": str(variant)})
                continue
            url = remote if "://" in remote else f"https://{remote}"
            self.emitter.event("asset_fetch", {"url": url})
            payload = await self.http.fetch_bytes(url)
            await asyncio.to_thread(_write_file, target, payload)
        return paths

    async def search(self, tags: Sequence[str] = ()) -> list[str]:
        catalog = await self.catalog()
        return catalog.search_by_tags(list(tags))


def _write_file(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)


__all__ = ["Catalog", "FamilyRecord", "GoogleFontsSource"]
