"""Request and result value types exchanged between sources and the resolver."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from fontsmith.core.exceptions import DeserialisationError, FontSpecError

from .variants import ALL_VARIANTS, VariantFilter, VariantSpec, collapse_filters


@dataclass(frozen=True, slots=True)
class InstallRequest:
    """What the caller asked for: a font id and the variant filters to apply."""

    font_id: str
    variants: tuple[VariantFilter, ...] = (ALL_VARIANTS,)

    @classmethod
    def all_variants(cls, font_id: str) -> InstallRequest:
        """Request every weight and style of a family."""
        return cls(font_id, (ALL_VARIANTS,))


@dataclass(frozen=True, slots=True)
class InstallSpec:
    """What a source found: a font id and the defined variants to download."""

    font_id: str
    variants: tuple[VariantSpec, ...] = ()

    @classmethod
    def from_variants(cls, font_id: str, variants: Iterable[VariantSpec]) -> InstallSpec:
        return cls(font_id, tuple(variants))


@dataclass(frozen=True, slots=True)
class FontDescription:
    """Human facing metadata for a resolved family."""

    font_id: str
    name: str
    version: str


@dataclass(frozen=True, slots=True)
class FontSpec:
    """A parsed ``[source:]font-id[@filter,...]`` request string."""

    font_id: str
    source: str | None = None
    variants: tuple[VariantFilter, ...] = (ALL_VARIANTS,)

    @classmethod
    def parse(cls, text: str) -> FontSpec:
        """Parse a request string.

        ``roboto`` asks every enabled source for every variant of Roboto,
        ``google-fonts:roboto`` pins the request to one source and
        ``roboto@700,italic`` narrows the variants. Filters covered by another
        filter of the same request are dropped.
        """
        value = text.strip()
        if not value:
            raise FontSpecError("Empty font spec.")

        selector: str | None = None
        if "@" in value:
            value, selector = value.split("@", 1)

        source: str | None = None
        if ":" in value:
            source, value = value.split(":", 1)
            if ":" in value:
                raise FontSpecError(f"Character ':' is illegal in font id '{text}'.")
            source = source.strip()
            if not source:
                raise FontSpecError(f"Missing source id before ':' in '{text}'.")

        font_id = value.strip()
        if not font_id:
            raise FontSpecError(f"Missing font id in '{text}'.")

        variants: tuple[VariantFilter, ...] = (ALL_VARIANTS,)
        if selector is not None:
            tokens = [token for token in selector.split(",") if token.strip()]
            if not tokens:
                raise FontSpecError(f"Empty variant selector in '{text}'.")
            try:
                variants = collapse_filters([VariantFilter.parse(token) for token in tokens])
            except DeserialisationError as exc:
                raise FontSpecError(f"Invalid variant selector in '{text}': {exc}") from exc

        return cls(font_id=font_id, source=source, variants=variants)

    def to_request(self) -> InstallRequest:
        return InstallRequest(self.font_id, self.variants)

    def __str__(self) -> str:
        prefix = f"{self.source}:" if self.source else ""
        suffix = ""
        if self.variants != (ALL_VARIANTS,):
            suffix = "@" + ",".join(str(variant) for variant in self.variants)
        return f"{prefix}{self.font_id}{suffix}"


__all__ = ["FontDescription", "FontSpec", "InstallRequest", "InstallSpec"]
