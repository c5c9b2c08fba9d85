"""Font variant model: weights, styles and the coverage predicate.

Catalog data only ever contains *defined* values, a concrete weight (fixed
numeric or variable) paired with a concrete style. Requests use *abstract*
values, which may also be wildcards:

``WeightWildcard.ALL_FIXED``
    every fixed weight, never the variable axis.
``WeightWildcard.ALL``
    every weight including the variable axis.
``StyleWildcard.ALL``
    both regular and italic.

Coverage is a compatibility test between one defined value and one abstract
value, not an ordering. Defined values still sort (variable first, then by
numeric weight, then regular before italic) so listings stay stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re

from fontsmith.core.exceptions import DeserialisationError


DEFAULT_WEIGHT = 400
VARIABLE_TOKEN = "variable"

_DEFINED_PATTERN = re.compile(r"^(?P<weight>[0-9]+|variable)(?P<style>[a-z]*)$")
_FILTER_PATTERN = re.compile(r"^(?P<weight>[0-9]+|variable|fixed|\*)(?P<style>[a-z*]*)$")


class Style(str, Enum):
    """Defined font style."""

    REGULAR = "regular"
    ITALIC = "italic"

    @classmethod
    def parse(cls, text: str) -> Style:
        """Parse a style suffix; empty text and ``normal`` mean regular."""
        value = text.strip().lower()
        if value in {"", "regular", "normal"}:
            return cls.REGULAR
        if value == "italic":
            return cls.ITALIC
        raise DeserialisationError(f"Unknown font style '{text}'.")

    @property
    def css(self) -> str:
        return "italic" if self is Style.ITALIC else "normal"

    @property
    def sort_key(self) -> int:
        return 0 if self is Style.REGULAR else 1

    def is_covered_by(self, requested: Style | StyleWildcard) -> bool:
        """Return whether this style satisfies a requested style."""
        if requested is StyleWildcard.ALL:
            return True
        return self is requested


class StyleWildcard(Enum):
    """Abstract style matching every defined style."""

    ALL = "all"


class WeightWildcard(Enum):
    """Abstract weights matching a family of defined weights."""

    ALL_FIXED = "fixed"
    ALL = "all"


@dataclass(frozen=True, slots=True)
class Weight:
    """Defined font weight.

    ``value`` holds the numeric weight of a fixed weight and is ``None`` for
    the variable weight axis.
    """

    value: int | None = DEFAULT_WEIGHT

    @classmethod
    def variable(cls) -> Weight:
        return cls(None)

    @classmethod
    def fixed(cls, value: int) -> Weight:
        if value <= 0:
            raise DeserialisationError(f"Font weight must be positive, got {value}.")
        return cls(value)

    @property
    def is_variable(self) -> bool:
        return self.value is None

    @property
    def is_fixed(self) -> bool:
        return self.value is not None

    @property
    def sort_key(self) -> tuple[int, int]:
        return (0, 0) if self.value is None else (1, self.value)

    def __lt__(self, other: Weight) -> bool:
        if not isinstance(other, Weight):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return VARIABLE_TOKEN if self.value is None else str(self.value)

    def is_covered_by(self, requested: Weight | WeightWildcard) -> bool:
        """Return whether this weight satisfies a requested weight."""
        if requested is WeightWildcard.ALL:
            return True
        if requested is WeightWildcard.ALL_FIXED:
            return self.is_fixed
        return self == requested



def _parse_weight(token: str, text: str) -> Weight:
    if token == VARIABLE_TOKEN:
        return Weight.variable()
    try:
        return Weight.fixed(int(token))
    except ValueError as exc:
        raise DeserialisationError(f"Invalid font weight in variant '{text}'.") from exc


@dataclass(frozen=True, slots=True)
class VariantSpec:
    """Defined variant, a weight and style pair describing one font file."""

    weight: Weight
    style: Style = Style.REGULAR

    @classmethod
    def parse(cls, text: str) -> VariantSpec:
        """Decode a canonical variant string such as ``regular`` or ``700italic``."""
        value = text.strip().lower()
        if value in {Style.REGULAR.value, Style.ITALIC.value}:
            return cls(Weight.fixed(DEFAULT_WEIGHT), Style(value))
        match = _DEFINED_PATTERN.match(value)
        if match is None:
            raise DeserialisationError(f"Invalid font variant '{text}'.")
        weight = _parse_weight(match.group("weight"), text)
        style = Style.parse(match.group("style"))
        return cls(weight, style)

    @property
    def sort_key(self) -> tuple[tuple[int, int], int]:
        return (self.weight.sort_key, self.style.sort_key)

    def __lt__(self, other: VariantSpec) -> bool:
        if not isinstance(other, VariantSpec):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        if self.weight.value == DEFAULT_WEIGHT:
            return self.style.value
        suffix = "italic" if self.style is Style.ITALIC else ""
        return f"{self.weight}{suffix}"

    def is_covered_by(self, requested: VariantFilter) -> bool:
        """Return whether this variant satisfies both halves of a filter."""
        return self.weight.is_covered_by(requested.weight) and self.style.is_covered_by(
            requested.style
        )


@dataclass(frozen=True, slots=True)
class VariantFilter:
    """Abstract variant used to select defined variants from a catalog."""

    weight: Weight | WeightWildcard = WeightWildcard.ALL
    style: Style | StyleWildcard = StyleWildcard.ALL

    @classmethod
    def exact(cls, variant: VariantSpec) -> VariantFilter:
        return cls(variant.weight, variant.style)

    @classmethod
    def parse(cls, text: str) -> VariantFilter:
        """Decode a request filter.

        Canonical variant strings of fixed weights match exactly that variant.
        The weight may also be ``*`` (every weight), ``fixed`` (every fixed
        weight) or ``variable``; after such a token the style suffix is
        optional and defaults to every style, so ``variable`` selects both
        variable styles and ``variableregular`` only the upright one. ``all``
        is a synonym for ``*``.
        """
        value = text.strip().lower()
        if value in {"all", "*"}:
            return cls()
        if value in {Style.REGULAR.value, Style.ITALIC.value}:
            return cls.exact(VariantSpec.parse(value))
        match = _FILTER_PATTERN.match(value)
        if match is None:
            raise DeserialisationError(f"Invalid variant filter '{text}'.")
        token = match.group("weight")
        suffix = match.group("style")
        if token.isdigit():
            return cls.exact(VariantSpec.parse(value))
        weight: Weight | WeightWildcard
        if token == "*":
            weight = WeightWildcard.ALL
        elif token == "fixed":
            weight = WeightWildcard.ALL_FIXED
        else:
            weight = Weight.variable()
        style: Style | StyleWildcard
        if suffix in {"", "*"}:
            style = StyleWildcard.ALL
        else:
            style = Style.parse(suffix)
        return cls(weight, style)

    def __str__(self) -> str:
        exact_weight = isinstance(self.weight, Weight) and self.weight.is_fixed
        if exact_weight and isinstance(self.style, Style):
            return str(VariantSpec(self.weight, self.style))
        if isinstance(self.weight, Weight):
            weight = str(self.weight)
        else:
            weight = "*" if self.weight is WeightWildcard.ALL else "fixed"
        style = "" if self.style is StyleWildcard.ALL else self.style.value
        if weight == "*" and not style:
            return "all"
        return f"{weight}{style}"

    def is_covered_by(self, other: VariantFilter) -> bool:
        """Return whether every variant this filter selects is selected by ``other``."""
        return _weight_within(self.weight, other.weight) and _style_within(
            self.style, other.style
        )


def _weight_within(inner: Weight | WeightWildcard, outer: Weight | WeightWildcard) -> bool:
    if outer is WeightWildcard.ALL:
        return True
    if outer is WeightWildcard.ALL_FIXED:
        return inner is WeightWildcard.ALL_FIXED or (
            isinstance(inner, Weight) and inner.is_fixed
        )
    return inner == outer


def _style_within(inner: Style | StyleWildcard, outer: Style | StyleWildcard) -> bool:
    if outer is StyleWildcard.ALL:
        return True
    return inner == outer


def filter_variants(
    variants: list[VariantSpec] | tuple[VariantSpec, ...],
    filters: list[VariantFilter] | tuple[VariantFilter, ...],
) -> tuple[VariantSpec, ...]:
    """Return the variants covered by at least one filter, in catalog order."""
    return tuple(
        variant
        for variant in variants
        if any(variant.is_covered_by(requested) for requested in filters)
    )


def collapse_filters(
    filters: list[VariantFilter] | tuple[VariantFilter, ...],
) -> tuple[VariantFilter, ...]:
    """Drop filters already covered by another one, keeping first-seen order."""
    kept: list[VariantFilter] = []
    for candidate in filters:
        if any(candidate.is_covered_by(existing) for existing in kept):
            continue
        kept = [existing for existing in kept if not existing.is_covered_by(candidate)]
        kept.append(candidate)
    return tuple(kept)


ALL_VARIANTS = VariantFilter()


__all__ = [
    "ALL_VARIANTS",
    "DEFAULT_WEIGHT",
    "Style",
    "StyleWildcard",
    "VariantFilter",
    "VariantSpec",
    "Weight",
    "WeightWildcard",
    "collapse_filters",
    "filter_variants",
]
