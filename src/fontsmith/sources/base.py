"""Contract implemented by every font catalog backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import ClassVar

from fontsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from fontsmith.core.host import Host
from fontsmith.fonts.specs import FontDescription, InstallRequest, InstallSpec
from fontsmith.fonts.variants import VariantSpec


class RefreshOutcome(str, Enum):
    """Result of refreshing a source catalog."""

    ALREADY_UP_TO_DATE = "already_up_to_date"
    DOWNLOADED = "downloaded"


class FontSource(ABC):
    """A remote catalog fonts can be resolved against and downloaded from.

    Subclasses set :attr:`id` and :attr:`name` and receive the shared
    :class:`~fontsmith.core.host.Host` at construction. A source holds no
    mutable state besides its cache directory, so one instance may serve
    many concurrent tasks.

    ``refresh`` is the only operation that talks to the catalog endpoint;
    ``resolve`` works purely from the cached catalog and ``acquire`` only
    downloads files missing from the cache.
    """

    id: ClassVar[str]
    name: ClassVar[str]

    def __init__(self, host: Host, *, emitter: DiagnosticEmitter | None = None) -> None:
        self.host = host
        self.emitter = emitter or NullEmitter()

    @property
    def cache_dir(self) -> Path:
        return self.host.cache_dir_for(self.id)

    @abstractmethod
    async def refresh(self, force: bool = False) -> RefreshOutcome:
        """Bring the cached catalog up to date."""

    @abstractmethod
    async def resolve(self, request: InstallRequest) -> tuple[InstallSpec, FontDescription]:
        """Select the defined variants satisfying a request from the cached catalog."""

    @abstractmethod
    async def acquire(self, spec: InstallSpec, cache_dir: Path) -> dict[VariantSpec, Path]:
        """Ensure every variant of ``spec`` is present under ``cache_dir``."""

    async def search(self, tags: Sequence[str] = ()) -> list[str]:
        """Return family ids carrying every tag."""
        raise NotImplementedError(f"Source '{self.id}' does not support searching.")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


__all__ = ["FontSource", "RefreshOutcome"]
