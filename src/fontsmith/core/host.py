"""Host context shared by every font source.

A :class:`Host` bundles the resolved directories and configuration of one
fontsmith run. It is immutable and handed to each source when the source is
created, so sources never reach for process-wide state.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fontsmith.version import get_version

from .config import FontsmithConfig
from .user_dir import APP_NAME, FontsmithUserDir, resolve_user_dir


@dataclass(frozen=True, slots=True)
class Host:
    """Directories, settings and identity exposed to sources."""

    cache_root: Path
    font_install_dir: Path
    config: FontsmithConfig = field(default_factory=FontsmithConfig)
    version: str = field(default_factory=get_version)

    @classmethod
    def from_config(
        cls,
        config: FontsmithConfig,
        *,
        user_dir: FontsmithUserDir | None = None,
    ) -> Host:
        """Build a host, letting configured directories override the user roots."""
        user_dir = user_dir or resolve_user_dir()
        general = config.fontsmith
        cache_root = general.cache_dir.expanduser() if general.cache_dir else user_dir.cache_root
        install_dir = (
            general.font_install_dir.expanduser()
            if general.font_install_dir
            else user_dir.fonts_root
        )
        return cls(cache_root=cache_root, font_install_dir=install_dir, config=config)

    @property
    def enabled_sources(self) -> list[str]:
        return list(self.config.fontsmith.enabled_sources)

    @property
    def http_timeout(self) -> float:
        return self.config.fontsmith.http_timeout

    def cache_dir_for(self, source_id: str) -> Path:
        """Return the cache directory owned by a source (not created)."""
        return self.cache_root / source_id

    def config_for(self, source_id: str) -> Mapping[str, Any] | None:
        return self.config.source_settings(source_id)

    def user_agent(self) -> str:
        return f"{APP_NAME}/{self.version}"


__all__ = ["Host"]
