"""Configuration models and YAML persistence for fontsmith.

The configuration lives in ``config.yaml`` under the config root (see
:mod:`fontsmith.core.user_dir`). A default file is written the first time it
is loaded.

GeneralConfig (``fontsmith`` section)

`enabled_sources` (`list[str]`)
: Source ids queried by ``install`` and ``refresh``. The list order is the
  resolution priority: when a font is available from several sources, the
  first one listed wins. Defaults to every built-in source.

`cache_dir` (`Path | None`)
: Root of the per-source caches. Each source stores its catalog, freshness
  marker and downloaded files in ``<cache_dir>/<source id>``. Defaults to the
  user cache root.

`font_install_dir` (`Path | None`)
: Destination of ``install`` when no ``--directory`` is given. Defaults to
  ``fonts`` under the user data root.

`http_timeout` (`float`)
: Timeout in seconds applied to every HTTP request.

FontsmithConfig

`fontsmith` (`GeneralConfig`)
: General settings described above.

`sources` (`dict[str, dict]`)
: Free-form settings handed to each source by id, e.g.
  ``google-fonts: {index_url: ...}``.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError, SerialisationError


def _builtin_sources() -> list[str]:
    from fontsmith.sources import available_sources

    return list(available_sources())


class GeneralConfig(BaseModel):
    """Settings shared by every command."""

    model_config = ConfigDict(extra="forbid")

    enabled_sources: list[str] = Field(
        default_factory=_builtin_sources, description="Sources in priority order"
    )
    cache_dir: Path | None = Field(default=None, description="Cache root override")
    font_install_dir: Path | None = Field(default=None, description="Install root override")
    http_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    @field_validator("enabled_sources")
    @classmethod
    def _unique_sources(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for source_id in value:
            if source_id not in seen:
                seen.append(source_id)
        return seen


class FontsmithConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(extra="forbid")

    fontsmith: GeneralConfig = Field(default_factory=GeneralConfig)
    sources: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def source_settings(self, source_id: str) -> Mapping[str, Any] | None:
        return self.sources.get(source_id)


def parse_config(payload: str, *, origin: str = "<string>") -> FontsmithConfig:
    """Validate a YAML document into a :class:`FontsmithConfig`."""
    try:
        data = yaml.safe_load(payload)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in configuration '{origin}': {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Configuration '{origin}' must be a mapping.")
    try:
        return FontsmithConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration '{origin}': {exc}") from exc


def dump_config(config: FontsmithConfig) -> str:
    """Serialise a configuration to YAML."""
    payload = config.model_dump(mode="json")
    try:
        return yaml.safe_dump(payload, sort_keys=False, default_flow_style=False)
    except yaml.YAMLError as exc:
        raise SerialisationError(f"Unable to serialise configuration: {exc}") from exc


def save_config(config: FontsmithConfig, path: Path) -> Path:
    """Write a configuration file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_config(config), encoding="utf-8")
    return path


def load_config(path: Path) -> FontsmithConfig:
    """Load the configuration file, writing the defaults first when missing."""
    if not path.exists():
        config = FontsmithConfig()
        save_config(config, path)
        return config
    try:
        payload = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration '{path}': {exc}") from exc
    return parse_config(payload, origin=str(path))


__all__ = [
    "FontsmithConfig",
    "GeneralConfig",
    "dump_config",
    "load_config",
    "parse_config",
    "save_config",
]
