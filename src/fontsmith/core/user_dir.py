"""Centralised resolution of the fontsmith data, config and cache directories."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import shutil


__all__ = [
    "APP_NAME",
    "FontsmithUserDir",
    "remove_tree",
    "resolve_user_dir",
]

APP_NAME = "fontsmith"
CONFIG_FILENAME = "config.yaml"


def _resolve_root(root: str | Path | None) -> tuple[Path, bool]:
    if root is not None:
        return Path(root).expanduser(), True
    env_root = os.environ.get("FONTSMITH_HOME")
    if env_root:
        return Path(env_root).expanduser(), True
    return Path.home() / f".{APP_NAME}", False


def _resolve_config_root(
    config_root: str | Path | None,
    *,
    user_root: Path,
    root_was_explicit: bool,
) -> Path:
    if config_root is not None:
        return Path(config_root).expanduser()
    env_config = os.environ.get("FONTSMITH_CONFIG_DIR")
    if env_config:
        return Path(env_config).expanduser()
    if root_was_explicit:
        return user_root
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config).expanduser() / APP_NAME
    return Path.home() / ".config" / APP_NAME


def _resolve_cache_root(
    cache_root: str | Path | None,
    *,
    user_root: Path,
    root_was_explicit: bool,
) -> Path:
    if cache_root is not None:
        return Path(cache_root).expanduser()
    env_cache = os.environ.get("FONTSMITH_CACHE_DIR")
    if env_cache:
        return Path(env_cache).expanduser()
    if root_was_explicit:
        return user_root / "cache"
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache).expanduser() / APP_NAME
    return Path.home() / ".cache" / APP_NAME


@dataclass(frozen=True, slots=True)
class FontsmithUserDir:
    """Resolved data, config and cache roots."""

    root: Path
    config_root: Path
    cache_root: Path

    @property
    def config_file(self) -> Path:
        return self.config_root / CONFIG_FILENAME

    @property
    def fonts_root(self) -> Path:
        return self.root / "fonts"


def resolve_user_dir(
    *,
    root: str | Path | None = None,
    config_root: str | Path | None = None,
    cache_root: str | Path | None = None,
) -> FontsmithUserDir:
    """Resolve the directory roots from arguments, environment and defaults.

    Precedence per root is explicit argument, then ``FONTSMITH_HOME`` /
    ``FONTSMITH_CONFIG_DIR`` / ``FONTSMITH_CACHE_DIR``, then the XDG base
    directories. A custom home keeps config and cache beneath it unless they
    are set separately.
    """
    user_root, root_was_explicit = _resolve_root(root)
    return FontsmithUserDir(
        root=user_root,
        config_root=_resolve_config_root(
            config_root, user_root=user_root, root_was_explicit=root_was_explicit
        ),
        cache_root=_resolve_cache_root(
            cache_root, user_root=user_root, root_was_explicit=root_was_explicit
        ),
    )


def remove_tree(path: Path) -> bool:
    """Delete a directory tree, returning whether anything was removed."""
    if not path.exists():
        return False
    shutil.rmtree(path)
    return True
