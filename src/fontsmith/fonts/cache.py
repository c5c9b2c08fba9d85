"""Per-source cache layout: freshness marker, catalog and downloaded files.

Each source owns one directory::

    <root>/commit.marker                    freshness marker of the catalog
    <root>/data.json                        catalog snapshot
    <root>/<font id>/<variant>/<hash><ext>  downloaded font files

Font files are content-addressed by the SHA-256 of their remote location, so a
changed upstream URL yields a new file while an unchanged one is reused.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from hashlib import sha256
from pathlib import Path, PurePosixPath
import tempfile
from urllib.parse import urlsplit

from fontsmith.core.exceptions import DeserialisationError

from .variants import VariantSpec


MARKER_FILENAME = "commit.marker"
CATALOG_FILENAME = "data.json"


def remote_suffix(remote: str) -> str:
    """Return the file extension of a remote location, including the dot."""
    target = remote if "://" in remote else f"https://{remote}"
    return PurePosixPath(urlsplit(target).path).suffix


def remote_digest(remote: str) -> str:
    return sha256(remote.encode("utf-8")).hexdigest()


class SourceCache:
    """Resolve persistent paths inside the cache directory of one source."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def marker_path(self) -> Path:
        return self.root / MARKER_FILENAME

    @property
    def catalog_path(self) -> Path:
        return self.root / CATALOG_FILENAME

    def ensure(self) -> Path:
        """Ensure the cache root exists and return it."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def path(self, *parts: str | Path) -> Path:
        """Return a path under the cache root, creating parent directories."""
        base = self.ensure()
        target = base.joinpath(*parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    @contextmanager
    def tempdir(self) -> Iterator[Path]:
        """Provide a temporary directory inside the cache root."""
        self.ensure()
        with tempfile.TemporaryDirectory(dir=self.root) as tmp:
            yield Path(tmp)

    def read_marker(self) -> str | None:
        if not self.marker_path.is_file():
            return None
        return self.marker_path.read_text(encoding="utf-8").strip()

    def write_marker(self, marker: str) -> Path:
        target = self.path(MARKER_FILENAME)
        target.write_text(marker, encoding="utf-8")
        return target

    def has_catalog(self) -> bool:
        return self.catalog_path.is_file()

    def read_catalog(self) -> str | None:
        if not self.catalog_path.is_file():
            return None
        try:
            return self.catalog_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DeserialisationError(f"Catalog {self.catalog_path} is not valid UTF-8.") from exc

    def write_catalog(self, payload: str) -> Path:
        """Replace the catalog snapshot; the marker must be written afterwards."""
        target = self.path(CATALOG_FILENAME)
        with self.tempdir() as tmp:
            staged = tmp / CATALOG_FILENAME
            staged.write_text(payload, encoding="utf-8")
            staged.replace(target)
        return target

    def asset_path(self, font_id: str, variant: VariantSpec, remote: str) -> Path:
        """Return the content-addressed location of a variant's file (not created)."""
        name = f"{remote_digest(remote)}{remote_suffix(remote)}"
        return self.root / font_id / str(variant) / name


__all__ = [
    "CATALOG_FILENAME",
    "MARKER_FILENAME",
    "SourceCache",
    "remote_digest",
    "remote_suffix",
]
