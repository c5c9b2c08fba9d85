"""Generate CSS ``@font-face`` rules for installed fonts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import os
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from .specs import FontDescription
from .variants import VariantSpec


TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "font-face.css.j2"

_FORMATS = {
    ".woff2": "woff2",
    ".woff": "woff",
    ".ttf": "truetype",
    ".otf": "opentype",
}


@dataclass(frozen=True, slots=True)
class FontFace:
    family: str
    style: str
    weight: str
    url: str
    format: str | None = None


def _css_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters["css_string"] = _css_string
    return env


def font_faces(
    target_file: Path,
    entries: Iterable[tuple[FontDescription, Mapping[VariantSpec, Path]]],
) -> list[FontFace]:
    """Build one face per installed file, with URLs relative to ``target_file``."""
    base = target_file.parent
    faces: list[FontFace] = []
    for description, files in entries:
        for variant in sorted(files):
            path = files[variant]
            relative = Path(os.path.relpath(path, base)).as_posix()
            weight = "100 900" if variant.weight.is_variable else str(variant.weight.value)
            faces.append(
                FontFace(
                    family=description.name,
                    style=variant.style.css,
                    weight=weight,
                    url=relative,
                    format=_FORMATS.get(path.suffix.lower()),
                )
            )
    return faces


def render_stylesheet(
    target_file: Path,
    entries: Iterable[tuple[FontDescription, Mapping[VariantSpec, Path]]],
) -> str:
    template = _environment().get_template(TEMPLATE_NAME)
    return template.render(faces=font_faces(target_file, entries))


def write_stylesheet(
    target_file: Path,
    entries: Iterable[tuple[FontDescription, Mapping[VariantSpec, Path]]],
) -> Path:
    """Render and write the stylesheet, creating its directory."""
    payload = render_stylesheet(target_file, entries)
    target_file.parent.mkdir(parents=True, exist_ok=True)
    target_file.write_text(payload, encoding="utf-8")
    return target_file


__all__ = ["FontFace", "font_faces", "render_stylesheet", "write_stylesheet"]
