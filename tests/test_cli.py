from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import fontsmith.sources
from fontsmith.core.exceptions import NoSuchFamilyError
from fontsmith.fonts.specs import FontDescription, InstallRequest, InstallSpec
from fontsmith.fonts.variants import VariantSpec, filter_variants
from fontsmith.sources import FontSource, RefreshOutcome
from fontsmith.ui.cli import app


FAMILIES = {
    "roboto": (["regular", "italic", "700"], ["sans-serif"]),
    "lobster": (["regular"], ["display"]),
}


class FakeSource(FontSource):
    id = "fake"
    name = "Fake Fonts"

    async def refresh(self, force: bool = False) -> RefreshOutcome:
        return RefreshOutcome.DOWNLOADED if force else RefreshOutcome.ALREADY_UP_TO_DATE

    async def resolve(self, request: InstallRequest) -> tuple[InstallSpec, FontDescription]:
        if request.font_id not in FAMILIES:
            raise NoSuchFamilyError(request.font_id, self.id)
        variants = [VariantSpec.parse(text) for text in FAMILIES[request.font_id][0]]
        selected = filter_variants(variants, request.variants)
        description = FontDescription(request.font_id, request.font_id.title(), "1")
        return InstallSpec.from_variants(request.font_id, selected), description

    async def acquire(self, spec: InstallSpec, cache_dir: Path) -> dict[VariantSpec, Path]:
        paths: dict[VariantSpec, Path] = {}
        for variant in spec.variants:
            path = cache_dir / spec.font_id / f"{variant}.ttf"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(f"{spec.font_id}:{variant}".encode())
            paths[variant] = path
        return paths

    async def search(self, tags=()) -> list[str]:
        return sorted(
            font_id
            for font_id, (_, family_tags) in FAMILIES.items()
            if set(tags).issubset(family_tags)
        )


@pytest.fixture()
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setitem(fontsmith.sources.SOURCE_TYPES, "fake", FakeSource)
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "fontsmith:\n"
        "  enabled_sources: [fake]\n"
        f"  cache_dir: {tmp_path / 'cache'}\n"
        f"  font_install_dir: {tmp_path / 'installed'}\n",
        encoding="utf-8",
    )
    return tmp_path


def _invoke(workspace: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(app, ["--config", str(workspace / "config.yaml"), *args])


def test_version_flag() -> None:
    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("fontsmith ")


def test_install_flat_layout(workspace: Path) -> None:
    result = _invoke(workspace, "install", "roboto@700,italic")

    assert result.exit_code == 0, result.output
    assert "Installing roboto" in result.output
    assert "Successfully installed font roboto from Fake Fonts!" in result.output
    installed = workspace / "installed"
    assert sorted(path.name for path in installed.iterdir()) == [
        "roboto-700.ttf",
        "roboto-italic.ttf",
    ]
    assert (installed / "roboto-700.ttf").read_bytes() == b"roboto:700"
    assert (workspace / "cache" / "fake" / "roboto" / "700.ttf").exists()


def test_install_into_directory(workspace: Path) -> None:
    target = workspace / "site-fonts"

    result = _invoke(workspace, "install", "fake:roboto", "lobster", "-d", str(target))

    assert result.exit_code == 0, result.output
    assert "Successfully installed 2 fonts from Fake Fonts!" in result.output
    assert (target / "roboto" / "roboto-regular.ttf").exists()
    assert (target / "roboto" / "roboto-700.ttf").exists()
    assert (target / "lobster" / "lobster-regular.ttf").exists()


def test_install_writes_stylesheet(workspace: Path) -> None:
    target = workspace / "site"
    stylesheet = target / "css" / "fonts.css"

    result = _invoke(
        workspace,
        "install",
        "lobster",
        "-d",
        str(target / "fonts"),
        "--format",
        "flat",
        "--stylesheet",
        str(stylesheet),
    )

    assert result.exit_code == 0, result.output
    css = stylesheet.read_text(encoding="utf-8")
    assert 'font-family: "Lobster";' in css
    assert 'src: url("../fonts/lobster-regular.ttf") format("truetype");' in css


def test_install_reports_unresolved_fonts(workspace: Path) -> None:
    result = _invoke(workspace, "install", "roboto", "comic-sans")

    assert result.exit_code == 1
    assert "Failed to resolve 'comic-sans'" in result.output
    assert "1 font failed to resolve." in result.output
    assert not (workspace / "installed").exists()


def test_install_rejects_invalid_fontspec(workspace: Path) -> None:
    result = _invoke(workspace, "install", "roboto@")

    assert result.exit_code == 1
    assert "Invalid fontspec 'roboto@'" in result.output
    assert "The fontspec was invalid. Perhaps you made a typo?" in result.output


def test_install_with_disabled_source(workspace: Path) -> None:
    result = _invoke(workspace, "install", "google-fonts:roboto")

    assert result.exit_code == 1
    assert "No enabled source matches google-fonts" in result.output


def test_refresh(workspace: Path) -> None:
    result = _invoke(workspace, "refresh")
    assert result.exit_code == 0, result.output
    assert "Refreshing: Fake Fonts" in result.output
    assert "1 source already up-to-date." in result.output

    forced = _invoke(workspace, "refresh", "--force")
    assert forced.exit_code == 0, forced.output
    assert "1 source refreshed." in forced.output


def test_refresh_with_unknown_source(workspace: Path) -> None:
    (workspace / "config.yaml").write_text(
        "fontsmith:\n  enabled_sources: [nowhere]\n", encoding="utf-8"
    )
    result = _invoke(workspace, "refresh")
    assert result.exit_code == 1
    assert "Unknown source 'nowhere'." in result.output


def test_search_by_tag(workspace: Path) -> None:
    result = _invoke(workspace, "search", "--tag", "display")
    assert result.exit_code == 0, result.output
    assert "lobster" in result.output
    assert "roboto" not in result.output

    empty = _invoke(workspace, "search", "--tag", "serif")
    assert empty.exit_code == 0
    assert "No matching families." in empty.output


def test_purge_requires_confirmation(workspace: Path) -> None:
    cache = workspace / "cache"
    cache.mkdir()

    result = _invoke(workspace, "purge", "cache")

    assert result.exit_code == 1
    assert "Re-run with --confirm" in result.output
    assert cache.exists()


def test_purge_all_removes_cache_and_fonts(workspace: Path) -> None:
    (workspace / "cache" / "fake").mkdir(parents=True)
    (workspace / "installed").mkdir()

    result = _invoke(workspace, "purge", "all", "--confirm")

    assert result.exit_code == 0, result.output
    assert "Purged cache." in result.output
    assert "Purged installed fonts." in result.output
    assert not (workspace / "cache").exists()
    assert not (workspace / "installed").exists()

    again = _invoke(workspace, "purge", "cache", "-c")
    assert "The cache had already been deleted." in again.output


def test_config_commands(workspace: Path) -> None:
    config_file = (workspace / "config.yaml").resolve()

    path = _invoke(workspace, "config", "path")
    assert path.exit_code == 0
    assert path.output.strip() == str(config_file)

    raw = _invoke(workspace, "config", "print", "--raw")
    assert raw.exit_code == 0
    assert "fontsmith:\n  enabled_sources:\n  - fake\n" in raw.output

    table = _invoke(workspace, "config", "print")
    assert table.exit_code == 0
    assert "enabled_sources" in table.output
    assert "[1] fake" in table.output


def test_invalid_configuration_exits(workspace: Path) -> None:
    (workspace / "config.yaml").write_text("fontsmith: [oops", encoding="utf-8")
    result = _invoke(workspace, "refresh")
    assert result.exit_code == 1
    assert "Invalid YAML" in result.output


def test_install_fails_when_a_pinned_duplicate_fails(workspace: Path) -> None:
    result = _invoke(workspace, "install", "roboto", "nowhere:roboto")

    assert result.exit_code == 1
    assert "Failed to resolve 'roboto'" in result.output
    assert "1 font failed to resolve." in result.output
    assert not (workspace / "installed").exists()
