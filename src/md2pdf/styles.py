from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

from pygments.formatters import HtmlFormatter
from pygments.util import ClassNotFound

from .models import ConversionError

ASSETS_DIR = Path(__file__).parent / "css"
THEMES_DIR = ASSETS_DIR / "themes"
MATH_CSS = "math.css"
LAYOUT_CSS = "layout.css"


class Theme(str, Enum):
    CLEAN = "clean"
    SERIF = "serif"
    ACADEMIC = "academic"
    GITHUB_DARK = "github-dark"

    @property
    def is_dark(self) -> bool:
        return self is Theme.GITHUB_DARK

    @classmethod
    def parse(cls, name: str | None) -> "Theme":
        selected = name or cls.CLEAN.value
        try:
            return cls(selected)
        except ValueError as exc:
            raise ConversionError(
                "UNKNOWN_THEME",
                f'Unknown theme "{selected}". Use clean, serif, academic, or github-dark.',
            ) from exc


@dataclass(frozen=True, slots=True)
class ThemeAssets:
    base_css: str
    highlight_style: str


THEME_ASSETS: dict[Theme, ThemeAssets] = {
    Theme.CLEAN: ThemeAssets(base_css="github-markdown.css", highlight_style="default"),
    Theme.SERIF: ThemeAssets(base_css="github-markdown.css", highlight_style="default"),
    Theme.ACADEMIC: ThemeAssets(base_css="github-markdown.css", highlight_style="default"),
    Theme.GITHUB_DARK: ThemeAssets(base_css="github-markdown-dark.css", highlight_style="github-dark"),
}


def _read_bundled(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConversionError("MISSING_ASSET", f"Bundled stylesheet not found: {path}") from exc


def _read_extra(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConversionError("READ_FAILED", f"Could not read CSS file {path}: {exc}") from exc


def highlight_css(style: str) -> str:
    try:
        formatter = HtmlFormatter(style=style)
    except ClassNotFound as exc:
        raise ConversionError("MISSING_ASSET", f"Highlight style not available: {style}") from exc
    return formatter.get_style_defs(".highlight")


def validate_css_files(paths: Iterable[Path]) -> list[Path]:
    checked: list[Path] = []
    for path in paths:
        if not Path(path).is_file():
            raise ConversionError("CSS_NOT_FOUND", f"CSS file not found: {path}")
        checked.append(Path(path))
    return checked


def compose_css(theme_name: str | Theme, extra_css_files: Sequence[Path] = ()) -> str:
    """Concatenate the stylesheet bundle for *theme_name*.

    Order is base, math, highlight, layout, theme, then each extra file, so
    later blocks win under the normal cascade.
    """

    theme = theme_name if isinstance(theme_name, Theme) else Theme.parse(theme_name)
    extra = validate_css_files(extra_css_files)
    assets = THEME_ASSETS[theme]
    blocks = [
        _read_bundled(ASSETS_DIR / assets.base_css),
        _read_bundled(ASSETS_DIR / MATH_CSS),
        highlight_css(assets.highlight_style),
        _read_bundled(ASSETS_DIR / LAYOUT_CSS),
        _read_bundled(THEMES_DIR / f"{theme.value}.css"),
        "\n\n".join(_read_extra(path) for path in extra),
    ]
    return "\n\n".join(blocks)


__all__ = ["Theme", "THEME_ASSETS", "compose_css", "highlight_css", "validate_css_files"]
