"""Domain models for markdown-to-PDF rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


class ConversionError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Configuration for a single render."""

    markdown: str
    basedir: Path | None = None
    theme: str = "clean"
    paper: str = "Letter"
    margin: str = "16mm"
    toc: bool = True
    css: tuple[Path, ...] = ()
    title: str = ""
    header_footer: bool = False
    header_left: str = ""
    header_center: str = ""
    header_right: str = ""
    footer_left: str = ""
    footer_center: str = ""
    footer_right: str = ""


@dataclass(slots=True)
class DocumentResult:
    """A composed, self-contained HTML document ready for rasterization."""

    html: str
    title: str
    fragment: str
    css: str
    warnings: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ConversionResult:
    """Result metadata for an individual PDF render."""

    run_id: str
    title: str
    pdf: bytes
    output_path: Path | None
    warnings: list[str]
    summary: str


__all__ = [
    "ConversionError",
    "ConversionResult",
    "DocumentResult",
    "RenderOptions",
]
