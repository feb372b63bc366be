from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .models import ConversionError, RenderOptions
from .page import (
    build_footer_template,
    build_header_template,
    resolve_header_footer_fields,
    rule_color,
)
from .styles import Theme

HEADER_FOOTER_MARGIN = "18mm"
DEFAULT_MARGIN = "16mm"
EMPTY_TEMPLATE = "<span></span>"

WAIT_FOR_IMAGES_JS = """
async () => {
  const images = Array.from(document.images);
  await Promise.all(images.map((img) => {
    if (img.complete) return Promise.resolve();
    return new Promise((resolve) => {
      img.addEventListener('load', resolve, { once: true });
      img.addEventListener('error', resolve, { once: true });
    });
  }));
}
"""


@dataclass(slots=True)
class PdfRequest:
    format: str
    margin: dict[str, str]
    display_header_footer: bool = False
    header_template: str = EMPTY_TEMPLATE
    footer_template: str = EMPTY_TEMPLATE
    print_background: bool = True

    def as_pdf_kwargs(self) -> dict[str, object]:
        return {
            "format": self.format,
            "margin": dict(self.margin),
            "display_header_footer": self.display_header_footer,
            "header_template": self.header_template,
            "footer_template": self.footer_template,
            "print_background": self.print_background,
        }


class PdfRasterizer(Protocol):
    def rasterize(self, html: str, request: PdfRequest) -> bytes:  # pragma: no cover - interface
        ...


def compute_margins(theme: Theme, margin: str, header_footer: bool) -> dict[str, str]:
    side = margin or DEFAULT_MARGIN
    # github-dark prints edge to edge unless the caller picked a margin
    if theme is Theme.GITHUB_DARK and side == DEFAULT_MARGIN and not header_footer:
        side = "0mm"
    vertical = HEADER_FOOTER_MARGIN if header_footer else side
    return {"top": vertical, "right": side, "bottom": vertical, "left": side}


def build_pdf_request(options: RenderOptions, title: str) -> PdfRequest:
    theme = Theme.parse(options.theme)
    request = PdfRequest(
        format=options.paper or "Letter",
        margin=compute_margins(theme, options.margin, options.header_footer),
        display_header_footer=options.header_footer,
    )
    if options.header_footer:
        fields = resolve_header_footer_fields(options, title)
        rule = rule_color(theme.is_dark)
        request.header_template = build_header_template(fields, title, rule)
        request.footer_template = build_footer_template(fields, title, rule)
    return request


@dataclass(slots=True)
class PlaywrightRasterizer:
    """Prints HTML with a Chromium instance launched for this call alone."""

    timeout_s: float = 60.0
    headless: bool = True
    launch_args: list[str] = field(default_factory=list)

    def rasterize(self, html: str, request: PdfRequest) -> bytes:
        try:
            with sync_playwright() as playwright:
                browser = playwright.chromium.launch(headless=self.headless, args=self.launch_args)
                try:
                    page = browser.new_page()
                    page.set_default_timeout(self.timeout_s * 1000)
                    page.set_content(html, wait_until="networkidle")
                    page.evaluate(WAIT_FOR_IMAGES_JS)
                    page.emulate_media(media="print")
                    return page.pdf(**request.as_pdf_kwargs())
                finally:
                    browser.close()
        except PlaywrightError as exc:
            raise ConversionError("RENDER_FAILED", f"PDF rendering failed: {exc}") from exc


__all__ = [
    "PdfRasterizer",
    "PdfRequest",
    "PlaywrightRasterizer",
    "build_pdf_request",
    "compute_margins",
]
