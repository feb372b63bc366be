from __future__ import annotations

import pytest
from playwright.sync_api import Error as PlaywrightError

from md2pdf import render
from md2pdf.models import ConversionError, RenderOptions
from md2pdf.render import EMPTY_TEMPLATE, PlaywrightRasterizer, PdfRequest, build_pdf_request, compute_margins
from md2pdf.styles import Theme


def test_margins_follow_side_margin() -> None:
    assert compute_margins(Theme.CLEAN, "20mm", False) == {
        "top": "20mm",
        "right": "20mm",
        "bottom": "20mm",
        "left": "20mm",
    }


def test_header_footer_reserves_vertical_space() -> None:
    margins = compute_margins(Theme.SERIF, "12mm", True)
    assert margins["top"] == margins["bottom"] == "18mm"
    assert margins["left"] == margins["right"] == "12mm"


def test_dark_theme_default_margin_bleeds_to_edge() -> None:
    assert set(compute_margins(Theme.GITHUB_DARK, "16mm", False).values()) == {"0mm"}
    assert compute_margins(Theme.GITHUB_DARK, "10mm", False)["left"] == "10mm"
    assert compute_margins(Theme.GITHUB_DARK, "16mm", True)["left"] == "16mm"


def test_pdf_request_without_header_footer() -> None:
    request = build_pdf_request(RenderOptions(markdown="", paper="A4"), "Doc")
    assert request.format == "A4"
    assert request.display_header_footer is False
    assert request.header_template == request.footer_template == EMPTY_TEMPLATE
    assert request.print_background is True


def test_pdf_request_with_header_footer() -> None:
    options = RenderOptions(markdown="", header_footer=True, footer_center="{title}")
    request = build_pdf_request(options, "Quarterly")
    kwargs = request.as_pdf_kwargs()
    assert kwargs["display_header_footer"] is True
    assert ">Quarterly</div>" in request.header_template
    assert ">Quarterly</div>" in request.footer_template
    assert "pageNumber" not in request.footer_template
    assert kwargs["margin"]["top"] == "18mm"


class _FakePage:
    def __init__(self, events: list[str], fail_on: str | None) -> None:
        self.events = events
        self.fail_on = fail_on

    def _record(self, name: str) -> None:
        self.events.append(name)
        if name == self.fail_on:
            raise PlaywrightError(f"{name} exploded")

    def set_default_timeout(self, timeout: float) -> None:
        self._record(f"timeout:{timeout:.0f}")

    def set_content(self, html: str, wait_until: str) -> None:
        self._record(f"set_content:{wait_until}")

    def evaluate(self, script: str) -> None:
        self._record("wait_images")

    def emulate_media(self, media: str) -> None:
        self._record(f"media:{media}")

    def pdf(self, **kwargs: object) -> bytes:
        self._record("pdf")
        return b"%PDF-fake"


class _FakeBrowser:
    def __init__(self, events: list[str], fail_on: str | None) -> None:
        self.events = events
        self.fail_on = fail_on

    def new_page(self) -> _FakePage:
        return _FakePage(self.events, self.fail_on)

    def close(self) -> None:
        self.events.append("close")


class _FakeChromium:
    def __init__(self, events: list[str], fail_on: str | None) -> None:
        self.events = events
        self.fail_on = fail_on

    def launch(self, headless: bool, args: list[str]) -> _FakeBrowser:
        self.events.append("launch")
        return _FakeBrowser(self.events, self.fail_on)


class _FakePlaywright:
    def __init__(self, events: list[str], fail_on: str | None) -> None:
        self.chromium = _FakeChromium(events, fail_on)

    def __enter__(self) -> "_FakePlaywright":
        return self

    def __exit__(self, *exc: object) -> None:
        return None


def _install(monkeypatch: pytest.MonkeyPatch, fail_on: str | None = None) -> list[str]:
    events: list[str] = []
    monkeypatch.setattr(render, "sync_playwright", lambda: _FakePlaywright(events, fail_on))
    return events


def _request() -> PdfRequest:
    return PdfRequest(format="Letter", margin={"top": "1mm", "right": "1mm", "bottom": "1mm", "left": "1mm"})


def test_rasterizer_prints_after_content_settles(monkeypatch: pytest.MonkeyPatch) -> None:
    events = _install(monkeypatch)
    pdf = PlaywrightRasterizer(timeout_s=5).rasterize("<p>x</p>", _request())
    assert pdf == b"%PDF-fake"
    assert events == [
        "launch",
        "timeout:5000",
        "set_content:networkidle",
        "wait_images",
        "media:print",
        "pdf",
        "close",
    ]


def test_rasterizer_closes_browser_on_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    events = _install(monkeypatch, fail_on="pdf")
    with pytest.raises(ConversionError) as excinfo:
        PlaywrightRasterizer().rasterize("<p>x</p>", _request())
    assert excinfo.value.code == "RENDER_FAILED"
    assert "pdf exploded" in str(excinfo.value)
    assert events[-1] == "close"
