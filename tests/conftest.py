from __future__ import annotations

import base64
from pathlib import Path

import pytest

from md2pdf.config import AppConfig, RuntimeConfig
from md2pdf.render import PdfRequest

PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
FAKE_PDF = b"%PDF-1.4\n% fake\n%%EOF\n"


class FakeRasterizer:
    def __init__(self) -> None:
        self.calls: list[tuple[str, PdfRequest]] = []

    @property
    def html(self) -> str:
        return self.calls[-1][0]

    @property
    def request(self) -> PdfRequest:
        return self.calls[-1][1]

    def rasterize(self, html: str, request: PdfRequest) -> bytes:
        self.calls.append((html, request))
        return FAKE_PDF


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_1X1


@pytest.fixture
def rasterizer() -> FakeRasterizer:
    return FakeRasterizer()


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    runtime = RuntimeConfig(output_dir=tmp_path / "runs", image_timeout_s=2.0, image_workers=2)
    return AppConfig(runtime=runtime)
