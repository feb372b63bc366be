from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import HTMLResponse

from md2pdf.config import AppConfig, RenderDefaults
from md2pdf.core import ConversionService
from md2pdf.utils import download_filename

from ..dependencies import get_config, get_render_defaults, get_service
from ..schemas import LoadResponse, PreviewResponse, RenderRequest
from ..utils import run_sync

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(tags=["render"])


def resolve_load_path(requested: str, default_file: Path | None) -> Path | None:
    fallback = default_file.resolve() if default_file and default_file.is_file() else None
    if not requested:
        return fallback
    candidate = Path(requested).resolve()
    return candidate if candidate.is_file() else fallback


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def preview_page() -> HTMLResponse:
    return HTMLResponse((STATIC_DIR / "preview.html").read_text(encoding="utf-8"))


@router.get("/api/load", summary="Load a markdown file for editing")
def load_markdown(
    file: str = "",
    config: AppConfig = Depends(get_config),
    service: ConversionService = Depends(get_service),
) -> LoadResponse:
    path = resolve_load_path(file, config.api.default_file)
    if path is None:
        raise HTTPException(status_code=404, detail="No readable default file found.")
    return LoadResponse(
        file=str(path),
        basedir=str(path.parent),
        markdown=service.load_markdown(path),
    )


@router.post("/api/preview", summary="Render the composed HTML document")
async def preview(
    payload: RenderRequest,
    service: ConversionService = Depends(get_service),
    defaults: RenderDefaults = Depends(get_render_defaults),
) -> PreviewResponse:
    document = await run_sync(service.build_document, payload.to_options(defaults))
    return PreviewResponse(html=document.html, title=document.title, warnings=document.warnings)


@router.post("/api/pdf", summary="Render a PDF download")
async def render_pdf(
    payload: RenderRequest,
    service: ConversionService = Depends(get_service),
    defaults: RenderDefaults = Depends(get_render_defaults),
) -> Response:
    result = await run_sync(service.render_pdf, payload.to_options(defaults), source="<api>")
    filename = download_filename(result.title)
    return Response(
        content=result.pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


__all__ = ["resolve_load_path", "router"]
