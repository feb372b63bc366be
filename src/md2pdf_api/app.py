from __future__ import annotations

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from md2pdf.config import AppConfig, load_config
from md2pdf.core import ConversionService
from md2pdf.models import ConversionError
from md2pdf.render import PdfRasterizer
from md2pdf.settings import Settings, get_settings

from .routers import render


def create_app(config: AppConfig | None = None, *, rasterizer: PdfRasterizer | None = None) -> FastAPI:
    config = config or _prepare_config(get_settings())

    app = FastAPI(title="md2pdf Live Preview", version="0.1.0")
    app.state.config = config
    app.state.service = ConversionService(config, rasterizer)

    app.include_router(render.router)

    @app.get("/health", tags=["health"], summary="Liveness probe")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.exception_handler(ConversionError)
    async def _conversion_error(_: Request, exc: ConversionError) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=400)

    return app


def _prepare_config(settings: Settings) -> AppConfig:
    config = load_config(settings.config_path)
    if settings.default_file is not None:
        config.api.default_file = settings.default_file
    return config


def run() -> None:
    config = _prepare_config(get_settings())
    uvicorn.run(create_app(config), host=config.api.host, port=config.api.port)


__all__ = ["create_app", "run"]
