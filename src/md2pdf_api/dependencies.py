"""Request-scoped accessors for the config and service stored on ``app.state``."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, HTTPException, Request

from md2pdf.config import AppConfig, RenderDefaults
from md2pdf.core import ConversionService


def _state_attr(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=503, detail=f"{name.upper()}_UNAVAILABLE")
    return value


def get_config(request: Request) -> AppConfig:
    return _state_attr(request, "config")


def get_service(request: Request) -> ConversionService:
    return _state_attr(request, "service")


def get_render_defaults(config: AppConfig = Depends(get_config)) -> RenderDefaults:
    """Option defaults applied to fields a request leaves unset."""

    return config.defaults


__all__ = ["get_config", "get_render_defaults", "get_service"]
