"""Markdown to styled PDF rendering toolkit."""

from .config import AppConfig, load_config
from .core import ConversionService
from .models import ConversionError, ConversionResult, DocumentResult, RenderOptions

__all__ = [
    "AppConfig",
    "load_config",
    "ConversionError",
    "ConversionResult",
    "ConversionService",
    "DocumentResult",
    "RenderOptions",
]
