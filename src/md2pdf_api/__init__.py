"""HTTP front end for the md2pdf rendering toolkit."""

from .app import create_app

__all__ = ["create_app"]
