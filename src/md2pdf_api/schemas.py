from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from md2pdf.config import RenderDefaults
from md2pdf.models import RenderOptions


class RenderRequest(BaseModel):
    """Render options as posted by the preview page (camelCase keys accepted)."""

    model_config = ConfigDict(populate_by_name=True)

    markdown: str = ""
    basedir: str = ""
    theme: str | None = None
    paper: str | None = None
    margin: str | None = None
    toc: bool | None = None
    header_footer: bool | None = Field(None, alias="headerFooter")
    title: str = ""
    css: list[str] = Field(default_factory=list)
    header_left: str = Field("", alias="headerLeft")
    header_center: str = Field("", alias="headerCenter")
    header_right: str = Field("", alias="headerRight")
    footer_left: str = Field("", alias="footerLeft")
    footer_center: str = Field("", alias="footerCenter")
    footer_right: str = Field("", alias="footerRight")

    def to_options(self, defaults: RenderDefaults) -> RenderOptions:
        return RenderOptions(
            markdown=self.markdown,
            basedir=Path(self.basedir) if self.basedir else None,
            theme=self.theme or defaults.theme,
            paper=self.paper or defaults.paper,
            margin=self.margin or defaults.margin,
            toc=defaults.toc if self.toc is None else self.toc,
            css=tuple(Path(item) for item in self.css),
            title=self.title,
            header_footer=defaults.header_footer if self.header_footer is None else self.header_footer,
            header_left=self.header_left,
            header_center=self.header_center,
            header_right=self.header_right,
            footer_left=self.footer_left,
            footer_center=self.footer_center,
            footer_right=self.footer_right,
        )


class PreviewResponse(BaseModel):
    html: str
    title: str
    warnings: list[str] = Field(default_factory=list)


class LoadResponse(BaseModel):
    file: str
    basedir: str
    markdown: str


__all__ = ["LoadResponse", "PreviewResponse", "RenderRequest"]
