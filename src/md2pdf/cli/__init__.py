from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from ..config import AppConfig, load_config
from ..core import ConversionError, ConversionService
from ..models import RenderOptions
from ..settings import get_settings
from ..utils import default_output_path

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="md2pdf - Markdown to PDF with GitHub-style formatting",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def _load_config(path: Path | None) -> AppConfig:
    return load_config(path or get_settings().config_path)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


@app.command()
def render(
    input: Path | None = typer.Option(None, "--input", "-i", help="Input markdown file (required)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output PDF path (default: input filename + .pdf)"),
    theme: str | None = typer.Option(None, "--theme", "-t", help="Theme: clean | serif | academic | github-dark"),
    paper: str | None = typer.Option(None, "--paper", help="Paper size (Letter or A4)"),
    margin: str | None = typer.Option(None, "--margin", help="Page margin for sides, e.g. 16mm"),
    title: str = typer.Option("", "--title", help="Override title metadata/header text"),
    header_left: str = typer.Option("", "--header-left", help="Header left text"),
    header_center: str = typer.Option("", "--header-center", help="Header center text"),
    header_right: str = typer.Option("", "--header-right", help="Header right text"),
    footer_left: str = typer.Option("", "--footer-left", help="Footer left text"),
    footer_center: str = typer.Option("", "--footer-center", help="Footer center text"),
    footer_right: str = typer.Option(
        "", "--footer-right", help="Footer right text. Placeholders: {title} {page} {total} {date}"
    ),
    basedir: Path | None = typer.Option(None, "--basedir", help="Base directory for relative image paths"),
    css: list[Path] | None = typer.Option(None, "--css", help="Extra CSS file (repeat for multiple)"),
    toc: bool | None = typer.Option(None, "--toc/--no-toc", help="Replace [[toc]] with a table of contents"),
    header_footer: bool | None = typer.Option(
        None, "--header-footer/--no-header-footer", help="Page header/footer with page numbers"
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Render a Markdown file to PDF."""

    if input is None:
        _fail("Missing required --input path")
    source = input.resolve()
    if not source.is_file():
        _fail(f"Input file not found: {source}")

    cfg = _load_config(config)
    defaults = cfg.defaults
    target = output.resolve() if output else default_output_path(source)
    options = RenderOptions(
        markdown="",
        basedir=basedir.resolve() if basedir else source.parent,
        theme=theme or defaults.theme,
        paper=paper or defaults.paper,
        margin=margin or defaults.margin,
        toc=defaults.toc if toc is None else toc,
        css=tuple(path.resolve() for path in css or []),
        title=title,
        header_footer=defaults.header_footer if header_footer is None else header_footer,
        header_left=header_left,
        header_center=header_center,
        header_right=header_right,
        footer_left=footer_left,
        footer_center=footer_center,
        footer_right=footer_right,
    )

    service = ConversionService(cfg)
    try:
        result = service.convert_file(source, target, options)
    except ConversionError as exc:
        _fail(str(exc))
    for warning in result.warnings:
        err_console.print(f"[yellow]Warning[/yellow]: {escape(warning)}")
    console.print(f"Generated: {result.output_path}")


if __name__ == "__main__":
    app()
