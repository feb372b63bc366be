from __future__ import annotations

import time
from dataclasses import dataclass, replace
from pathlib import Path

from .assets import inline_images, rewrite_image_references
from .config import AppConfig
from .logging import RunLogEntry, RunLogger, StageTimings
from .models import ConversionError, ConversionResult, DocumentResult, RenderOptions
from .page import DEFAULT_TITLE, build_html, extract_title
from .render import PdfRasterizer, PlaywrightRasterizer, build_pdf_request
from .styles import Theme, compose_css, validate_css_files
from .transform import transform
from .utils import atomic_write_bytes, generate_run_id


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


@dataclass(slots=True)
class _RenderContext:
    run_id: str
    source: str
    options: RenderOptions
    timings: StageTimings


class ConversionService:
    def __init__(self, config: AppConfig, rasterizer: PdfRasterizer | None = None) -> None:
        self._config = config
        self._rasterizer = rasterizer or PlaywrightRasterizer(timeout_s=config.runtime.render_timeout_s)
        self._logger = RunLogger(config.runtime.log_path)

    @property
    def config(self) -> AppConfig:
        return self._config

    def load_markdown(self, path: Path) -> str:
        if not path.is_file():
            raise ConversionError("NOT_FOUND", f"Input file not found: {path}")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConversionError("READ_FAILED", f"Could not read {path}: {exc}") from exc

    def build_document(self, options: RenderOptions, timings: StageTimings | None = None) -> DocumentResult:
        timings = timings or StageTimings()
        theme = Theme.parse(options.theme)
        css_files = validate_css_files(options.css)
        basedir = (options.basedir or Path.cwd()).resolve()
        title = options.title or extract_title(options.markdown, DEFAULT_TITLE)

        start = time.perf_counter()
        fragment = transform(options.markdown, options.toc)
        timings.transform_ms = _elapsed_ms(start)

        start = time.perf_counter()
        warnings: list[str] = []
        fragment = rewrite_image_references(fragment, basedir)
        fragment = inline_images(
            fragment,
            basedir,
            timeout=self._config.runtime.image_timeout_s,
            max_workers=self._config.runtime.image_workers,
            warnings=warnings,
        )
        timings.assets_ms = _elapsed_ms(start)

        start = time.perf_counter()
        css = compose_css(theme, css_files)
        document = build_html(fragment, css, title)
        timings.style_ms = _elapsed_ms(start)
        return DocumentResult(html=document, title=title, fragment=fragment, css=css, warnings=warnings)

    def render_pdf(
        self,
        options: RenderOptions,
        output: Path | None = None,
        *,
        source: str = "<string>",
    ) -> ConversionResult:
        context = _RenderContext(
            run_id=generate_run_id(),
            source=source,
            options=options,
            timings=StageTimings(),
        )
        started = time.perf_counter()
        try:
            document = self.build_document(options, context.timings)
            request = build_pdf_request(options, document.title)
            render_start = time.perf_counter()
            pdf = self._rasterizer.rasterize(document.html, request)
            context.timings.render_ms = _elapsed_ms(render_start)
            if output is not None:
                self._write_output(output, pdf)
        except ConversionError as exc:
            self._log_failure(context, exc, output)
            raise

        self._log_success(context, document.warnings, output, len(pdf))
        target = output.name if output is not None else "memory"
        summary = f"Rendered {source} -> {target} in {time.perf_counter() - started:.2f}s"
        return ConversionResult(
            run_id=context.run_id,
            title=document.title,
            pdf=pdf,
            output_path=output,
            warnings=document.warnings,
            summary=summary,
        )

    def _write_output(self, output: Path, pdf: bytes) -> None:
        try:
            atomic_write_bytes(output, pdf)
        except OSError as exc:
            raise ConversionError("WRITE_FAILED", f"Could not write {output}: {exc}") from exc

    def convert_file(self, path: Path, output: Path, options: RenderOptions | None = None) -> ConversionResult:
        markdown = self.load_markdown(path)
        base = options or RenderOptions(markdown="")
        merged = replace(base, markdown=markdown, basedir=base.basedir or path.parent)
        return self.render_pdf(merged, output, source=str(path))

    def _log_success(
        self, context: _RenderContext, warnings: list[str], output: Path | None, size_bytes: int
    ) -> None:
        self._logger.append(
            RunLogEntry(
                run_id=context.run_id,
                source=context.source,
                status="success",
                theme=context.options.theme,
                warnings=warnings,
                error_code=None,
                timings=context.timings,
                output_path=str(output) if output is not None else None,
                size_bytes=size_bytes,
            )
        )

    def _log_failure(self, context: _RenderContext, exc: ConversionError, output: Path | None) -> None:
        self._logger.append(
            RunLogEntry(
                run_id=context.run_id,
                source=context.source,
                status="failure",
                theme=context.options.theme,
                warnings=[],
                error_code=exc.code,
                timings=context.timings,
                output_path=str(output) if output is not None else None,
                size_bytes=0,
            )
        )


__all__ = [
    "ConversionService",
    "ConversionResult",
    "ConversionError",
    "DocumentResult",
    "RenderOptions",
]
