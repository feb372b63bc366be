from __future__ import annotations

import html
import re

from jinja2 import Template

from .models import RenderOptions

DEFAULT_TITLE = "Markdown Document"
TITLE_RE = re.compile(r"^\s*#\s+(.+)$", re.MULTILINE)
PLACEHOLDER_RE = re.compile(r"\{(title|page|total|date)\}", re.IGNORECASE)

LIVE_TOKENS = {
    "page": '<span class="pageNumber"></span>',
    "total": '<span class="totalPages"></span>',
    "date": '<span class="date"></span>',
}

DEFAULT_FOOTER_LEFT = "Page {page} of {total}"
DEFAULT_FOOTER_RIGHT = "{date}"

RULE_COLOR_LIGHT = "#d0d7de"
RULE_COLOR_DARK = "#2a3040"

_DOCUMENT_TEMPLATE = Template(
    """<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{{ title|e }}</title>
  <style>{{ css }}</style>
</head>
<body>
  <div class="page-wrap">
    <article class="markdown-body">
{{ content }}
    </article>
  </div>
</body>
</html>"""
)

_ROW_TEMPLATE = Template(
    """
<div style="width:100%;font-size:11px;color:#6e7781;padding:0 10mm;box-sizing:border-box;{{ border }}">
  <div style="display:flex;align-items:center;gap:6mm;line-height:1.35;">
{%- for align, cell in cells %}
    <div style="flex:1;text-align:{{ align }};white-space:nowrap;overflow:hidden;text-overflow:ellipsis;">{{ cell }}</div>
{%- endfor %}
  </div>
</div>"""
)


def extract_title(markdown: str, fallback: str = DEFAULT_TITLE) -> str:
    match = TITLE_RE.search(markdown)
    if not match:
        return fallback
    return match.group(1).strip()


def build_html(content: str, css: str, title: str) -> str:
    return _DOCUMENT_TEMPLATE.render(content=content, css=css, title=title)


def resolve_header_footer_fields(options: RenderOptions, title: str) -> dict[str, str]:
    custom_header = any(
        value.strip() for value in (options.header_left, options.header_center, options.header_right)
    )
    custom_footer = any(
        value.strip() for value in (options.footer_left, options.footer_center, options.footer_right)
    )
    return {
        "header_left": options.header_left if custom_header else "",
        "header_center": options.header_center if custom_header else title,
        "header_right": options.header_right if custom_header else "",
        "footer_left": options.footer_left if custom_footer else DEFAULT_FOOTER_LEFT,
        "footer_center": options.footer_center if custom_footer else "",
        "footer_right": options.footer_right if custom_footer else DEFAULT_FOOTER_RIGHT,
    }


def render_slot_text(text: str, title: str) -> str:
    """Escape *text*, mapping placeholders to the title or the engine's live tokens."""

    parts: list[str] = []
    cursor = 0
    for match in PLACEHOLDER_RE.finditer(text or ""):
        parts.append(html.escape(text[cursor : match.start()]))
        name = match.group(1).lower()
        parts.append(html.escape(title or "") if name == "title" else LIVE_TOKENS[name])
        cursor = match.end()
    parts.append(html.escape((text or "")[cursor:]))
    return "".join(parts)


def _build_row(left: str, center: str, right: str, rule: str, edge: str) -> str:
    if edge == "top":
        border = f"border-top:1px solid {rule};padding-top:2mm;"
    else:
        border = f"border-bottom:1px solid {rule};padding-bottom:2mm;"
    cells = [("left", left), ("center", center), ("right", right)]
    return _ROW_TEMPLATE.render(border=border, cells=cells)


def rule_color(dark: bool) -> str:
    return RULE_COLOR_DARK if dark else RULE_COLOR_LIGHT


def build_header_template(fields: dict[str, str], title: str, rule: str) -> str:
    return _build_row(
        render_slot_text(fields["header_left"], title),
        render_slot_text(fields["header_center"], title),
        render_slot_text(fields["header_right"], title),
        rule,
        "bottom",
    )


def build_footer_template(fields: dict[str, str], title: str, rule: str) -> str:
    return _build_row(
        render_slot_text(fields["footer_left"], title),
        render_slot_text(fields["footer_center"], title),
        render_slot_text(fields["footer_right"], title),
        rule,
        "top",
    )


__all__ = [
    "DEFAULT_TITLE",
    "build_footer_template",
    "build_header_template",
    "build_html",
    "extract_title",
    "render_slot_text",
    "resolve_header_footer_fields",
    "rule_color",
]
