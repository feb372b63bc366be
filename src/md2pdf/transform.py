"""Markdown to HTML fragment compilation.

The parser is assembled per call from markdown-it-py and mdit-py-plugins.
Plugin order is significant: anchors must assign heading ids before the
table of contents is built, and attribute syntax must be parsed before
footnotes and task lists inspect the token stream.
"""

from __future__ import annotations

import html
import re

from latex2mathml.converter import convert as tex_to_mathml
from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.attrs import attrs_block_plugin, attrs_plugin
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

TOC_MARKER_RE = re.compile(r"^\[\[toc\]\]$", re.IGNORECASE)
TOC_LEVELS = (1, 2, 3)


def highlight_code(code: str, lang: str, attrs: str = "") -> str:
    """Return highlighted ``<pre>`` markup, or escaped text for unknown languages."""

    if lang:
        try:
            lexer = get_lexer_by_name(lang, stripall=False)
        except ClassNotFound:
            lexer = None
        if lexer is not None:
            tokens = highlight(code, lexer, HtmlFormatter(nowrap=True))
            return f'<pre class="highlight"><code class="language-{html.escape(lang)}">{tokens}</code></pre>'
    return f'<pre class="highlight"><code>{html.escape(code, quote=False)}</code></pre>'


def render_math(content: str, config: dict) -> str:
    display = "block" if config.get("display_mode") else "inline"
    try:
        return tex_to_mathml(content, display=display)
    except Exception:
        # latex2mathml raises a zoo of exception types on malformed TeX
        return f'<span class="math-error" title="Invalid math">{html.escape(content)}</span>'


def _heading_text(inline: Token) -> str:
    children = inline.children or []
    return "".join(child.content for child in children if child.type in ("text", "code_inline"))


def _collect_headings(tokens: list[Token]) -> list[tuple[int, str, str]]:
    headings: list[tuple[int, str, str]] = []
    for idx, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        level = int(token.tag[1:])
        anchor = token.attrGet("id")
        if level not in TOC_LEVELS or not anchor:
            continue
        headings.append((level, str(anchor), _heading_text(tokens[idx + 1])))
    return headings


def render_toc(headings: list[tuple[int, str, str]]) -> str:
    parts = ['<nav class="toc">']
    stack: list[int] = []
    for level, anchor, text in headings:
        while len(stack) > 1 and level < stack[-1]:
            parts.append("</li></ul>")
            stack.pop()
        if not stack or level > stack[-1]:
            parts.append("<ul>")
            stack.append(level)
        else:
            parts.append("</li>")
        parts.append(f'<li><a href="#{html.escape(anchor)}">{html.escape(text)}</a>')
    parts.extend("</li></ul>" for _ in stack)
    parts.append("</nav>")
    return "".join(parts) + "\n"


def _is_toc_marker(tokens: list[Token], idx: int) -> bool:
    return (
        idx + 2 < len(tokens)
        and tokens[idx].type == "paragraph_open"
        and tokens[idx + 1].type == "inline"
        and tokens[idx + 2].type == "paragraph_close"
        and bool(TOC_MARKER_RE.match(tokens[idx + 1].content.strip()))
    )


def _toc_rule(state: StateCore) -> None:
    tokens = state.tokens
    if not any(_is_toc_marker(tokens, idx) for idx in range(len(tokens))):
        return
    toc_html = render_toc(_collect_headings(tokens))
    rebuilt: list[Token] = []
    idx = 0
    while idx < len(tokens):
        if _is_toc_marker(tokens, idx):
            block = Token("html_block", "", 0)
            block.content = toc_html
            block.block = True
            rebuilt.append(block)
            idx += 3
            continue
        rebuilt.append(tokens[idx])
        idx += 1
    state.tokens = rebuilt


def toc_plugin(md: MarkdownIt) -> None:
    md.core.ruler.push("toc", _toc_rule)


def build_markdown_parser(toc_enabled: bool) -> MarkdownIt:
    md = MarkdownIt("gfm-like", {"typographer": True, "highlight": highlight_code})
    md.enable(["replacements", "smartquotes"])

    md.use(anchors_plugin, min_level=1, max_level=6, permalink=False)
    md.use(attrs_plugin)
    md.use(attrs_block_plugin)
    md.use(footnote_plugin)
    md.use(tasklists_plugin, enabled=False, label=True, label_after=True)
    md.use(deflist_plugin)
    md.use(dollarmath_plugin, double_inline=True, renderer=render_math)
    if toc_enabled:
        md.use(toc_plugin)
    return md


def transform(markdown_text: str, toc_enabled: bool = True) -> str:
    """Compile *markdown_text* into an HTML fragment."""

    return build_markdown_parser(toc_enabled).render(markdown_text)


__all__ = [
    "build_markdown_parser",
    "highlight_code",
    "render_math",
    "render_toc",
    "transform",
]
