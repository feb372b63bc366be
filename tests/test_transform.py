from md2pdf.transform import highlight_code, render_math, render_toc, transform


def test_heading_anchor_ids() -> None:
    html = transform("# Hello World\n\n### Third level", toc_enabled=False)
    assert '<h1 id="hello-world">Hello World</h1>' in html
    assert '<h3 id="third-level">' in html


def test_raw_html_linkify_and_typographer() -> None:
    html = transform('<div class="raw">kept</div>\n\nSee https://example.com -- he said "hi"', toc_enabled=False)
    assert '<div class="raw">kept</div>' in html
    assert '<a href="https://example.com">' in html
    assert "“hi”" in html
    assert "–" in html


def test_attribute_syntax_inline_and_block() -> None:
    html = transform("{.lead}\nIntro text\n\nPress `Ctrl`{.kbd}", toc_enabled=False)
    assert '<p class="lead">Intro text</p>' in html
    assert '<code class="kbd">Ctrl</code>' in html


def test_footnotes_render_reference_and_block() -> None:
    html = transform("Claim[^1].\n\n[^1]: Source.", toc_enabled=False)
    assert 'class="footnote-ref"' in html
    assert 'class="footnotes"' in html
    assert "Source." in html


def test_task_list_is_disabled_and_labelled() -> None:
    html = transform("- [x] done\n- [ ] todo", toc_enabled=False)
    assert "task-list-item-checkbox" in html
    assert 'disabled="disabled"' in html
    assert 'checked="checked"' in html
    assert "<label" in html


def test_definition_list() -> None:
    html = transform("Term\n: Definition", toc_enabled=False)
    assert "<dl>" in html
    assert "<dt>Term</dt>" in html
    assert "<dd>Definition</dd>" in html


def test_inline_math_is_typeset() -> None:
    html = transform("Area $x^2$ here", toc_enabled=False)
    assert '<span class="math inline">' in html
    assert "<math" in html


def test_malformed_math_does_not_abort() -> None:
    html = transform("Before $$\\frac{1$$ after\n\nNext paragraph", toc_enabled=False)
    assert "Before" in html
    assert "after" in html
    assert "Next paragraph" in html


def test_render_math_degrades_to_error_span() -> None:
    output = render_math("\\frac{1}", {"display_mode": True})
    assert output.startswith("<math") or 'class="math-error"' in output
    assert render_math("\\begin{matrix}", {"display_mode": False})


def test_toc_placeholder_replaced_with_levels_one_to_three() -> None:
    source = "[[toc]]\n\n# One\n\n## Two\n\n### Three\n\n#### Four\n"
    html = transform(source, toc_enabled=True)
    assert '<nav class="toc">' in html
    assert "[[toc]]" not in html
    assert 'href="#one"' in html
    assert 'href="#two"' in html
    assert 'href="#three"' in html
    assert 'href="#four"' not in html


def test_toc_marker_left_alone_when_disabled() -> None:
    html = transform("[[TOC]]\n\n# One", toc_enabled=False)
    assert "[[TOC]]" in html
    assert "<nav" not in html


def test_render_toc_nests_by_level() -> None:
    html = render_toc([(1, "one", "One"), (2, "two", "Two"), (3, "three", "Three"), (1, "four", "Four")])
    assert html == (
        '<nav class="toc"><ul><li><a href="#one">One</a>'
        '<ul><li><a href="#two">Two</a>'
        '<ul><li><a href="#three">Three</a></li></ul></li></ul>'
        '</li><li><a href="#four">Four</a></li></ul></nav>\n'
    )


def test_known_language_is_highlighted() -> None:
    html = transform("```python\nprint('hi')\n```", toc_enabled=False)
    assert '<code class="language-python">' in html
    assert '<span class="nb">print</span>' in html


def test_unknown_language_falls_back_to_escaped_text() -> None:
    html = transform("```nosuchlang\n<b>x</b>\n```", toc_enabled=False)
    assert '<pre class="highlight"><code>' in html
    assert "&lt;b&gt;x&lt;/b&gt;" in html


def test_highlight_code_without_language() -> None:
    assert highlight_code("a < b", "") == '<pre class="highlight"><code>a &lt; b</code></pre>'


def test_transform_is_deterministic() -> None:
    source = "# Title\n\n[[toc]]\n\n## Part\n\nText[^n] $a+b$\n\n[^n]: note"
    assert transform(source, True) == transform(source, True)
