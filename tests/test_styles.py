from pathlib import Path

import pytest

from md2pdf import styles
from md2pdf.models import ConversionError
from md2pdf.styles import Theme, compose_css, highlight_css


def test_theme_parse_defaults_to_clean() -> None:
    assert Theme.parse(None) is Theme.CLEAN
    assert Theme.parse("") is Theme.CLEAN
    assert Theme.parse("github-dark").is_dark


def test_unknown_theme_is_rejected() -> None:
    with pytest.raises(ConversionError) as excinfo:
        compose_css("neon")
    assert excinfo.value.code == "UNKNOWN_THEME"
    assert str(excinfo.value) == 'Unknown theme "neon". Use clean, serif, academic, or github-dark.'


def test_blocks_are_concatenated_in_cascade_order(tmp_path: Path) -> None:
    extra = tmp_path / "extra.css"
    extra.write_text("/* user-extra */ body { color: red; }", encoding="utf-8")
    css = compose_css("clean", [extra])
    markers = [
        "GitHub-flavoured Markdown body styles, light variant.",
        "MathML output of the dollar-math renderer.",
        ".highlight",
        "Page structure and print-safe break rules",
        "/* clean:",
        "/* user-extra */",
    ]
    positions = [css.index(marker) for marker in markers]
    assert positions == sorted(positions)


def test_dark_theme_uses_dark_base_and_highlight() -> None:
    css = compose_css("github-dark")
    assert "dark variant." in css
    assert "light variant." not in css
    assert highlight_css("github-dark") in css


def test_each_extra_file_is_appended_in_order(tmp_path: Path) -> None:
    first = tmp_path / "first.css"
    second = tmp_path / "second.css"
    first.write_text("/* first */", encoding="utf-8")
    second.write_text("/* second */", encoding="utf-8")
    css = compose_css("serif", [first, second])
    assert css.index("/* first */") < css.index("/* second */")
    assert css.endswith("/* second */")


def test_missing_extra_css_fails(tmp_path: Path) -> None:
    missing = tmp_path / "nope.css"
    with pytest.raises(ConversionError) as excinfo:
        compose_css("clean", [missing])
    assert excinfo.value.code == "CSS_NOT_FOUND"
    assert str(excinfo.value) == f"CSS file not found: {missing}"


def test_missing_bundled_asset_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(styles, "ASSETS_DIR", tmp_path)
    with pytest.raises(ConversionError) as excinfo:
        compose_css("academic")
    assert excinfo.value.code == "MISSING_ASSET"


def test_unknown_highlight_style_fails() -> None:
    with pytest.raises(ConversionError) as excinfo:
        highlight_css("no-such-style")
    assert excinfo.value.code == "MISSING_ASSET"


def test_compose_is_deterministic() -> None:
    assert compose_css("academic") == compose_css("academic")
